"""Hosting package catalog endpoints."""
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_order_service
from core.application.dtos import PackageDTO
from core.application.services import OrderApplicationService


router = APIRouter()


@router.get("", response_model=List[PackageDTO], summary="List active hosting packages")
async def list_packages(service: OrderApplicationService = Depends(get_order_service)):
    return await service.list_packages()
