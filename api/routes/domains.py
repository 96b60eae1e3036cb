"""Domain availability endpoint."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_registrar_gateway
from core.application.interfaces import IRegistrarGateway
from core.domain.value_objects import DomainName


router = APIRouter()


@router.get("/check", summary="Check whether a domain name can be registered")
async def check_domain(
    domain: str = Query(..., min_length=4, max_length=253),
    registrar: IRegistrarGateway = Depends(get_registrar_gateway),
):
    name = DomainName(domain)
    available = await registrar.check_availability(name.value)
    return {"domain": name.value, "tld": name.tld, "available": available}
