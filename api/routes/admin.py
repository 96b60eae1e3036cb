"""
Admin endpoints.

Order approval, suspension and cancellation, fulfillment task inspection
and manual re-dispatch, billing and renewal reports, customer approval.
"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from api.dependencies import (
    get_coordinator,
    get_customer_service,
    get_lifecycle_service,
    get_order_service,
)
from core.application.dtos import CancelOrderRequest, CustomerDTO, DomainDTO, OrderDTO, TaskDTO
from core.application.services import (
    CustomerApplicationService,
    OrderApplicationService,
    OrderLifecycleService,
)
from orchestration import FulfillmentCoordinator


router = APIRouter()


# =============================================================================
# ORDER LIFECYCLE
# =============================================================================

@router.post("/orders/{order_number}/approve", response_model=OrderDTO)
async def approve_order(
    order_number: str,
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """Approve a pending or paid order and enqueue its fulfillment tasks."""
    return await service.approve(order_number)


@router.post("/orders/{order_number}/cancel", response_model=OrderDTO)
async def cancel_order(
    order_number: str,
    request: Optional[CancelOrderRequest] = Body(default=None),
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.cancel(order_number, request.reason if request else None)


@router.post("/orders/{order_number}/suspend", response_model=OrderDTO)
async def suspend_order(
    order_number: str,
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.suspend(order_number)


@router.post("/orders/{order_number}/reactivate", response_model=OrderDTO)
async def reactivate_order(
    order_number: str,
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.reactivate(order_number)


# =============================================================================
# FULFILLMENT TASKS
# =============================================================================

@router.get("/orders/{order_number}/tasks", response_model=List[TaskDTO])
async def list_order_tasks(
    order_number: str,
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.list_tasks(order_number)


@router.post("/tasks/{task_id}/retry", response_model=TaskDTO)
async def retry_task(
    task_id: int,
    coordinator: FulfillmentCoordinator = Depends(get_coordinator),
):
    """Re-queue a permanently failed task with a fresh attempt budget."""
    task = await coordinator.retry_task(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Task {task_id} does not exist or has not failed",
        )
    return TaskDTO.from_entity(task)


@router.post("/domains/{domain_id}/register", response_model=TaskDTO)
async def redispatch_domain_registration(
    domain_id: int,
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """Move a failed domain back to pending and enqueue a new registration."""
    return await service.redispatch_domain_registration(domain_id)


# =============================================================================
# REPORTS
# =============================================================================

@router.get("/billing/due", response_model=List[OrderDTO])
async def billing_due(
    days_ahead: int = Query(default=7, ge=0, le=366),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.due_for_invoicing(days_ahead=days_ahead)


@router.get("/domains/expiring", response_model=List[DomainDTO])
async def expiring_domains(
    days: int = Query(default=30, ge=0, le=366),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.expiring_domains(days=days)


# =============================================================================
# CUSTOMERS
# =============================================================================

@router.post("/customers/{customer_id}/approve", response_model=CustomerDTO)
async def approve_customer(
    customer_id: int,
    service: CustomerApplicationService = Depends(get_customer_service),
):
    return await service.approve(customer_id)


@router.post("/customers/{customer_id}/reject", response_model=CustomerDTO)
async def reject_customer(
    customer_id: int,
    service: CustomerApplicationService = Depends(get_customer_service),
):
    return await service.reject(customer_id)


@router.post("/customers/{customer_id}/suspend", response_model=CustomerDTO)
async def suspend_customer(
    customer_id: int,
    service: CustomerApplicationService = Depends(get_customer_service),
):
    return await service.suspend(customer_id)
