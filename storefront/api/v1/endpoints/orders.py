"""
Order endpoints — checkout for any authenticated user, full log for admins.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.api.v1.deps import get_current_identity, get_order_intake, require_admin
from storefront.models.order import Order
from storefront.schemas.order import OrderCreate, OrderRead
from storefront.schemas.token import Identity
from storefront.services.orders import OrderIntake

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderRead, status_code=201)
async def submit_order(
    body: OrderCreate,
    intake: OrderIntake = Depends(get_order_intake),
    identity: Identity = Depends(get_current_identity),
) -> Order:
    return await intake.submit(body, identity)


@router.get("/mine", response_model=list[OrderRead])
async def list_my_orders(
    intake: OrderIntake = Depends(get_order_intake),
    identity: Identity = Depends(get_current_identity),
) -> list[Order]:
    return await intake.list(user_id=identity.id)


@router.get("", response_model=list[OrderRead])
async def list_orders(
    intake: OrderIntake = Depends(get_order_intake),
    _admin: Identity = Depends(require_admin),
) -> list[Order]:
    return await intake.list()
