# turning a cart into an order, and the vendor side of order handling
from __future__ import annotations

import enum
from datetime import date
from typing import List, Optional

from db import store
from db.database import transaction
from db.models import (
    ORDER_COMPLETED,
    ORDER_PENDING,
    Order,
    OrderStatusPatch,
    User,
)
from services import cart
from utils.errors import EmptyCart, Forbidden
from utils.logger import get_logger
from utils.pure import round_money

_logger = get_logger(__name__)


class ApprovalResult(enum.Enum):
    APPROVED = "approved"
    ALREADY_COMPLETED = "already_completed"
    NOT_FOUND = "not_found"


async def checkout(user: User, when: Optional[date] = None) -> Order:
    """
    Create a Pending order from the user's cart and empty the cart, all in
    one commit. Raises EmptyCart when there is nothing to order.

    The total is fixed here (tax included, rounded to cents) and never
    recomputed. `vendor_id` is taken from the first line's product only, so
    a multi-vendor cart still records a single vendor.
    """
    when = when or date.today()
    async with transaction() as conn:
        lines = await cart.load_cart(user.id, conn)
        if not lines:
            raise EmptyCart()

        catalog = await store.products.list(conn)
        totals = cart.compute_totals(lines, catalog)
        first = next((p for p in catalog if p.id == lines[0].product_id), None)

        order = Order(
            id=await store.orders.next_id(conn),
            user_id=user.id,
            vendor_id=first.vendor_id if first else None,
            items=tuple(lines),
            total=round_money(totals.subtotal * (1 + cart.TAX_RATE)),
            status=ORDER_PENDING,
            date=when.isoformat(),
        )
        await store.orders.add(order, conn)
        await cart.clear_cart(user.id, conn)

    _logger.info(
        f"User {user.id} checked out order {order.id}: "
        f"{order.item_count} items, total {order.total:.2f}"
    )
    return order


async def list_user_orders(user_id: int) -> List[Order]:
    return await store.orders.filter(lambda o: o.user_id == user_id)


async def list_vendor_orders(vendor_id: int) -> List[Order]:
    """Orders recorded against the vendor, or holding any of its products."""
    own = {p.id for p in await store.products.list() if p.vendor_id == vendor_id}
    return await store.orders.filter(
        lambda o: o.vendor_id == vendor_id
        or any(i.product_id in own for i in o.items)
    )


async def approve_order(vendor: User, order_id: int) -> ApprovalResult:
    """
    Pending -> Completed. Already completed or missing orders are left alone
    and reported through the result, not raised.
    """
    order = await store.orders.find(order_id)
    if order is None:
        return ApprovalResult.NOT_FOUND
    if order.id not in {o.id for o in await list_vendor_orders(vendor.id)}:
        raise Forbidden(f"Order {order_id} is not one of vendor {vendor.id}'s orders.")
    if order.status == ORDER_COMPLETED:
        return ApprovalResult.ALREADY_COMPLETED

    await store.orders.update(order_id, OrderStatusPatch(status=ORDER_COMPLETED))
    _logger.info(f"Vendor {vendor.id} completed order {order_id}.")
    return ApprovalResult.APPROVED
