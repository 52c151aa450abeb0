# per-user cart stored under "cart:<uid>"
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import aiosqlite

from db import store
from db.database import read_value, transaction, write_value
from db.models import LineItem, Product

TAX_RATE = 0.05


@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    tax: float
    total: float


def cart_key(uid: int) -> str:
    return f"cart:{uid}"


def compute_totals(lines: Iterable[LineItem], catalog: Iterable[Product]) -> CartTotals:
    """
    subtotal = sum(qty * price), a product missing from `catalog` counts as 0.
    Values are not rounded; format them for display.
    """
    prices = {p.id: p.price for p in catalog}
    subtotal = sum(prices.get(line.product_id, 0.0) * line.qty for line in lines)
    tax = subtotal * TAX_RATE
    return CartTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


async def load_cart(
    uid: int, conn: Optional[aiosqlite.Connection] = None
) -> List[LineItem]:
    async with transaction(conn) as c:
        records = await read_value(c, cart_key(uid))
    return [LineItem.from_record(r) for r in records or []]


async def save_cart(
    uid: int, lines: List[LineItem], conn: Optional[aiosqlite.Connection] = None
) -> None:
    async with transaction(conn) as c:
        await write_value(c, cart_key(uid), [line.to_record() for line in lines])


async def add_to_cart(uid: int, product_id: int) -> List[LineItem]:
    """Add one unit; repeat adds of the same product merge into one line."""
    async with transaction() as conn:
        lines = await load_cart(uid, conn)
        for idx, line in enumerate(lines):
            if line.product_id == product_id:
                lines[idx] = LineItem(product_id, line.qty + 1)
                break
        else:
            lines.append(LineItem(product_id, 1))
        await save_cart(uid, lines, conn)
    return lines


async def set_quantity(uid: int, index: int, delta: int) -> bool:
    """
    Adjust the line at `index` by `delta`.
    Refuses (returns False, cart untouched) when the new quantity would be
    <= 0 or the index is out of range. Lines are never auto-removed here.
    """
    async with transaction() as conn:
        lines = await load_cart(uid, conn)
        if not 0 <= index < len(lines):
            return False
        new_qty = lines[index].qty + delta
        if new_qty <= 0:
            return False
        lines[index] = LineItem(lines[index].product_id, new_qty)
        await save_cart(uid, lines, conn)
    return True


async def remove_line(uid: int, index: int) -> bool:
    async with transaction() as conn:
        lines = await load_cart(uid, conn)
        if not 0 <= index < len(lines):
            return False
        del lines[index]
        await save_cart(uid, lines, conn)
    return True


async def clear_cart(uid: int, conn: Optional[aiosqlite.Connection] = None) -> None:
    await save_cart(uid, [], conn)


async def cart_count(uid: int) -> int:
    """Total units in the cart, for the badge next to the cart menu."""
    return sum(line.qty for line in await load_cart(uid))


async def cart_details(uid: int) -> Tuple[List[Tuple[LineItem, Optional[Product]]], CartTotals]:
    """Cart lines paired with their products (None once deleted) and the totals."""
    lines = await load_cart(uid)
    catalog = await store.products.list()
    by_id = {p.id: p for p in catalog}
    return [(line, by_id.get(line.product_id)) for line in lines], compute_totals(
        lines, catalog
    )
