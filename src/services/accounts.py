# admin account management and the user's own guest list
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import aiosqlite

from db import store
from db.database import delete_value, transaction
from db.models import Guest, GuestListPatch, Order, User, VendorPatch
from services import auth
from services.cart import cart_key
from utils.errors import DuplicateGuest, DuplicateUsername, Forbidden, NotFound
from utils.logger import get_logger

_logger = get_logger(__name__)

RECENT_ORDERS = 5


@dataclass(frozen=True)
class AdminStats:
    users: int
    vendors: int
    orders: int
    recent_orders: Tuple[Order, ...]  # newest first


async def admin_stats() -> AdminStats:
    all_users = await store.users.list()
    all_orders = await store.orders.list()
    return AdminStats(
        users=sum(1 for u in all_users if u.role == "user"),
        vendors=sum(1 for u in all_users if u.role == "vendor"),
        orders=len(all_orders),
        recent_orders=tuple(reversed(all_orders[-RECENT_ORDERS:])),
    )


async def list_vendors() -> List[User]:
    return await store.users.filter(lambda u: u.role == "vendor")


async def list_regular_users() -> List[User]:
    return await store.users.filter(lambda u: u.role == "user")


async def create_vendor(
    username: str, password: str, name: str, membership: str = "Standard"
) -> User:
    if not username or not password or not name:
        raise ValueError("Username, password and name are required.")

    async with transaction() as conn:
        if any(u.username == username for u in await store.users.list(conn)):
            raise DuplicateUsername(username)
        vendor = User(
            id=await store.users.next_id(conn),
            username=username,
            password=password,
            role="vendor",
            name=name,
            membership=membership or "Standard",
        )
        await store.users.add(vendor, conn)

    _logger.info(f"Vendor {vendor.id} ({username}) created with {vendor.membership} plan.")
    return vendor


async def set_vendor_membership(vendor_id: int, membership: str) -> bool:
    vendor = await store.users.find(vendor_id)
    if vendor is None or vendor.role != "vendor":
        return False
    return await store.users.update(vendor_id, VendorPatch(membership=membership))


async def delete_user(user_id: int) -> bool:
    async with transaction() as conn:
        removed = await store.users.remove(user_id, conn)
        if removed:
            await delete_value(conn, cart_key(user_id))
    if removed:
        _logger.info(f"User {user_id} deleted.")
    return removed


# ---------------------------
# Guest list
# ---------------------------


async def _stored_user(
    user: User, conn: Optional[aiosqlite.Connection] = None
) -> User:
    if user.role != "user":
        raise Forbidden("Only user accounts keep a guest list.")
    stored = await store.users.find(user.id, conn)
    if stored is None:
        raise NotFound(f"User {user.id} no longer exists.")
    return stored


async def list_guests(user: User) -> List[Guest]:
    return list((await _stored_user(user)).guest_list or ())


async def _save_guests(
    stored: User, guests: Tuple[Guest, ...], conn: aiosqlite.Connection
) -> User:
    await store.users.update(stored.id, GuestListPatch(guest_list=guests), conn)
    updated = await _stored_user(stored, conn)
    await auth.refresh_session(updated, conn)
    return updated


async def add_guest(user: User, name: str, email: str = "") -> User:
    """Append a guest to the user's own list. Returns the updated user."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Guest name is required.")
    async with transaction() as conn:
        stored = await _stored_user(user, conn)
        guests = stored.guest_list or ()
        if any(g.name == name for g in guests):
            raise DuplicateGuest(name)
        guest = Guest(name=name, email=(email or "").strip())
        return await _save_guests(stored, guests + (guest,), conn)


async def remove_guest(user: User, name: str) -> User:
    """Drop the first guest called `name`; no-op if there is none."""
    async with transaction() as conn:
        stored = await _stored_user(user, conn)
        guests = list(stored.guest_list or ())
        for idx, g in enumerate(guests):
            if g.name == name:
                del guests[idx]
                return await _save_guests(stored, tuple(guests), conn)
    return stored
