# provide dataclass models and the typed patches used to update them
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

ROLES = ("admin", "vendor", "user")
PRODUCT_STATUSES = ("Active", "Inactive")
ORDER_PENDING = "Pending"
ORDER_COMPLETED = "Completed"
ORDER_STATUSES = (ORDER_PENDING, ORDER_COMPLETED)
GUEST_INVITED = "Invited"


@dataclass(frozen=True)
class Guest:
    name: str
    email: str = ""
    status: str = GUEST_INVITED

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> Guest:
        return cls(
            name=rec["name"],
            email=rec.get("email") or "",
            status=rec.get("status", GUEST_INVITED),
        )


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password: str
    role: str  # "admin", "vendor" or "user"
    name: str
    membership: Optional[str] = None  # vendors only
    guest_list: Optional[Tuple[Guest, ...]] = None  # users only

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> User:
        guests = rec.get("guest_list")
        return cls(
            id=int(rec["id"]),
            username=rec["username"],
            password=rec["password"],
            role=rec["role"],
            name=rec.get("name", ""),
            membership=rec.get("membership"),
            guest_list=(
                tuple(Guest.from_record(g) for g in guests)
                if guests is not None
                else None
            ),
        )

    def to_record(self) -> Dict[str, Any]:
        rec = dataclasses.asdict(self)
        # keep the stored shape per role: no null membership on users, etc.
        return {k: v for k, v in rec.items() if v is not None}


@dataclass(frozen=True)
class Product:
    id: int
    vendor_id: int
    name: str
    price: float
    status: str  # "Active" or "Inactive"
    description: str = ""

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> Product:
        return cls(
            id=int(rec["id"]),
            vendor_id=int(rec["vendor_id"]),
            name=rec["name"],
            price=float(rec["price"]),
            status=rec["status"],
            description=rec.get("description") or "",
        )

    def to_record(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class LineItem:
    """One product/quantity pair, used for cart lines and order items alike."""

    product_id: int
    qty: int

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> LineItem:
        return cls(product_id=int(rec["product_id"]), qty=int(rec["qty"]))

    def to_record(self) -> Dict[str, Any]:
        return {"product_id": self.product_id, "qty": self.qty}


@dataclass(frozen=True)
class Order:
    id: int
    user_id: int
    vendor_id: Optional[int]  # vendor of the first cart line only
    items: Tuple[LineItem, ...]
    total: float  # tax included, fixed at checkout time
    status: str
    date: str

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> Order:
        vendor_id = rec.get("vendor_id")
        return cls(
            id=int(rec["id"]),
            user_id=int(rec["user_id"]),
            vendor_id=int(vendor_id) if vendor_id is not None else None,
            items=tuple(LineItem.from_record(i) for i in rec.get("items", [])),
            total=float(rec["total"]),
            status=rec["status"],
            date=rec.get("date", ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @property
    def item_count(self) -> int:
        return sum(i.qty for i in self.items)


# ---------------------------
# Patches
# ---------------------------


@dataclass(frozen=True)
class Patch:
    """
    Partial update for one entity type.
    Only fields declared on the subclass can change; None means "keep".
    """

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if getattr(self, f.name) is not None
        }

    def validate(self) -> None:
        pass


@dataclass(frozen=True)
class ProductPatch(Patch):
    name: Optional[str] = None
    price: Optional[float] = None
    status: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:
        if self.name is not None and not self.name.strip():
            raise ValueError("Product name cannot be empty.")
        if self.price is not None and self.price < 0:
            raise ValueError("Price cannot be negative.")
        if self.status is not None and self.status not in PRODUCT_STATUSES:
            raise ValueError(f"Unknown product status {self.status!r}.")


@dataclass(frozen=True)
class VendorPatch(Patch):
    name: Optional[str] = None
    membership: Optional[str] = None

    def validate(self) -> None:
        if self.name is not None and not self.name.strip():
            raise ValueError("Vendor name cannot be empty.")
        if self.membership is not None and not self.membership.strip():
            raise ValueError("Membership tier cannot be empty.")


@dataclass(frozen=True)
class GuestListPatch(Patch):
    guest_list: Optional[Tuple[Guest, ...]] = None


@dataclass(frozen=True)
class OrderStatusPatch(Patch):
    status: Optional[str] = None

    def validate(self) -> None:
        if self.status is not None and self.status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status {self.status!r}.")
