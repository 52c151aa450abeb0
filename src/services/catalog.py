# product listing for the marketplace, product management for vendors
from __future__ import annotations

from typing import List, Optional

from db import store
from db.models import PRODUCT_STATUSES, Product, ProductPatch, User
from utils.errors import Forbidden
from utils.logger import get_logger

_logger = get_logger(__name__)


async def list_products() -> List[Product]:
    return await store.products.list()


async def get_product(product_id: int) -> Optional[Product]:
    return await store.products.find(product_id)


async def list_active_products(query: str = "") -> List[Product]:
    """
    Active products, optionally narrowed to names containing `query`
    (case-insensitive). An empty result is not an error.
    """
    needle = (query or "").lower()
    return await store.products.filter(
        lambda p: p.status == "Active" and (not needle or needle in p.name.lower())
    )


async def list_by_vendor(vendor_id: int) -> List[Product]:
    return await store.products.filter(lambda p: p.vendor_id == vendor_id)


async def create_product(
    vendor: User,
    name: str,
    price: float,
    description: str = "",
    status: str = "Active",
) -> Product:
    if vendor.role != "vendor":
        raise Forbidden("Only vendors can list products.")
    if not name or not name.strip():
        raise ValueError("Product name cannot be empty.")
    if price < 0:
        raise ValueError("Price cannot be negative.")
    if status not in PRODUCT_STATUSES:
        raise ValueError(f"Unknown product status {status!r}.")

    product = Product(
        id=await store.products.next_id(),
        vendor_id=vendor.id,
        name=name.strip(),
        price=float(price),
        status=status,
        description=description,
    )
    await store.products.add(product)
    _logger.info(f"Vendor {vendor.id} created product {product.id} ({product.name}).")
    return product


async def _owned_product(vendor: User, product_id: int) -> Optional[Product]:
    product = await store.products.find(product_id)
    if product is not None and product.vendor_id != vendor.id:
        raise Forbidden(f"Product {product_id} belongs to another vendor.")
    return product


async def update_product(vendor: User, product_id: int, patch: ProductPatch) -> bool:
    """False if the product does not exist; Forbidden if another vendor owns it."""
    if await _owned_product(vendor, product_id) is None:
        return False
    return await store.products.update(product_id, patch)


async def delete_product(vendor: User, product_id: int) -> bool:
    if await _owned_product(vendor, product_id) is None:
        return False
    removed = await store.products.remove(product_id)
    _logger.info(f"Vendor {vendor.id} deleted product {product_id}.")
    return removed
