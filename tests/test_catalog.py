from helpers import StoreTestCase

from db.models import ProductPatch
from services import catalog
from utils.errors import Forbidden


class CatalogTestCase(StoreTestCase):
    async def test_list_active_products_and_search(self):
        ids = [p.id for p in await catalog.list_active_products()]
        self.assertEqual(ids, [101, 102, 103])

        # case-insensitive substring on name only
        self.assertEqual([p.id for p in await catalog.list_active_products("BALL")], [101])
        self.assertEqual([p.id for p in await catalog.list_active_products("floral")], [])
        self.assertEqual(await catalog.list_active_products("zzz"), [])

    async def test_inactive_products_are_hidden(self):
        vendor = await self.user(3)
        await catalog.update_product(vendor, 103, ProductPatch(status="Inactive"))
        self.assertEqual(
            [p.id for p in await catalog.list_active_products()], [101, 102]
        )
        # still listed for its vendor
        self.assertEqual([p.id for p in await catalog.list_by_vendor(3)], [103])

    async def test_list_by_vendor(self):
        self.assertEqual([p.id for p in await catalog.list_by_vendor(2)], [101, 102])
        self.assertEqual(await catalog.list_by_vendor(99), [])

    async def test_create_product(self):
        vendor = await self.user(2)
        prod = await catalog.create_product(
            vendor, "  Party Hats ", 3.25, description="Pack of 10", status="Inactive"
        )
        self.assertEqual(prod.id, 104)
        self.assertEqual(prod.vendor_id, 2)
        self.assertEqual(prod.name, "Party Hats")
        self.assertEqual(await catalog.get_product(104), prod)
        self.assertIn(prod, await catalog.list_by_vendor(2))
        self.assertNotIn(prod, await catalog.list_active_products())

    async def test_create_product_validation(self):
        vendor = await self.user(2)
        with self.assertRaises(ValueError):
            await catalog.create_product(vendor, "Hats", -1.0)
        with self.assertRaises(ValueError):
            await catalog.create_product(vendor, "Hats", 1.0, status="Gone")
        with self.assertRaises(ValueError):
            await catalog.create_product(vendor, "   ", 1.0)
        with self.assertRaises(Forbidden):
            await catalog.create_product(await self.user(4), "Hats", 1.0)
        self.assertEqual(len(await catalog.list_products()), 3)

    async def test_update_product_checks_ownership(self):
        owner, other = await self.user(2), await self.user(3)

        self.assertTrue(
            await catalog.update_product(owner, 101, ProductPatch(price=12.5))
        )
        self.assertEqual((await catalog.get_product(101)).price, 12.5)

        with self.assertRaises(Forbidden):
            await catalog.update_product(other, 101, ProductPatch(price=1.0))
        self.assertEqual((await catalog.get_product(101)).price, 12.5)

        self.assertFalse(await catalog.update_product(owner, 999, ProductPatch(name="x")))

    async def test_delete_product_checks_ownership(self):
        owner, other = await self.user(2), await self.user(3)

        with self.assertRaises(Forbidden):
            await catalog.delete_product(other, 102)
        self.assertIsNotNone(await catalog.get_product(102))

        self.assertTrue(await catalog.delete_product(owner, 102))
        self.assertIsNone(await catalog.get_product(102))
        self.assertFalse(await catalog.delete_product(owner, 102))
