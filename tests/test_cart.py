from helpers import StoreTestCase

from db.database import connect, read_value
from db.models import LineItem, Product
from services import cart, catalog


class CartTestCase(StoreTestCase):
    async def test_empty_until_first_add(self):
        self.assertEqual(await cart.load_cart(4), [])
        self.assertEqual(await cart.cart_count(4), 0)

    async def test_repeat_add_merges_quantity(self):
        await cart.add_to_cart(4, 101)
        lines = await cart.add_to_cart(4, 101)
        self.assertEqual(lines, [LineItem(101, 2)])
        self.assertEqual(await cart.load_cart(4), [LineItem(101, 2)])

        await cart.add_to_cart(4, 103)
        self.assertEqual(
            await cart.load_cart(4), [LineItem(101, 2), LineItem(103, 1)]
        )
        self.assertEqual(await cart.cart_count(4), 3)

    async def test_carts_are_per_user_under_derived_key(self):
        await cart.add_to_cart(4, 101)
        await cart.add_to_cart(5, 102)
        self.assertEqual(await cart.load_cart(4), [LineItem(101, 1)])
        self.assertEqual(await cart.load_cart(5), [LineItem(102, 1)])

        async with connect() as conn:
            stored = await read_value(conn, "cart:4")
        self.assertEqual(stored, [{"product_id": 101, "qty": 1}])

    async def test_set_quantity_never_reaches_zero(self):
        await cart.add_to_cart(4, 101)
        await cart.add_to_cart(4, 101)

        self.assertTrue(await cart.set_quantity(4, 0, 1))
        self.assertEqual((await cart.load_cart(4))[0].qty, 3)

        self.assertFalse(await cart.set_quantity(4, 0, -3))
        self.assertEqual((await cart.load_cart(4))[0].qty, 3)

        self.assertTrue(await cart.set_quantity(4, 0, -2))
        self.assertEqual((await cart.load_cart(4))[0].qty, 1)
        self.assertFalse(await cart.set_quantity(4, 0, -1))
        self.assertEqual(await cart.load_cart(4), [LineItem(101, 1)])

        # out of range indexes are refused too
        self.assertFalse(await cart.set_quantity(4, 5, 1))
        self.assertFalse(await cart.set_quantity(4, -1, 1))

    async def test_remove_line_by_index(self):
        for pid in (101, 102, 103):
            await cart.add_to_cart(4, pid)
        self.assertTrue(await cart.remove_line(4, 1))
        self.assertEqual(
            [line.product_id for line in await cart.load_cart(4)], [101, 103]
        )
        self.assertFalse(await cart.remove_line(4, 2))
        self.assertEqual(len(await cart.load_cart(4)), 2)

    async def test_clear_cart(self):
        await cart.add_to_cart(4, 101)
        await cart.clear_cart(4)
        self.assertEqual(await cart.load_cart(4), [])

    def test_compute_totals_treats_unknown_products_as_free(self):
        catalog_ = [Product(101, 2, "Colorful Balloons", 15.0, "Active")]
        totals = cart.compute_totals([LineItem(101, 2), LineItem(999, 3)], catalog_)
        self.assertAlmostEqual(totals.subtotal, 30.0)
        self.assertAlmostEqual(totals.tax, 1.5)
        self.assertAlmostEqual(totals.total, 31.5)

        empty = cart.compute_totals([], catalog_)
        self.assertEqual((empty.subtotal, empty.tax, empty.total), (0, 0, 0))

    async def test_cart_details_keeps_deleted_products(self):
        await cart.add_to_cart(4, 102)
        await cart.add_to_cart(4, 103)
        await catalog.delete_product(await self.user(3), 103)

        details, totals = await cart.cart_details(4)
        self.assertEqual([line.product_id for line, _ in details], [102, 103])
        self.assertEqual(details[0][1].name, "Party Streamers")
        self.assertIsNone(details[1][1])
        self.assertAlmostEqual(totals.subtotal, 5.5)
