from helpers import StoreTestCase

from db import store
from db.database import connect, read_value
from db.models import Guest
from services import accounts, auth, cart, checkout
from utils.errors import (
    DuplicateGuest,
    DuplicateUsername,
    Forbidden,
    NotFound,
    StorageFailure,
)


class AdminTestCase(StoreTestCase):
    async def test_admin_stats_on_seed(self):
        stats = await accounts.admin_stats()
        self.assertEqual((stats.users, stats.vendors, stats.orders), (2, 2, 1))
        self.assertEqual([o.id for o in stats.recent_orders], [501])

    async def test_recent_orders_newest_first_capped(self):
        user = await self.user(5)
        for _ in range(5):
            await cart.add_to_cart(user.id, 102)
            await checkout.checkout(user)
        stats = await accounts.admin_stats()
        self.assertEqual(stats.orders, 6)
        self.assertEqual([o.id for o in stats.recent_orders], [506, 505, 504, 503, 502])

    async def test_list_vendors_and_users(self):
        self.assertEqual([v.id for v in await accounts.list_vendors()], [2, 3])
        self.assertEqual([u.id for u in await accounts.list_regular_users()], [4, 5])

    async def test_create_vendor(self):
        vendor = await accounts.create_vendor("vendor3", "pw", "Lights & Sound", "Silver")
        self.assertEqual(vendor.id, 6)
        self.assertEqual(vendor.role, "vendor")
        self.assertEqual(vendor.membership, "Silver")
        self.assertIsNone(vendor.guest_list)
        self.assertEqual(await store.users.find(6), vendor)

        # the new account can log in right away
        self.assertEqual((await auth.login("vendor3", "pw", "vendor")).id, 6)

    async def test_create_vendor_rejects_taken_username_and_blanks(self):
        with self.assertRaises(DuplicateUsername):
            await accounts.create_vendor("user1", "pw", "Impostor")
        with self.assertRaises(ValueError):
            await accounts.create_vendor("", "pw", "Nameless")
        self.assertEqual(len(await store.users.list()), 5)

    async def test_set_vendor_membership(self):
        self.assertTrue(await accounts.set_vendor_membership(3, "Gold"))
        self.assertEqual((await store.users.find(3)).membership, "Gold")
        self.assertFalse(await accounts.set_vendor_membership(4, "Gold"))
        self.assertIsNone((await store.users.find(4)).membership)
        self.assertFalse(await accounts.set_vendor_membership(99, "Gold"))

    async def test_delete_user_drops_cart(self):
        await cart.add_to_cart(5, 101)
        self.assertTrue(await accounts.delete_user(5))
        self.assertIsNone(await store.users.find(5))
        async with connect() as conn:
            self.assertIsNone(await read_value(conn, "cart:5"))
        self.assertFalse(await accounts.delete_user(5))


class GuestListTestCase(StoreTestCase):
    async def test_add_guest_once(self):
        user = await auth.login("user1", "123", "user")
        updated = await accounts.add_guest(user, "Alice", "alice@example.com")
        self.assertEqual(updated.guest_list, (Guest("Alice", "alice@example.com"),))
        self.assertEqual(updated.guest_list[0].status, "Invited")

        with self.assertRaises(DuplicateGuest):
            await accounts.add_guest(updated, "Alice", "other@example.com")
        self.assertEqual(len(await accounts.list_guests(user)), 1)

    async def test_guest_edits_resync_session(self):
        user = await auth.login("user1", "123", "user")
        await accounts.add_guest(user, "Bob")
        session = await auth.current_user()
        self.assertEqual([g.name for g in session.guest_list], ["Bob"])
        self.assertEqual(session.guest_list[0].email, "")

        await accounts.remove_guest(user, "Bob")
        self.assertEqual((await auth.current_user()).guest_list, ())

    async def test_guest_lists_are_per_user(self):
        await accounts.add_guest(await self.user(4), "Alice")
        await accounts.add_guest(await self.user(5), "Alice")
        self.assertEqual(len(await accounts.list_guests(await self.user(4))), 1)
        self.assertEqual(len(await accounts.list_guests(await self.user(5))), 1)

    async def test_remove_guest(self):
        user = await self.user(4)
        for name in ("Alice", "Bob", "Carol"):
            user = await accounts.add_guest(user, name)
        user = await accounts.remove_guest(user, "Bob")
        self.assertEqual([g.name for g in user.guest_list], ["Alice", "Carol"])

        # absent name is a no-op
        user = await accounts.remove_guest(user, "Zed")
        self.assertEqual(len(user.guest_list), 2)

    async def test_blank_guest_name(self):
        with self.assertRaises(ValueError):
            await accounts.add_guest(await self.user(4), "   ")

    async def test_guest_ops_on_deleted_user(self):
        user = await self.user(4)
        await accounts.delete_user(4)
        with self.assertRaises(NotFound):
            await accounts.add_guest(user, "Alice")

    async def test_only_user_accounts_keep_guests(self):
        vendor = await self.user(2)
        admin = await self.user(1)
        with self.assertRaises(Forbidden):
            await accounts.add_guest(vendor, "Alice")
        with self.assertRaises(Forbidden):
            await accounts.remove_guest(admin, "Alice")
        with self.assertRaises(Forbidden):
            await accounts.list_guests(vendor)
        self.assertIsNone((await store.users.find(2)).guest_list)

    async def test_guest_edit_rolls_back_when_session_write_fails(self):
        user = await auth.login("user1", "123", "user")

        async def failing_refresh(_user, conn=None):
            raise StorageFailure("disk full")

        orig_refresh = auth.refresh_session
        try:
            auth.refresh_session = failing_refresh  # type: ignore
            with self.assertRaises(StorageFailure):
                await accounts.add_guest(user, "Alice")
        finally:
            auth.refresh_session = orig_refresh  # restore

        # neither the record nor the session picked up the guest
        self.assertEqual((await store.users.find(4)).guest_list, ())
        self.assertEqual((await auth.current_user()).guest_list, ())
