from helpers import StoreTestCase

from services import auth
from services.auth import AuthDecision
from utils.errors import InvalidCredentials, NotAuthenticated, WrongRole
from utils.state import GlobalState

SEEDED = [
    ("admin", "admin", 1),
    ("vendor1", "vendor", 2),
    ("vendor2", "vendor", 3),
    ("user1", "user", 4),
    ("user2", "user", 5),
]


class AuthTestCase(StoreTestCase):
    async def test_login_each_seeded_user(self):
        for username, role, uid in SEEDED:
            user = await auth.login(username, "123", role)
            self.assertEqual(user.id, uid)
            self.assertEqual((await auth.current_user()).id, uid)

    async def test_login_failures_are_indistinguishable(self):
        cases = [
            ("user1", "wrong", "user"),  # bad password
            ("user1", "123", "vendor"),  # bad role
            ("nobody", "123", "user"),  # unknown user
            ("User1", "123", "user"),  # case-sensitive
        ]
        for username, pwd, role in cases:
            with self.assertRaises(InvalidCredentials) as ctx:
                await auth.login(username, pwd, role)
            self.assertEqual(str(ctx.exception), "Invalid credentials")
        self.assertIsNone(await auth.current_user())

    async def test_logout_is_idempotent(self):
        await auth.login("vendor1", "123", "vendor")
        await auth.logout()
        self.assertIsNone(await auth.current_user())
        await auth.logout()
        self.assertIsNone(await auth.current_user())

    async def test_check_role_decisions(self):
        user = await self.user(4)
        self.assertIs(auth.check_role(None, "user"), AuthDecision.NOT_AUTHENTICATED)
        self.assertIs(auth.check_role(user, "admin"), AuthDecision.WRONG_ROLE)
        self.assertIs(auth.check_role(user, "user"), AuthDecision.ALLOWED)
        self.assertIs(auth.check_role(user, None), AuthDecision.ALLOWED)

    async def test_require_role(self):
        with self.assertRaises(NotAuthenticated):
            await auth.require_role("user")

        await auth.login("user1", "123", "user")
        self.assertEqual((await auth.require_role("user")).id, 4)
        with self.assertRaises(WrongRole) as ctx:
            await auth.require_role("vendor")
        self.assertEqual(ctx.exception.actual_role, "user")
        self.assertEqual(ctx.exception.required_role, "vendor")

        # an explicit acting user wins over the stored session
        admin = await self.user(1)
        self.assertEqual((await auth.require_role("admin", admin)).id, 1)


class GlobalStateTestCase(StoreTestCase):
    async def test_login_restore_logout(self):
        state = GlobalState()
        self.assertIs(state.decide("user"), AuthDecision.NOT_AUTHENTICATED)

        await state.login("vendor2", "123", "vendor")
        self.assertEqual(state.uid, 3)
        self.assertEqual(state.role, "vendor")
        self.assertIs(state.decide("vendor"), AuthDecision.ALLOWED)
        self.assertIs(state.decide("user"), AuthDecision.WRONG_ROLE)

        # a new app instance picks the session back up
        restored = GlobalState()
        self.assertEqual((await restored.restore()).id, 3)

        await state.logout()
        self.assertIsNone(state.user)
        self.assertIsNone(await GlobalState().restore())
