from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.logger import get_logger
from utils.messages import (
    QuitRequestedMessage,
    RedirectMessage,
    UserLogoutMessage,
)
from utils.state import GlobalState
from views.scr_admin import AdminDashboardScreen, AdminUsersScreen, AdminVendorsScreen
from views.scr_cart import CartScreen
from views.scr_guests import GuestListScreen
from views.scr_login import LoginScreen, SplashScreen
from views.scr_marketplace import MarketplaceScreen
from views.scr_user_orders import UserOrdersScreen
from views.scr_vendor_orders import VendorOrdersScreen
from views.scr_vendor_products import VendorProductsScreen

_logger = get_logger(__name__)


class EventMarketApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "splash": SplashScreen,
        "marketplace": MarketplaceScreen,
        "cart": CartScreen,
        "guests": GuestListScreen,
        "my_orders": UserOrdersScreen,
        "vendor_products": VendorProductsScreen,
        "vendor_orders": VendorOrdersScreen,
        "admin_dashboard": AdminDashboardScreen,
        "admin_vendors": AdminVendorsScreen,
        "admin_users": AdminUsersScreen,
    }

    ROLE_MODES = {
        "user": {
            "marketplace": "Marketplace",
            "cart": "My Cart",
            "guests": "Guest List",
            "my_orders": "Order Status",
        },
        "vendor": {
            "vendor_products": "My Products",
            "vendor_orders": "Transactions / Orders",
        },
        "admin": {
            "admin_dashboard": "Dashboard",
            "admin_vendors": "Vendor Management",
            "admin_users": "User Management",
        },
    }

    LANDING_MODES = {
        "user": "marketplace",
        "vendor": "vendor_products",
        "admin": "admin_dashboard",
    }

    CSS_PATH = "styles/app.tcss"

    state: GlobalState

    def __init__(self):
        super().__init__()
        self.state = GlobalState()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow(restore=True)

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    @work(exclusive=True, group="logout")
    async def handle_user_logout(self):
        was_logged_in = self.state.user is not None
        await self.state.logout()
        if was_logged_in:
            self.notify("Logout successful.")
        self.main_flow()

    @on(RedirectMessage)
    async def handle_redirect(self, message: RedirectMessage):
        await self.switch_mode(message.mode)

    @on(QuitRequestedMessage)
    def handle_quit(self):
        # the session snapshot is kept so the next start resumes it
        self.exit()

    @work(exclusive=True, group="auth")
    async def main_flow(self, restore: bool = False):
        if not (restore and await self.state.restore()):
            await self.switch_mode("splash")
            await self.push_screen_wait(LoginScreen())
        _logger.info(f"Entering {self.state.role} views for user {self.state.uid}.")
        await self.switch_mode(self.LANDING_MODES[self.state.role])


def main() -> None:
    EventMarketApp().run()


if __name__ == "__main__":
    main()
