from typing import Dict, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Label,
    ListItem,
    ListView,
    Markdown,
)

from services.auth import AuthDecision
from services.cart import cart_count
from utils.messages import (
    CartChangedMessage,
    RedirectMessage,
    UserLogoutMessage,
)
from utils.pure import generate_markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal

ROLE_TITLES = {"admin": "Administrator", "vendor": "Vendor", "user": "User"}


def selected_row_key(table: DataTable) -> Optional[str]:
    """Key of the row under the cursor, None for an empty table."""
    if table.row_count == 0:
        return None
    row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
    return row_key.value


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    @work(exclusive=True, group="sidebar")
    async def refresh_info(self) -> None:
        user = self.app.state.user
        if user is None:
            return

        rows = [["Name", user.name], ["Role", ROLE_TITLES.get(user.role, user.role)]]
        if user.role == "vendor":
            rows.append(["Plan", f"{user.membership or 'Standard'} Plan"])
        await self.query_one(Markdown).update(
            generate_markdown_table(["", ""], rows, ["l", "l"])
        )

        modes: Dict[str, str] = dict(self.app.ROLE_MODES[user.role])
        if user.role == "user":
            modes["cart"] = f"{modes['cart']} ({await cart_count(user.id)})"

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [ListItem(Label(v), id="list-menu-item-" + k) for k, v in modes.items()]
        )
        self.highlight_item(self.app.current_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        if self.app.current_mode != selected_mode:
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.post_message(UserLogoutMessage())

    def highlight_item(self, mode_str: str):
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = item.id == "list-menu-item-" + mode_str


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.

    REQUIRED_ROLE gates the screen: on every resume the role check runs
    first and `reload` is only called when it passes.
    """

    REQUIRED_ROLE: Optional[str] = None

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = "Event Marketplace"
        self.sub_title = header_sub_title
        for k, v in self.app.MODES.items():
            if isinstance(self, v):
                for modes in self.app.ROLE_MODES.values():
                    if k in modes:
                        self.sub_title = modes[k]

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    def authorize(self) -> bool:
        """Run the role check; on failure ask the app to navigate away."""
        decision = self.app.state.decide(self.REQUIRED_ROLE)
        if decision is AuthDecision.NOT_AUTHENTICATED:
            self.app.post_message(UserLogoutMessage())
            return False
        if decision is AuthDecision.WRONG_ROLE:
            self.notify("Unauthorized access.", severity="error")
            self.app.post_message(
                RedirectMessage(self.app.LANDING_MODES[self.app.state.role])
            )
            return False
        return True

    @on(ScreenResume)
    def handle_resume(self) -> None:
        if self.REQUIRED_ROLE is None or not self.authorize():
            return
        if self._show_sidebar:
            self.query_one(Sidebar).refresh_info()
        self.reload()

    @on(CartChangedMessage)
    def handle_cart_badge(self) -> None:
        if self._show_sidebar and self.app.state.user:
            self.query_one(Sidebar).refresh_info()

    def reload(self) -> None:
        """Re-read whatever the screen shows. Overridden by each screen."""

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
