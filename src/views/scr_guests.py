from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Input

from services import accounts
from utils.errors import DuplicateGuest
from views.base_screen import BaseScreen, selected_row_key


class GuestListScreen(BaseScreen):
    """
    The logged-in user's invitation list. Row keys are guest names.
    """

    REQUIRED_ROLE = "user"

    BINDINGS = [
        Binding("delete", "remove_guest", "Remove Guest", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-guest-inputs"):
            yield Input(placeholder="Guest name", id="input-guest-name")
            yield Input(placeholder="Email (optional)", id="input-guest-email")
            yield Button("Add Guest", id="btn-add-guest", variant="primary")
        yield DataTable(id="table-guests")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("#", "Name", "Email", "Status")

    @work(exclusive=True)
    async def reload(self) -> None:
        guests = await accounts.list_guests(self.app.state.user)
        table = self.query_one(DataTable)
        table.clear()
        for i, g in enumerate(guests, start=1):
            table.add_row(i, g.name, g.email or "N/A", f"[green]{g.status}[/]", key=g.name)

    @on(Button.Pressed, "#btn-add-guest")
    @work(exclusive=True, group="guest-edit")
    async def handle_add_guest(self) -> None:
        name_input = self.query_one("#input-guest-name", Input)
        email_input = self.query_one("#input-guest-email", Input)
        try:
            self.app.state.user = await accounts.add_guest(
                self.app.state.user, name_input.value, email_input.value
            )
        except ValueError as exc:
            name_input.focus()
            self.notify(str(exc), severity="error")
            return
        except DuplicateGuest:
            self.notify("Guest already exists.", severity="error")
            return

        name_input.value = ""
        email_input.value = ""
        name_input.focus()
        self.reload()

    @work(exclusive=True, group="guest-edit")
    async def action_remove_guest(self) -> None:
        name = selected_row_key(self.query_one(DataTable))
        if name is None:
            return
        self.app.state.user = await accounts.remove_guest(self.app.state.user, name)
        self.reload()
