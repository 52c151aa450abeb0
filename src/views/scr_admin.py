from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, MarkdownViewer

from services import accounts
from utils.errors import DuplicateUsername
from utils.messages import AccountsChangedMessage, NewOrderMessage
from utils.pure import format_money, generate_markdown_table
from views.base_screen import BaseScreen, selected_row_key
from views.modal_dialog import DialogModal
from views.modal_vendor_form import VendorFormModal


def _account_table(table: DataTable, *columns: str) -> None:
    table.cursor_type = "row"
    table.zebra_stripes = True
    table.add_columns(*columns)


class AdminDashboardScreen(BaseScreen):
    """
    Account/order counts plus the five latest orders.
    """

    REQUIRED_ROLE = "admin"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)

    @on(NewOrderMessage)
    @on(AccountsChangedMessage)
    @work(exclusive=True)
    async def reload(self) -> None:
        stats = await accounts.admin_stats()
        counts = (
            "### Overview\n\n"
            f"- Users: {stats.users}\n"
            f"- Vendors: {stats.vendors}\n"
            f"- Orders: {stats.orders}\n\n"
        )
        recent = generate_markdown_table(
            ["Order", "User", "Total", "Status", "Date"],
            [
                [f"#{o.id}", f"User #{o.user_id}", format_money(o.total), o.status, o.date or "N/A"]
                for o in stats.recent_orders
            ],
            ["l", "l", "r", "c", "c"],
        )
        await self.query_one("#md-dashboard", MarkdownViewer).document.update(
            counts + "### Recent Orders\n\n" + recent
        )


class AdminVendorsScreen(BaseScreen):
    REQUIRED_ROLE = "admin"

    BINDINGS = [
        Binding("a", "add_vendor", "Add Vendor", show=True),
        Binding("e", "edit_vendor", "Edit Membership", show=True),
        Binding("d", "delete_vendor", "Delete", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-vendors")

    def on_mount(self):
        _account_table(self.query_one(DataTable), "ID", "Name", "Username", "Membership")

    @on(AccountsChangedMessage)
    @work(exclusive=True)
    async def reload(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for v in await accounts.list_vendors():
            table.add_row(
                f"#{v.id}", v.name, v.username, v.membership or "Standard", key=str(v.id)
            )

    @work(exclusive=True, group="vendor-edit")
    async def action_add_vendor(self) -> None:
        form = await self.app.push_screen_wait(VendorFormModal())
        if form is None:
            return
        try:
            await accounts.create_vendor(
                form.username, form.password, form.name, form.membership
            )
        except (ValueError, DuplicateUsername) as exc:
            self.notify(str(exc), severity="error")
            return
        self.notify(f"Vendor {form.name} added.")
        self.post_message(AccountsChangedMessage())

    @work(exclusive=True, group="vendor-edit")
    async def action_edit_vendor(self) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        vendors = {v.id: v for v in await accounts.list_vendors()}
        vendor = vendors.get(int(key))
        if vendor is None:
            self.reload()
            return
        form = await self.app.push_screen_wait(VendorFormModal(vendor))
        if form is None:
            return
        await accounts.set_vendor_membership(vendor.id, form.membership)
        self.post_message(AccountsChangedMessage())

    @work(exclusive=True, group="vendor-edit")
    async def action_delete_vendor(self) -> None:
        await _confirm_delete(self)


class AdminUsersScreen(BaseScreen):
    REQUIRED_ROLE = "admin"

    BINDINGS = [
        Binding("d", "delete_user", "Delete", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-users")

    def on_mount(self):
        _account_table(self.query_one(DataTable), "ID", "Name", "Username", "Role")

    @on(AccountsChangedMessage)
    @work(exclusive=True)
    async def reload(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for u in await accounts.list_regular_users():
            table.add_row(f"#{u.id}", u.name, u.username, "[green]User[/]", key=str(u.id))

    @work(exclusive=True, group="user-edit")
    async def action_delete_user(self) -> None:
        await _confirm_delete(self)


async def _confirm_delete(screen: BaseScreen) -> None:
    key = selected_row_key(screen.query_one(DataTable))
    if key is None:
        return
    if not await screen.app.push_screen_wait(
        DialogModal("Are you sure?", primary_text="Yes", secondary_text="No", tone="error")
    ):
        return
    await accounts.delete_user(int(key))
    screen.post_message(AccountsChangedMessage())
