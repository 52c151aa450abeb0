from textual import on, work
from textual.app import ComposeResult
from textual.widgets import DataTable

from services.checkout import list_user_orders
from utils.messages import NewOrderMessage
from utils.pure import format_money, status_markup
from views.base_screen import BaseScreen


class UserOrdersScreen(BaseScreen):
    REQUIRED_ROLE = "user"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-user-orders")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Items", "Total", "Date", "Status")

    @on(NewOrderMessage)
    @work(exclusive=True)
    async def reload(self) -> None:
        orders = await list_user_orders(self.app.state.uid)
        table = self.query_one(DataTable)
        table.clear()
        for o in orders:
            table.add_row(
                f"#{o.id}",
                f"{len(o.items)} Items",
                format_money(o.total),
                o.date,
                status_markup(o.status),
                key=str(o.id),
            )
