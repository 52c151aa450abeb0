from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable

from services.checkout import ApprovalResult, approve_order, list_vendor_orders
from utils.errors import Forbidden
from utils.messages import NewOrderMessage
from utils.pure import format_money, status_markup
from views.base_screen import BaseScreen, selected_row_key


class VendorOrdersScreen(BaseScreen):
    """
    Orders touching the vendor's products. Pending ones can be approved.
    """

    REQUIRED_ROLE = "vendor"

    BINDINGS = [
        Binding("a", "approve", "Approve", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-vendor-orders")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Products", "Qty", "Total", "Status")

    @on(NewOrderMessage)
    @work(exclusive=True)
    async def reload(self) -> None:
        orders = await list_vendor_orders(self.app.state.uid)
        table = self.query_one(DataTable)
        table.clear()
        for o in orders:
            table.add_row(
                f"#{o.id}",
                "Product IDs: " + ", ".join(str(i.product_id) for i in o.items),
                o.item_count,
                format_money(o.total),
                status_markup(o.status),
                key=str(o.id),
            )

    async def action_approve(self) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        try:
            result = await approve_order(self.app.state.user, int(key))
        except Forbidden as exc:
            self.notify(str(exc), severity="error")
            return

        if result is ApprovalResult.APPROVED:
            self.notify(f"Order #{key} completed.")
            self.post_message(NewOrderMessage())
        elif result is ApprovalResult.ALREADY_COMPLETED:
            self.notify(f"Order #{key} is already completed.", severity="warning")
        else:
            self.notify(f"Order #{key} no longer exists.", severity="warning")
            self.reload()
