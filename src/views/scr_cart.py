from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Label, Rule

from services import cart
from services.checkout import checkout
from utils.errors import EmptyCart
from utils.messages import CartChangedMessage, NewOrderMessage
from utils.pure import format_money, generate_markdown_table
from views.base_screen import BaseScreen, selected_row_key
from views.modal_dialog import DialogModal, MarkdownDialogModal


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, totals incl. tax, and checkout.
    Row keys are line indexes, so the table is rebuilt after every change.
    """

    REQUIRED_ROLE = "user"

    BINDINGS = [
        Binding("plus", "change_qty(1)", "Qty +1", show=True, key_display="+"),
        Binding("minus", "change_qty(-1)", "Qty -1", show=True, key_display="-"),
        Binding("delete", "remove_line", "Remove", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-cart")
        yield Label("Subtotal: $0.00", id="label-cart-subtotal")
        yield Label("Tax (5%): $0.00", id="label-cart-tax")
        yield Label("Total: $0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Product", "Unit Price", "Qty", "Line Total")

    @on(CartChangedMessage)
    @work(exclusive=True)  # must be exclusive, else two rebuilds can interleave
    async def reload(self) -> None:
        details, totals = await cart.cart_details(self.app.state.uid)

        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for idx, (line, product) in enumerate(details):
            price = product.price if product else 0.0
            table.add_row(
                product.name if product else "Unknown Item",
                format_money(price),
                line.qty,
                format_money(price * line.qty),
                key=str(idx),
            )
        if details:
            table.move_cursor(row=min(cursor_row, len(details) - 1))

        self.query_one("#label-cart-subtotal", Label).update(
            f"Subtotal: {format_money(totals.subtotal)}"
        )
        self.query_one("#label-cart-tax", Label).update(
            f"Tax (5%): {format_money(totals.tax)}"
        )
        self.query_one("#label-cart-total", Label).update(
            f"Total: {format_money(totals.total)}"
        )

    async def action_change_qty(self, delta: int) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        if await cart.set_quantity(self.app.state.uid, int(key), delta):
            self.post_message(CartChangedMessage())
        else:
            self.notify("Quantity must stay above zero.", severity="warning")

    @work()
    async def action_remove_line(self) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove this item from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return
        await cart.remove_line(self.app.state.uid, int(key))
        self.post_message(CartChangedMessage())
        self.notify("Item removed from cart.")

    @on(Button.Pressed, "#btn-checkout")
    @work(exclusive=True, group="checkout")
    async def handle_checkout(self) -> None:
        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? This cannot be undone.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        try:
            order = await checkout(self.app.state.user)
        except EmptyCart:
            self.notify("Cart is empty!", severity="warning")
            return

        self.post_message(CartChangedMessage())
        self.post_message(NewOrderMessage())
        receipt = generate_markdown_table(
            ["Order", "Items", "Total", "Status"],
            [[f"#{order.id}", order.item_count, format_money(order.total), order.status]],
        )
        await self.app.push_screen_wait(
            MarkdownDialogModal(
                "### Payment Successful\n\n" + receipt, primary_text="Done", tone="positive"
            )
        )
