from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Input

from services.cart import add_to_cart
from services.catalog import list_active_products
from utils.messages import CartChangedMessage
from utils.pure import format_money
from views.base_screen import BaseScreen


class MarketplaceScreen(BaseScreen):
    """
    Active products from every vendor, filtered by name as you type.
    """

    REQUIRED_ROLE = "user"

    # only here to be displayed in footer, DataTable handles enter itself
    BINDINGS = [
        Binding("enter", "noop", "Add to Cart", show=True, key_display="⏎"),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(id="input-search", placeholder="Search products by name...")
        yield DataTable(id="table-marketplace")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Description", "Price")
        self.query_one("#input-search").focus()

    def reload(self) -> None:
        self.update_results(self.query_one("#input-search", Input).value)

    @on(Input.Changed, "#input-search")
    def handle_search(self, message: Input.Changed) -> None:
        self.update_results(message.value)

    @work(exclusive=True)
    async def update_results(self, query: str) -> None:
        products = await list_active_products(query)

        table = self.query_one(DataTable)
        table.clear()
        for p in products:
            table.add_row(p.id, p.name, p.description, format_money(p.price), key=str(p.id))

    @on(DataTable.RowSelected)
    @work()
    async def handle_add_to_cart(self, event: DataTable.RowSelected) -> None:
        product_id = int(event.row_key.value)
        await add_to_cart(self.app.state.uid, product_id)
        self.notify("Added to cart!")
        self.post_message(CartChangedMessage())

    def action_noop(self) -> None:
        pass
