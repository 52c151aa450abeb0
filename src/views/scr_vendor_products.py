from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Label

from services import catalog
from utils.errors import Forbidden
from utils.pure import format_money, status_markup
from views.base_screen import BaseScreen, selected_row_key
from views.modal_dialog import DialogModal
from views.modal_product_form import ProductFormModal


class VendorProductsScreen(BaseScreen):
    """
    The vendor's own products: add, edit, delete.
    """

    REQUIRED_ROLE = "vendor"

    BINDINGS = [
        Binding("a", "add_product", "Add Product", show=True),
        Binding("e", "edit_product", "Edit", show=True),
        Binding("d", "delete_product", "Delete", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Label("", id="label-vendor-welcome")
        yield DataTable(id="table-vendor-products")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Description", "Price", "Status")

    @work(exclusive=True)
    async def reload(self) -> None:
        vendor = self.app.state.user
        self.query_one("#label-vendor-welcome", Label).update(
            f"Welcome, {vendor.name} ({vendor.membership or 'Standard'} Plan)"
        )
        products = await catalog.list_by_vendor(vendor.id)
        table = self.query_one(DataTable)
        table.clear()
        if not products:
            self.notify("No products added yet.", severity="information")
        for p in products:
            table.add_row(
                p.id,
                p.name,
                p.description,
                format_money(p.price),
                status_markup(p.status),
                key=str(p.id),
            )

    @work(exclusive=True, group="product-edit")
    async def action_add_product(self) -> None:
        patch = await self.app.push_screen_wait(ProductFormModal())
        if patch is None:
            return
        try:
            await catalog.create_product(
                self.app.state.user,
                patch.name,
                patch.price,
                description=patch.description or "",
                status=patch.status,
            )
        except ValueError as exc:
            self.notify(str(exc), severity="error")
            return
        self.notify("Product added.")
        self.reload()

    @work(exclusive=True, group="product-edit")
    async def action_edit_product(self) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        product = await catalog.get_product(int(key))
        if product is None:
            self.reload()
            return
        patch = await self.app.push_screen_wait(ProductFormModal(product))
        if patch is None:
            return
        try:
            updated = await catalog.update_product(self.app.state.user, product.id, patch)
        except (ValueError, Forbidden) as exc:
            self.notify(str(exc), severity="error")
            return
        self.notify("Product updated." if updated else "Product no longer exists.")
        self.reload()

    @work(exclusive=True, group="product-edit")
    async def action_delete_product(self) -> None:
        key = selected_row_key(self.query_one(DataTable))
        if key is None:
            return
        if not await self.app.push_screen_wait(
            DialogModal("Delete product?", primary_text="Yes", secondary_text="No", tone="error")
        ):
            return
        try:
            await catalog.delete_product(self.app.state.user, int(key))
        except Forbidden as exc:
            self.notify(str(exc), severity="error")
            return
        self.reload()
