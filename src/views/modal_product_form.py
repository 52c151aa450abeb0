from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, Select

from db.models import PRODUCT_STATUSES, Product, ProductPatch


class ProductFormModal(ModalScreen[Optional[ProductPatch]]):
    """
    Add/edit form for a vendor's product.
    Dismisses with a ProductPatch holding every field, or None when cancelled.
    The caller decides whether it becomes a new product or an update.
    """

    BINDINGS = [("escape", "cancel", "Close")]

    def __init__(self, product: Optional[Product] = None) -> None:
        super().__init__()
        self._product = product

    def compose(self) -> ComposeResult:
        p = self._product
        with Vertical(id="div-product-form"):
            yield Label("Edit Product" if p else "Add Product", id="label-form-title")
            yield Label("Name")
            yield Input(value=p.name if p else "", id="input-prod-name")
            yield Label("Price ($)")
            yield Input(
                value=f"{p.price:.2f}" if p else "",
                id="input-prod-price",
                type="number",
                validators=[Number(minimum=0.0)],
            )
            yield Label("Description")
            yield Input(value=p.description if p else "", id="input-prod-descr")
            yield Label("Status")
            yield Select(
                [(s, s) for s in PRODUCT_STATUSES],
                value=p.status if p else "Active",
                allow_blank=False,
                id="select-prod-status",
            )
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-prod-name").focus()

    @on(Button.Pressed, "#btn-save")
    def handle_save(self) -> None:
        name_input = self.query_one("#input-prod-name", Input)
        price_input = self.query_one("#input-prod-price", Input)

        if not name_input.value.strip():
            name_input.focus()
            name_input.add_class("-invalid")
            self.notify("Name is required.", severity="error")
            return
        if not price_input.value or not price_input.is_valid:
            price_input.focus()
            price_input.add_class("-invalid")
            self.notify("Price must be a non-negative number.", severity="error")
            return

        self.dismiss(
            ProductPatch(
                name=name_input.value.strip(),
                price=float(price_input.value),
                description=self.query_one("#input-prod-descr", Input).value,
                status=self.query_one("#select-prod-status", Select).value,
            )
        )

    @on(Button.Pressed, "#btn-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)
