from dataclasses import dataclass
from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from db.models import User

MEMBERSHIP_TIERS = ("Standard", "Silver", "Gold")


@dataclass(frozen=True)
class VendorForm:
    username: str
    password: str
    name: str
    membership: str


class VendorFormModal(ModalScreen[Optional[VendorForm]]):
    """
    New vendor account form, or membership-only form when editing `vendor`.
    """

    BINDINGS = [("escape", "cancel", "Close")]

    def __init__(self, vendor: Optional[User] = None) -> None:
        super().__init__()
        self._vendor = vendor

    def compose(self) -> ComposeResult:
        v = self._vendor
        with Vertical(id="div-vendor-form"):
            if v is None:
                yield Label("Add Vendor", id="label-form-title")
                yield Label("Business Name")
                yield Input(id="input-vendor-name")
                yield Label("Username")
                yield Input(id="input-vendor-username")
                yield Label("Password")
                yield Input(password=True, id="input-vendor-pwd")
            else:
                yield Label(f"Edit Vendor: {v.name}", id="label-form-title")
            yield Label("Membership")
            yield Select(
                [(t, t) for t in MEMBERSHIP_TIERS],
                value=(v.membership if v and v.membership in MEMBERSHIP_TIERS else "Standard"),
                allow_blank=False,
                id="select-vendor-membership",
            )
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    @on(Button.Pressed, "#btn-save")
    def handle_save(self) -> None:
        membership = self.query_one("#select-vendor-membership", Select).value
        if self._vendor is not None:
            v = self._vendor
            self.dismiss(VendorForm(v.username, v.password, v.name, membership))
            return

        fields = {
            key: self.query_one(f"#input-vendor-{key}", Input).value.strip()
            for key in ("name", "username", "pwd")
        }
        missing = [k for k, val in fields.items() if not val]
        if missing:
            self.query_one(f"#input-vendor-{missing[0]}", Input).focus()
            self.notify("All fields are required.", severity="error")
            return
        self.dismiss(
            VendorForm(fields["username"], fields["pwd"], fields["name"], membership)
        )

    @on(Button.Pressed, "#btn-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)
