from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Button, Input, Label, LoadingIndicator, Select

from utils.errors import InvalidCredentials
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal

ROLE_OPTIONS = [("Admin", "admin"), ("Vendor", "vendor"), ("User", "user")]


class SplashScreen(Screen):
    """Backdrop the login prompt is pushed onto, so no role screen sits under it."""

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()


class LoginScreen(BaseScreen):
    """
    Dismissed once a user logged in; the app then reads the role from state.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("Login as")
            yield Select(
                ROLE_OPTIONS, value="user", allow_blank=False, id="select-login-role"
            )
            yield Label("Username")
            yield Input(placeholder="user1", id="input-login-username")
            yield Label("Password")
            yield Input(placeholder="*********", password=True, id="input-login-pwd")
            yield Label("", id="label-login-error")
            with Horizontal(id="div-login-btns"):
                yield Button("Quit", id="btn-quit")
                yield Button("Login", id="btn-login", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-username").focus()

    @on(Select.Changed, "#select-login-role")
    def handle_role_changed(self, event: Select.Changed) -> None:
        self.query_one("#btn-login", Button).label = f"Login as {str(event.value).title()}"

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        username = self.query_one("#input-login-username", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value
        role = self.query_one("#select-login-role", Select).value
        error_label = self.query_one("#label-login-error", Label)

        if not username or not pwd:
            self.notify("Username or password cannot be empty!", severity="error")
            return

        try:
            user = await self.app.state.login(username, pwd, role)
        except InvalidCredentials as exc:
            error_label.update(str(exc))
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return

        error_label.update("")
        self.notify(f"Welcome, {user.name}!")
        self.dismiss()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
