from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out, or when a screen finds nobody logged in
    """

    bubble = True


class RedirectMessage(Message):
    """
    Posted by a screen whose role check failed for a logged-in user.
    The app switches to `mode`, the landing mode of the user's own role.
    """

    bubble = True

    def __init__(self, mode: str) -> None:
        super().__init__()
        self.mode = mode


class CartChangedMessage(Message):
    """
    Fired whenever a line is added, changed or removed, or the cart is checked out.
    Post at App level when sent from outside the cart screen.
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired when checkout creates an order or a vendor completes one.
    """

    bubble = True


class AccountsChangedMessage(Message):
    """
    Fired by the admin screens after vendors/users are added, edited or deleted.
    """

    bubble = True

