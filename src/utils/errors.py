# error kinds raised by the db and services packages


class MarketplaceError(Exception):
    """Base class for every error the marketplace core raises on purpose."""


class InvalidCredentials(MarketplaceError):
    """No user matches the given username, password and role."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class AuthorizationError(MarketplaceError):
    pass


class NotAuthenticated(AuthorizationError):
    def __init__(self) -> None:
        super().__init__("Not logged in")


class WrongRole(AuthorizationError):
    """
    The session belongs to another role.
    `actual_role` tells the view layer where to send the user instead.
    """

    def __init__(self, required_role: str, actual_role: str) -> None:
        super().__init__(f"Requires role {required_role!r}, logged in as {actual_role!r}")
        self.required_role = required_role
        self.actual_role = actual_role


class Forbidden(MarketplaceError):
    """Acting user does not own the entity being changed."""


class EmptyCart(MarketplaceError):
    def __init__(self) -> None:
        super().__init__("Cart is empty")


class DuplicateGuest(MarketplaceError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Guest {name!r} already exists")
        self.name = name


class DuplicateUsername(MarketplaceError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Username {username!r} is taken")
        self.username = username


class DuplicateId(MarketplaceError):
    def __init__(self, collection: str, entity_id: int) -> None:
        super().__init__(f"Id {entity_id} already present in {collection!r}")
        self.collection = collection
        self.entity_id = entity_id


class NotFound(MarketplaceError):
    pass


class StorageFailure(MarketplaceError):
    """Reading or writing the local store failed. Not retried."""
