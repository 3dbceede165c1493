"""Domain errors raised by the access-control layer.

None of these depend on FastAPI. ``scribe.main`` registers handlers that
translate each of them into a response.
"""

from collections.abc import Iterable


class AccessError(Exception):
    """Base class for access-control failures."""


class StoreUnavailable(AccessError):
    """A grant lookup or replacement failed because the store could not be reached."""

    def __init__(self, operation: str, detail: str | None = None) -> None:
        self.operation = operation
        message = f"Grant store unavailable during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidResource(AccessError):
    """The requested blog, post or user does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier!r} not found")


class MalformedGrantSet(AccessError):
    """A replacement referenced ids that have no matching row."""

    def __init__(self, kind: str, missing_ids: Iterable[int]) -> None:
        self.kind = kind
        self.missing_ids = sorted(set(missing_ids))
        super().__init__(f"Unknown {kind} ids: {self.missing_ids}")


class LoginRequired(AccessError):
    """An anonymous principal hit gated content and must authenticate first."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)
