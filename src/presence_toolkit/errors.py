"""
Domain errors raised by the stores and the router.

Every error carries the text that is sent back to the originating connection
inside an 'error' frame. The router catches 'PresenceError' per event, so a
failed event only ever produces a reply to its sender and never tears down
the connection or touches another connection's state.
"""


class PresenceError(Exception):
    """Base class for failures that are reported to the sender as 'error{text}'."""

    text: str = "Request failed"

    def __init__(self, text: str | None = None) -> None:
        if text is not None:
            self.text = text
        super().__init__(self.text)


class InvalidName(PresenceError):
    """The requested display name is empty after trimming."""

    text = "Username cannot be empty"


class NameTaken(PresenceError):
    """The display name is already bound to a different live connection."""

    text = "Username taken"


class Unauthorized(PresenceError):
    """The sender is not a friend of the identity it tried to reach."""

    text = "Not friends"


class AlreadyFriends(PresenceError):
    """Informational rejection of a friend request between existing friends."""

    text = "Already friends"


class AvatarTooLarge(PresenceError):
    """The avatar payload exceeds the configured size cap."""

    text = "Avatar too large"
