"""Errors raised by the visit tracker services.

Each error carries the reply shown to the participant who triggered it.
"""


class VisitTrackerError(Exception):
    """Base error with a user-facing reply."""

    reply = "Something went wrong, please try again later."

    def __init__(self, reply: str | None = None) -> None:
        if reply is not None:
            self.reply = reply
        super().__init__(self.reply)


class NotRegistered(VisitTrackerError):
    reply = (
        "You are not registered. "
        "Send /start and provide your employee ID or full name."
    )


class OutOfSequence(VisitTrackerError):
    reply = "Start a visit first: /visit <SHOP_CODE>."


class ForwardedMediaRejected(VisitTrackerError):
    reply = "Please take a new photo. Forwarded photos are not accepted."


class OutOfFence(VisitTrackerError):
    def __init__(self, distance: float) -> None:
        self.distance = distance
        super().__init__(
            f"You are too far from the target point (distance: {round(distance)} m)."
        )


class Unauthorized(VisitTrackerError):
    reply = "You do not have access to this command."


class InvalidArgument(VisitTrackerError):
    reply = "Invalid argument."


class PersistenceFailure(VisitTrackerError):
    reply = "Could not save your data, please try again later."


class TransportFailure(VisitTrackerError):
    reply = "Could not reach Telegram, please try again later."
