class InvalidFormat(ValueError):
    """Raised when a month string matches neither MM-YYYY nor YYYY-MM."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid month format {raw!r}, expected MM-YYYY or YYYY-MM")
        self.raw = raw


class SubscriptionValidationError(ValueError):
    """Raised when a subscription fails write-path validation."""


class SubscriptionNotFound(LookupError):
    def __init__(self, subscription_id: int) -> None:
        super().__init__(f"subscription {subscription_id} not found")
        self.subscription_id = subscription_id


class FetchFailure(Exception):
    """Raised when the subscription store could not be queried."""
