"""Exceptions raised by cartcalc."""


class CartCalcError(Exception):
    """Base exception for all cartcalc errors."""

    pass


class ConfigurationError(CartCalcError):
    """Raised when a rule, setting or checkout document is malformed."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class UnsupportedLimitError(ConfigurationError):
    """Raised when a rule uses a limit combination that is not supported yet."""

    def __init__(self, limit: str):
        self.limit = limit
        super().__init__(f"{limit} is not supported yet")


class StageOrderError(CartCalcError):
    """Raised when an order stage runs before its prerequisite stage."""

    def __init__(self, stage: str, requires: str):
        self.stage = stage
        self.requires = requires
        super().__init__(f"Stage '{stage}' requires '{requires}' to run first")
