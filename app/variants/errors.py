"""Exceptions raised by the variant engine."""


class VariantEngineError(Exception):
    """Base class for variant engine errors."""


class MalformedOptionSetError(VariantEngineError, ValueError):
    """An option set that cannot be turned into combinations."""


class TooManyCombinationsError(VariantEngineError):
    """The cross-product of an option set is larger than the allowed limit."""

    def __init__(self, total, limit):
        self.total = total
        self.limit = limit
        super().__init__(
            f"{total} combinations exceeds the limit of {limit}; "
            f"remove some option values"
        )


class UnknownVariantError(VariantEngineError, KeyError):
    """No variant with the given id in the working set."""

    def __str__(self):
        return f"Unknown variant: {self.args[0]}" if self.args else "Unknown variant"
