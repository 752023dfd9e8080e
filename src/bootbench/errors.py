"""Exceptions raised by bootbench.

Bad caller input is reported as ``InvalidArgument``, which subclasses
``ValueError`` so existing ``except ValueError`` handlers keep working.
"""


class InvalidArgument(ValueError):
    """Raised when a sample, iteration count or option is unusable."""

    def __init__(self, argument: str, reason: str) -> None:
        self.argument = argument
        self.reason = reason
        super().__init__(f"Invalid {argument}: {reason}")
