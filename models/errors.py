"""
Error types for the Multi-Resource Safety Checker.

All of these are caller errors (malformed input), raised where they are
detected and never recovered from inside the checker.
"""


class ContractViolation(ValueError):
    """Base class for malformed input rejected by the checker."""
    pass


class DimensionMismatch(ContractViolation):
    """Two resource vectors combined or compared have different lengths."""

    def __init__(self, left_len: int, right_len: int, context: str = ""):
        self.left_len = left_len
        self.right_len = right_len
        message = f"Resource vector length mismatch ({left_len} vs {right_len})"
        if context:
            message += f" {context}"
        super().__init__(message)


class EmptyOwnerSet(ContractViolation):
    """A configuration was built with zero owners."""

    def __init__(self):
        super().__init__("Configuration requires at least one owner")


class InvalidResourceVector(ContractViolation):
    """A resource vector holds a negative or non-integer count."""
    pass
