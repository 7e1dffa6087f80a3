"""
Resource vector arithmetic for the Multi-Resource Safety Checker.

A resource vector is a fixed-length list of non-negative counts, one per
resource kind. All vectors combined or compared in one check share the
same length.
"""

import numpy as np
from typing import List, Sequence

from models.errors import DimensionMismatch, InvalidResourceVector


ResourceVector = List[int]


def as_vector(values: Sequence[int], name: str = "vector") -> ResourceVector:
    """
    Validate a caller-supplied vector and return an independent copy.

    Args:
        values: Sequence of resource counts
        name: Label used in error messages

    Returns:
        List of plain ints

    Raises:
        InvalidResourceVector: If values is not a sequence of counts, or a
            count is not an integer or is negative
    """
    if not isinstance(values, (list, tuple, np.ndarray)):
        raise InvalidResourceVector(
            f"{name}: expected a list of counts, got {type(values).__name__}"
        )

    vector = []
    for i, value in enumerate(values):
        # bool is an int subclass but never a count
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidResourceVector(
                f"{name}[{i}]: expected an integer count, got {value!r}"
            )
        if value < 0:
            raise InvalidResourceVector(f"{name}[{i}]: count cannot be negative ({value})")
        vector.append(int(value))
    return vector


def check_dimensions(left: Sequence[int], right: Sequence[int], context: str = "") -> None:
    """Raise DimensionMismatch unless both vectors have the same length."""
    if len(left) != len(right):
        raise DimensionMismatch(len(left), len(right), context)


def add(left: Sequence[int], right: Sequence[int]) -> ResourceVector:
    """Element-wise sum."""
    check_dimensions(left, right, "in add")
    return (np.asarray(left, dtype=np.int64) + np.asarray(right, dtype=np.int64)).tolist()


def sub(left: Sequence[int], right: Sequence[int]) -> ResourceVector:
    """Element-wise difference. Not clamped: add(sub(a, b), b) == a."""
    check_dimensions(left, right, "in sub")
    return (np.asarray(left, dtype=np.int64) - np.asarray(right, dtype=np.int64)).tolist()


def less_than(left: Sequence[int], right: Sequence[int]) -> bool:
    """
    Lexicographic order over resource vectors.

    The first index where the values differ decides; equal vectors are
    not less than each other. Used only to order configurations.
    """
    check_dimensions(left, right, "in comparison")
    for l_value, r_value in zip(left, right):
        if l_value != r_value:
            return l_value < r_value
    return False


def dominates(available: Sequence[int], required: Sequence[int]) -> bool:
    """
    Check if available covers required in every resource kind.

    A single insufficient coordinate blocks the grant; there are no
    partial grants.
    """
    check_dimensions(available, required, "in feasibility test")
    return bool(np.all(np.asarray(available) >= np.asarray(required)))


def zero(vector: List[int]) -> None:
    """Reset every coordinate to 0 in place."""
    for i in range(len(vector)):
        vector[i] = 0


def is_zero(vector: Sequence[int]) -> bool:
    """True if every coordinate is 0."""
    return all(value == 0 for value in vector)


def format_vector(vector: Sequence[int]) -> str:
    """Format as [R0:n, R1:n, ...] for logs and displays."""
    return "[" + ", ".join(f"R{i}:{value}" for i, value in enumerate(vector)) + "]"
