"""
Owner model for the Multi-Resource Safety Checker.

An owner holds some resources and still requires more before it can run
to completion and release everything it holds.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from models.resources import (
    ResourceVector, add, as_vector, check_dimensions, is_zero, less_than, zero
)


@dataclass
class Owner:
    """
    Represents one competing owner in a resource-allocation snapshot.

    Attributes:
        owned: Resources currently held [R]
        required: Outstanding requirement still to be granted [R]
        owner_id: Identifier carried across copies (reported in safe sequences)
        completed: True once the requirement is zero or has been granted
    """
    owned: ResourceVector
    required: ResourceVector
    owner_id: int = 0
    completed: bool = field(init=False)

    def __post_init__(self):
        """Validate vectors and derive the completion flag."""
        self.owned = as_vector(self.owned, f"owner {self.owner_id} owned")
        self.required = as_vector(self.required, f"owner {self.owner_id} required")
        check_dimensions(self.owned, self.required, f"for owner {self.owner_id}")
        self.completed = is_zero(self.required)

    @property
    def width(self) -> int:
        """Number of resource kinds."""
        return len(self.required)

    def get_required(self) -> ResourceVector:
        """Outstanding requirement (a copy)."""
        return self.required.copy()

    def get_owned(self) -> ResourceVector:
        """Currently held resources (a copy)."""
        return self.owned.copy()

    def is_complete(self) -> bool:
        return self.completed

    def allocate(self) -> ResourceVector:
        """
        Grant the outstanding requirement and run the owner to completion.

        The owner's full footprint (held + required) is released; the caller
        folds it back into the free pool of the resulting configuration.

        Returns:
            Freed resources (required + owned)
        """
        freed = add(self.required, self.owned)
        zero(self.required)
        zero(self.owned)
        self.completed = True
        return freed

    def copy(self) -> "Owner":
        """Independent copy for another search branch."""
        clone = Owner(owned=self.owned.copy(), required=self.required.copy(),
                      owner_id=self.owner_id)
        clone.completed = self.completed
        return clone

    def sort_key(self) -> Tuple[bool, Tuple[int, ...]]:
        """Incomplete owners first, then by required vector."""
        return (self.completed, tuple(self.required))

    def state_key(self) -> Tuple[bool, Tuple[int, ...], Tuple[int, ...]]:
        """Full value identity (ignores owner_id)."""
        return (self.completed, tuple(self.required), tuple(self.owned))

    def __lt__(self, other: "Owner") -> bool:
        check_dimensions(self.required, other.required, "comparing owners")
        if self.completed != other.completed:
            return not self.completed
        return less_than(self.required, other.required)

    def __repr__(self) -> str:
        """String representation for debugging."""
        state = "COMPLETE" if self.completed else "PENDING"
        return (
            f"Owner(id={self.owner_id}, state={state}, "
            f"owned={self.owned}, required={self.required})"
        )


def owners_from_demands(demands: List[dict]) -> List[Owner]:
    """
    Build owners from plain demand mappings.

    Each mapping has 'owned' and 'required' vectors and an optional 'id'
    (defaults to its position).
    """
    owners = []
    for index, demand in enumerate(demands):
        if isinstance(demand, Owner):
            owners.append(demand.copy())
            continue
        owners.append(Owner(
            owned=demand['owned'],
            required=demand['required'],
            owner_id=demand.get('id', index)
        ))
    return owners
