"""
Configuration model for the Multi-Resource Safety Checker.

A configuration is an immutable snapshot of the free pool plus every
owner's held/required state. Each search branch owns its own copies of
the owners; no configuration aliases another's owners.
"""

from typing import Iterable, List, Optional, Tuple

from models.errors import DimensionMismatch, EmptyOwnerSet
from models.owner import Owner
from models.resources import (
    ResourceVector, add, as_vector, check_dimensions, dominates, less_than
)


class Configuration:
    """
    Snapshot of free resources and all owners, ordered for use as a
    search-frontier key.

    Owners are kept sorted: incomplete before complete, then by required
    vector. Configurations order primarily by free pool, then by owners
    compared position-wise.
    """

    __slots__ = ('_owners', '_free', '_key')

    def __init__(self, owners: Iterable[Owner], free: Iterable[int]):
        """
        Args:
            owners: Owners in this snapshot (copied)
            free: Free resource pool [R]

        Raises:
            EmptyOwnerSet: If no owners are given
            DimensionMismatch: If an owner's width differs from the pool's
        """
        owner_copies = [owner.copy() for owner in owners]
        if not owner_copies:
            raise EmptyOwnerSet()

        self._free = as_vector(free, "free")
        for owner in owner_copies:
            check_dimensions(owner.required, self._free, f"for owner {owner.owner_id}")

        self._owners: Tuple[Owner, ...] = tuple(sorted(owner_copies, key=Owner.sort_key))
        self._key = None

    @property
    def width(self) -> int:
        """Number of resource kinds."""
        return len(self._free)

    def __len__(self) -> int:
        return len(self._owners)

    def is_complete(self) -> bool:
        """True if every owner has completed."""
        return all(owner.is_complete() for owner in self._owners)

    def get_owned(self) -> Tuple[Owner, ...]:
        """Owners in configuration order (copies)."""
        return tuple(owner.copy() for owner in self._owners)

    def get_free(self) -> ResourceVector:
        """Free pool (a copy)."""
        return self._free.copy()

    def pending_owner_ids(self) -> List[int]:
        return [owner.owner_id for owner in self._owners if not owner.is_complete()]

    def key(self) -> tuple:
        """Hashable value identity, used to skip configurations already explored."""
        if self._key is None:
            self._key = (
                tuple(self._free),
                tuple(owner.state_key() for owner in self._owners)
            )
        return self._key

    def can_grant(self, index: int) -> bool:
        """Check if owner at index is pending and the free pool covers its requirement."""
        owner = self._owners[index]
        if owner.is_complete():
            return False
        return dominates(self._free, owner.required)

    def grant(self, index: int) -> Tuple["Configuration", int]:
        """
        Satisfy the owner at index and run it to completion.

        The owner's freed footprint (required + owned) is folded into the
        free pool of the new configuration: free' = free + freed.

        Returns:
            Tuple of (new configuration, granted owner_id)
        """
        if not self.can_grant(index):
            raise ValueError(
                f"Owner {self._owners[index].owner_id} cannot be granted from "
                f"free pool {self._free}"
            )

        new_owners = [owner.copy() for owner in self._owners]
        chosen = new_owners[index]
        freed = chosen.allocate()

        return Configuration(new_owners, add(self._free, freed)), chosen.owner_id

    def successors(self) -> List[Tuple["Configuration", int]]:
        """Every configuration reachable by a single grant, in owner order."""
        return [self.grant(i) for i in range(len(self._owners)) if self.can_grant(i)]

    def _check_comparable(self, other: "Configuration") -> None:
        if len(self._owners) != len(other._owners):
            raise DimensionMismatch(len(self._owners), len(other._owners), "in owner count")

    @staticmethod
    def _owners_less(left: Tuple[Owner, ...], right: Tuple[Owner, ...]) -> bool:
        for l_owner, r_owner in zip(left, right):
            if l_owner < r_owner:
                return True
            if r_owner < l_owner:
                return False
        return False

    def __lt__(self, other: "Configuration") -> bool:
        self._check_comparable(other)
        if less_than(self._free, other._free):
            return True
        if less_than(other._free, self._free):
            return False
        return self._owners_less(self._owners, other._owners)

    def __gt__(self, other: "Configuration") -> bool:
        return other.__lt__(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Configuration):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return f"Configuration(free={self._free}, owners={list(self._owners)})"

    def display(self, title: Optional[str] = None) -> str:
        """
        Generate readable string representation of the configuration.

        Returns:
            Formatted string showing the free pool and each owner's vectors
        """
        output = []
        output.append("\n" + "=" * 60)
        output.append(title or "CONFIGURATION")
        output.append("=" * 60)

        output.append("\nFree Resources:")
        output.append("  [" + ", ".join(f"R{i}:{v:2}" for i, v in enumerate(self._free)) + "]")

        header = "           " + " ".join(f"R{i:2}" for i in range(self.width))

        output.append("\nOwned:")
        output.append(header)
        for owner in self._owners:
            row = f"  O{owner.owner_id:<3}:  "
            row += " ".join(f"{v:3}" for v in owner.owned)
            output.append(row)

        output.append("\nRequired:")
        output.append(header)
        for owner in self._owners:
            row = f"  O{owner.owner_id:<3}:  "
            row += " ".join(f"{v:3}" for v in owner.required)
            row += "   COMPLETE" if owner.is_complete() else "   PENDING"
            output.append(row)

        output.append("\n" + "=" * 60)
        return "\n".join(output)
