"""
Safety Check (multi-resource Banker's test) for the Safety Checker.

Explores the configurations reachable by satisfying one owner at a time,
best-first over a priority frontier, to decide whether every owner can
eventually complete.
"""

import heapq
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from analysis.trace import SearchTrace, TraceEvent, TraceEventType
from models.configuration import Configuration
from models.owner import owners_from_demands
from utils.logger import CheckerLogger


class VerdictSemantics(Enum):
    """How the search turns its final frontier into a verdict."""
    # Safe iff a complete configuration is reached; dead ends fall back to
    # queued alternatives until the frontier is exhausted.
    EXHAUSTIVE = "exhaustive"
    # Stop at the first dead end; safe iff the frontier is non-empty then.
    FRONTIER_NONEMPTY = "frontier_nonempty"


@dataclass(order=True)
class _FrontierEntry:
    """Frontier item ordered by its configuration only."""
    configuration: Configuration
    sequence: Tuple[int, ...] = field(default=(), compare=False)


@dataclass
class SafetyResult:
    """
    Outcome of one safety check.

    Attributes:
        safe: Verdict
        sequence: Owner ids in grant order, when a complete configuration was reached
        expansions: Number of configurations expanded
        semantics: Verdict semantics used
        trace: Search trace (only when recorded)
    """
    safe: bool
    sequence: Optional[List[int]]
    expansions: int
    semantics: VerdictSemantics
    trace: Optional[SearchTrace] = None

    def __bool__(self) -> bool:
        return self.safe


class SafetyChecker:
    """
    Best-first search over configurations.

    The frontier is a min-heap: the configuration with the smallest free
    pool (then smallest owners, position-wise) is examined first. This is
    a deterministic tie-break, not a heuristic toward completion.
    """

    def __init__(
        self,
        semantics: VerdictSemantics = VerdictSemantics.EXHAUSTIVE,
        logger: Optional[CheckerLogger] = None,
        record_trace: bool = False
    ):
        self.semantics = semantics
        self.logger = logger
        self.record_trace = record_trace

    def is_safe(self, configuration: Configuration) -> bool:
        return self.check(configuration).safe

    def check(self, configuration: Configuration) -> SafetyResult:
        """
        Decide whether the configuration is safe.

        Args:
            configuration: Initial snapshot

        Returns:
            SafetyResult with the verdict and, when found, a safe sequence
        """
        trace = SearchTrace() if self.record_trace else None

        if self.logger:
            self.logger.log_configuration(configuration.display("INITIAL CONFIGURATION"))

        if self.semantics == VerdictSemantics.EXHAUSTIVE:
            safe, sequence, expansions = self._search_exhaustive(configuration, trace)
        else:
            safe, sequence, expansions = self._search_until_dead_end(configuration, trace)

        if self.logger:
            self.logger.log_verdict(safe, sequence, expansions)

        return SafetyResult(
            safe=safe,
            sequence=sequence,
            expansions=expansions,
            semantics=self.semantics,
            trace=trace
        )

    def _search_exhaustive(
        self,
        initial: Configuration,
        trace: Optional[SearchTrace]
    ) -> Tuple[bool, Optional[List[int]], int]:
        frontier = [_FrontierEntry(initial)]
        explored = set()
        expansions = 0

        while frontier:
            entry = heapq.heappop(frontier)
            current = entry.configuration

            if current.is_complete():
                self._record(trace, expansions, TraceEventType.COMPLETE, current,
                             message="all owners complete")
                return True, list(entry.sequence), expansions

            key = current.key()
            if key in explored:
                self._record(trace, expansions, TraceEventType.SKIP_DUPLICATE, current)
                continue
            explored.add(key)

            expansions += 1
            successors = self._expand(current, expansions, trace)

            if not successors:
                continue

            for successor, owner_id in successors:
                if successor.key() in explored:
                    continue
                heapq.heappush(frontier, _FrontierEntry(successor, entry.sequence + (owner_id,)))

        return False, None, expansions

    def _search_until_dead_end(
        self,
        initial: Configuration,
        trace: Optional[SearchTrace]
    ) -> Tuple[bool, Optional[List[int]], int]:
        frontier = [_FrontierEntry(initial)]
        expansions = 0

        while frontier and not frontier[0].configuration.is_complete():
            entry = heapq.heappop(frontier)

            expansions += 1
            successors = self._expand(entry.configuration, expansions, trace)

            for successor, owner_id in successors:
                heapq.heappush(frontier, _FrontierEntry(successor, entry.sequence + (owner_id,)))

            # Queued alternatives are left unexamined
            if not successors:
                break

        sequence = None
        if frontier and frontier[0].configuration.is_complete():
            head = frontier[0]
            self._record(trace, expansions, TraceEventType.COMPLETE, head.configuration,
                         message="all owners complete")
            sequence = list(head.sequence)

        return bool(frontier), sequence, expansions

    def _expand(
        self,
        current: Configuration,
        index: int,
        trace: Optional[SearchTrace]
    ) -> List[Tuple[Configuration, int]]:
        """Generate successors of one configuration, logging and tracing each."""
        free = current.get_free()
        pending = current.pending_owner_ids()

        if self.logger:
            self.logger.log_expansion(index, free, pending)
        self._record(trace, index, TraceEventType.EXPAND, current,
                     message=f"{len(pending)} pending")

        successors = current.successors()

        for successor, owner_id in successors:
            if self.logger:
                self.logger.log_grant(index, owner_id, successor.get_free())
            self._record(trace, index, TraceEventType.GRANT, current, owner_id=owner_id)

        if not successors:
            if self.logger:
                self.logger.log_dead_end(index, free)
            self._record(trace, index, TraceEventType.DEAD_END, current,
                         message="no owner can proceed")

        return successors

    @staticmethod
    def _record(
        trace: Optional[SearchTrace],
        index: int,
        event_type: TraceEventType,
        configuration: Configuration,
        owner_id: Optional[int] = None,
        message: str = ""
    ) -> None:
        if trace is None:
            return
        trace.add(TraceEvent(
            index=index,
            event_type=event_type,
            free=configuration.get_free(),
            owner_id=owner_id,
            message=message
        ))


def build_configuration(owners: Iterable, free: Iterable[int]) -> Configuration:
    """
    Build the initial configuration from owner demands and the free pool.

    Args:
        owners: Mappings with 'owned', 'required' and optional 'id', or Owner instances
        free: Free resource pool [R]

    Raises:
        ContractViolation: On mismatched widths, empty owners or invalid counts
    """
    return Configuration(owners_from_demands(list(owners)), free)


def check_safety(
    owners: Iterable,
    free: Iterable[int],
    semantics: VerdictSemantics = VerdictSemantics.EXHAUSTIVE,
    logger: Optional[CheckerLogger] = None,
    record_trace: bool = False
) -> SafetyResult:
    """
    Run a safety check on owner demands and a free pool.

    Returns:
        SafetyResult with verdict, safe sequence and search statistics
    """
    configuration = build_configuration(owners, free)
    checker = SafetyChecker(semantics=semantics, logger=logger, record_trace=record_trace)
    return checker.check(configuration)


def is_safe(
    owners: Iterable,
    free: Iterable[int],
    semantics: VerdictSemantics = VerdictSemantics.EXHAUSTIVE
) -> bool:
    """
    Check if the allocation state is safe.

    Example:
        >>> is_safe([{'owned': [0, 0], 'required': [1, 1]}], [1, 1])
        True
    """
    return check_safety(owners, free, semantics).safe
