"""
Identity tracking for composite values.

The tracker assigns ordinals to composites by identity, never by value equality,
and tells the renderer whether a composite is met for the first time, again
while it is still being rendered (a cycle), or again after it was finished
through another path (an alias).
"""

# Standard library -----------------------------------------------------------------------------------------------------
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class VisitKind(str, Enum):
    """Outcome of `IdentityTracker.begin()`."""
    FRESH = "fresh"
    CYCLE = "cycle"
    ALIAS = "alias"


@unique
class VisitState(str, Enum):
    """Bookkeeping state of a tracked identity."""
    IN_PROGRESS = "in-progress"
    DONE = "done"


@dataclass(frozen=True)
class Visit:
    """
    Result of entering a composite.

    Attributes:
        kind: FRESH on first visit, CYCLE if the composite is an ancestor of the
              current node, ALIAS if it was already finished via another path.
        ordinal: Ordinal assigned on the first visit, starting at 1.
    """
    kind: VisitKind
    ordinal: int

    @property
    def is_fresh(self) -> bool:
        return self.kind is VisitKind.FRESH


@dataclass
class _Entry:
    obj: Any  # strong reference, keeps id(obj) unique while tracked
    ordinal: int
    state: VisitState = VisitState.IN_PROGRESS


class IdentityTracker:
    """
    Per-call table from composite identity to visit state and ordinal.

    Ordinals are handed out sequentially in the order `begin()` first sees each
    identity, so a depth-first pre-order walk numbers composites in pre-order.
    A tracker lives for one render call and is not thread-safe.

    Examples:
        >>> tracker = IdentityTracker()
        >>> node = {}
        >>> tracker.begin(node)
        Visit(kind=<VisitKind.FRESH: 'fresh'>, ordinal=1)
        >>> tracker.begin(node).kind
        <VisitKind.CYCLE: 'cycle'>
        >>> tracker.end(node)
        >>> tracker.begin(node).kind
        <VisitKind.ALIAS: 'alias'>
    """

    def __init__(self, start: int = 1) -> None:
        self._entries: dict[int, _Entry] = {}
        self._next = start

    def __contains__(self, obj: Any) -> bool:
        return id(obj) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def begin(self, obj: Any) -> Visit:
        """
        Enter a composite.

        New identities get the next ordinal and move to IN_PROGRESS. Known
        identities are reported as CYCLE while in progress and ALIAS once done;
        their state is left unchanged.
        """
        entry = self._entries.get(id(obj))
        if entry is None:
            entry = _Entry(obj=obj, ordinal=self._next)
            self._entries[id(obj)] = entry
            self._next += 1
            return Visit(VisitKind.FRESH, entry.ordinal)
        if entry.state is VisitState.IN_PROGRESS:
            return Visit(VisitKind.CYCLE, entry.ordinal)
        return Visit(VisitKind.ALIAS, entry.ordinal)

    def end(self, obj: Any) -> None:
        """
        Leave a composite entered with a FRESH visit.

        Raises:
            ValueError: If the composite is not currently in progress.
        """
        entry = self._entries.get(id(obj))
        if entry is None or entry.state is not VisitState.IN_PROGRESS:
            raise ValueError(f"{class_name(obj)} object at {id(obj):#x} is not in progress")
        entry.state = VisitState.DONE

    @contextmanager
    def visit(self, obj: Any) -> Iterator[Visit]:
        """
        Context manager pairing `begin()` with `end()`.

        `end()` runs on every exit path, including exceptions raised while the
        children are rendered, but only for FRESH visits.
        """
        visit = self.begin(obj)
        try:
            yield visit
        finally:
            if visit.is_fresh:
                self.end(obj)

    def ordinal(self, obj: Any) -> int | None:
        entry = self._entries.get(id(obj))
        return None if entry is None else entry.ordinal

    def state(self, obj: Any) -> VisitState | None:
        entry = self._entries.get(id(obj))
        return None if entry is None else entry.state
