import heapq
import itertools
import operator
import typing as t

from kdsearch.exceptions import InvalidCapacityError

T = t.TypeVar("T")  # Type variable for stored items


def check_capacity(capacity: t.Any) -> int:
    """Returns `capacity` as a non-negative int, else raises InvalidCapacityError."""
    try:
        value = operator.index(capacity)
    except TypeError:
        raise InvalidCapacityError(capacity) from None
    if value < 0:
        raise InvalidCapacityError(capacity)
    return value


class _HeapEntry(t.Generic[T]):
    __slots__ = ("priority", "sequence", "item")

    def __init__(self, priority: t.Any, sequence: int, item: T):
        self.priority = priority
        self.sequence = sequence
        self.item = item

    def __lt__(self, other: "_HeapEntry[T]") -> bool:
        # Inverted so heapq keeps the worst entry (largest priority, latest on ties) at the root
        if self.priority != other.priority:
            return self.priority > other.priority
        return self.sequence > other.sequence


class BoundedPriorityList(t.Generic[T]):
    """
    Keeps the `capacity` items with the smallest priorities seen so far.

    Internally a heap whose root is the worst entry, so it can be replaced in
    O(log k). Priorities are only ever compared, never negated, so any ordered
    type works. The sequence number keeps items out of comparisons and makes
    ties resolve by insertion order.
    """

    def __init__(self, capacity: int):
        self.capacity = check_capacity(capacity)
        self._heap: t.List[_HeapEntry[T]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __repr__(self):
        return f"BoundedPriorityList(capacity={self.capacity}, size={len(self)})"

    @property
    def is_full(self) -> bool:
        return len(self._heap) == self.capacity

    @property
    def max_priority(self) -> t.Any:
        if not self._heap:
            raise IndexError("max_priority of an empty BoundedPriorityList")
        return self._heap[0].priority

    def add(self, item: T, priority: t.Any) -> bool:
        """Offers an item; returns whether it was kept."""
        if self.capacity == 0:
            return False
        entry = _HeapEntry(priority, next(self._counter), item)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
            return True
        if priority < self.max_priority:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def items_with_priorities(self, ascending: bool = True) -> t.List[t.Tuple[T, t.Any]]:
        ordered = sorted(
            self._heap, key=lambda e: (e.priority, e.sequence), reverse=not ascending
        )
        return [(e.item, e.priority) for e in ordered]

    def to_list(self, ascending: bool = True) -> t.List[T]:
        return [item for (item, _) in self.items_with_priorities(ascending)]
