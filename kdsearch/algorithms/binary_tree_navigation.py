"""
Index arithmetic and read-only access for binary trees stored in level order,
as in a binary heap: the children of slot i live at 2i + 1 and 2i + 2.
"""

import typing as t
from collections import deque
from collections.abc import Sequence

from kdsearch.data_models import StoredPoint


def left_child_index(index: int) -> int:
    return 2 * index + 1


def right_child_index(index: int) -> int:
    return 2 * index + 2


def parent_index(index: int) -> int | None:
    if index <= 0:
        return None
    return (index - 1) // 2


class StorageView(Sequence):
    """Immutable level-order view of the tree slots. Empty slots read as None."""

    def __init__(
        self,
        points: t.Sequence[StoredPoint | None],
        nodes: t.Sequence[t.Any] | None = None,
    ):
        self._points = tuple(points)
        self._nodes = tuple(nodes) if nodes is not None else None

    @property
    def capacity(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    @t.overload
    def __getitem__(self, index: int) -> StoredPoint | None: ...

    @t.overload
    def __getitem__(self, index: slice) -> t.Tuple[StoredPoint | None, ...]: ...

    def __getitem__(self, index):
        return self._points[index]

    def __repr__(self):
        return f"StorageView({list(self._points)!r})"

    def node(self, index: int) -> t.Any:
        if self._nodes is None:
            return None
        return self._nodes[index]

    def is_occupied(self, index: int) -> bool:
        return 0 <= index < len(self._points) and self._points[index] is not None

    def occupied(self) -> t.Iterator[t.Tuple[int, StoredPoint]]:
        for i, point in enumerate(self._points):
            if point is not None:
                yield i, point

    def height(self) -> int:
        """Number of levels down to the deepest occupied slot."""
        deepest = max((i for i, _ in self.occupied()), default=-1)
        return (deepest + 1).bit_length()


class BinaryTreeNodeNavigator:
    """
    Cursor over a StorageView for manual tree walks. Moving to a missing
    child or above the root yields None rather than an empty navigator.
    """

    def __init__(self, storage: StorageView, index: int = 0):
        self.storage = storage
        self.index = index

    def __repr__(self):
        return f"BinaryTreeNodeNavigator(index={self.index}, value={self.value!r})"

    def __eq__(self, other):
        if not isinstance(other, BinaryTreeNodeNavigator):
            return NotImplemented
        return self.storage is other.storage and self.index == other.index

    def __hash__(self):
        return hash((id(self.storage), self.index))

    def _goto(self, index: int | None) -> t.Optional["BinaryTreeNodeNavigator"]:
        if index is None or not self.storage.is_occupied(index):
            return None
        return BinaryTreeNodeNavigator(self.storage, index)

    @property
    def value(self) -> StoredPoint | None:
        if 0 <= self.index < len(self.storage):
            return self.storage[self.index]
        return None

    @property
    def node(self) -> t.Any:
        if 0 <= self.index < len(self.storage):
            return self.storage.node(self.index)
        return None

    @property
    def left(self) -> t.Optional["BinaryTreeNodeNavigator"]:
        return self._goto(left_child_index(self.index))

    @property
    def right(self) -> t.Optional["BinaryTreeNodeNavigator"]:
        return self._goto(right_child_index(self.index))

    @property
    def parent(self) -> t.Optional["BinaryTreeNodeNavigator"]:
        return self._goto(parent_index(self.index))

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def walk(self) -> t.Iterator["BinaryTreeNodeNavigator"]:
        """Yields this node and its descendants in level order."""
        if self.value is None:
            return
        queue = deque([self])
        while queue:
            current = queue.popleft()
            yield current
            for child in (current.left, current.right):
                if child is not None:
                    queue.append(child)
