import math
import typing as t

from typing_extensions import Self

from kdsearch.algorithms.binary_tree_navigation import (
    BinaryTreeNodeNavigator,
    StorageView,
    left_child_index,
    right_child_index,
)
from kdsearch.algorithms.bounded_priority_list import BoundedPriorityList, check_capacity
from kdsearch.algorithms.hyper_rect import HyperRect
from kdsearch.data_models import Metric, Neighbor, Point, StoredPoint
from kdsearch.exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    InvalidBoundsError,
    InvalidDimensionsError,
    InvalidRadiusError,
    MetricContractError,
    NodeCountMismatchError,
    TreeCapacityError,
)
from kdsearch.utils import utils

T = t.TypeVar("T")  # Type variable for payload objects

_Entry = t.Tuple[StoredPoint, t.Any]

# Search stack frame kinds
_VISIT = 0
_FAR = 1
_EVALUATE = 2


class KDTree(t.Generic[T]):
    """
    Balanced KD-tree stored as an implicit binary tree in a flat level-order
    array. Built once by median splitting, then read-only: any number of
    queries may share one tree since each query owns its own search state.

    Points are equal-length sequences of a comparable scalar type. The metric
    may be any non-negative distance on points; query radii are expressed in
    the metric's own scale (e.g. squared for the default squared euclidean).
    """

    def __init__(
        self,
        dimensions: int,
        points: t.Iterable[Point],
        metric: Metric = utils.squared_euclidean_distance,
        min_value: t.Any = None,
        max_value: t.Any = None,
        *,
        nodes: t.Optional[t.Iterable[T]] = None,
        scalar_type: t.Optional[type] = None,
        logger: t.Optional[utils.KDTreeLogger] = None,
    ):
        if dimensions < 1:
            raise InvalidDimensionsError(dimensions)
        self._dimensions = dimensions
        self._metric = metric

        point_list = [tuple(p) for p in points]
        if not point_list:
            raise EmptyInputError()
        for p in point_list:
            if len(p) != dimensions:
                raise DimensionMismatchError(dimensions, len(p))

        node_list: t.Optional[t.List[T]] = None
        if nodes is not None:
            node_list = list(nodes)
            if len(node_list) != len(point_list):
                raise NodeCountMismatchError(len(point_list), len(node_list))

        self._min_value, self._max_value = self._resolve_limits(
            min_value, max_value, scalar_type or type(point_list[0][0])
        )

        # Smallest power of two strictly greater than the number of points
        capacity = 2 ** len(point_list).bit_length()
        self._count = len(point_list)
        self._slots: t.List[t.Optional[StoredPoint]] = [None] * capacity
        self._slot_nodes: t.Optional[t.List[t.Any]] = (
            [None] * capacity if node_list is not None else None
        )

        entries: t.List[_Entry] = list(
            zip(point_list, node_list if node_list is not None else [None] * self._count)
        )
        self._generate_tree(0, 0, entries)
        self._storage = StorageView(self._slots, self._slot_nodes)

        if logger is not None:
            logger.log(
                f"Built KDTree with {self._count} points in {dimensions} dimensions "
                f"(capacity {capacity}, height {self._storage.height()})",
                "build",
            )

    @classmethod
    def from_objects(
        cls,
        dimensions: int,
        objects: t.Iterable[T],
        point_getter: t.Callable[[T], Point],
        metric: Metric = utils.squared_euclidean_distance,
        min_value: t.Any = None,
        max_value: t.Any = None,
        *,
        scalar_type: t.Optional[type] = None,
        logger: t.Optional[utils.KDTreeLogger] = None,
    ) -> Self:
        """Builds a tree whose payloads are `objects`, located by `point_getter`."""
        object_list = list(objects)
        return cls(
            dimensions,
            [point_getter(o) for o in object_list],
            metric,
            min_value,
            max_value,
            nodes=object_list,
            scalar_type=scalar_type,
            logger=logger,
        )

    @staticmethod
    def _resolve_limits(
        min_value: t.Any, max_value: t.Any, scalar_type: type
    ) -> t.Tuple[t.Any, t.Any]:
        if min_value is None or max_value is None:
            default_min, default_max = utils.scalar_limits(scalar_type)
            if min_value is None:
                min_value = default_min
            if max_value is None:
                max_value = default_max
        if min_value > max_value:
            raise InvalidBoundsError(min_value, max_value)
        return min_value, max_value

    def __len__(self) -> int:
        return self._count

    def __repr__(self):
        return (
            f"KDTree(count={self._count}, dimensions={self._dimensions}, "
            f"capacity={self.capacity})"
        )

    @property
    def count(self) -> int:
        return self._count

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def metric(self) -> Metric:
        return self._metric

    @property
    def min_value(self) -> t.Any:
        return self._min_value

    @property
    def max_value(self) -> t.Any:
        return self._max_value

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def storage(self) -> StorageView:
        return self._storage

    @property
    def navigator(self) -> BinaryTreeNodeNavigator:
        return BinaryTreeNodeNavigator(self._storage)

    def nearest_neighbors(self, point: Point, k: int) -> t.List[StoredPoint]:
        """The k points closest to `point`, closest first."""
        return [n.point for n in self.nearest_neighbor_entries(point, k)]

    def nearest_neighbor(self, point: Point) -> StoredPoint:
        return self.nearest_neighbors(point, 1)[0]

    def nearest_neighbor_entries(self, point: Point, k: int) -> t.List[Neighbor]:
        target = self._check_point(point)
        k = check_capacity(k)
        if k == 0:
            return []
        neighbors = BoundedPriorityList[int](k)
        self._search_for_nearest_neighbors(target, neighbors, math.inf)
        return self._to_entries(neighbors)

    def radial_search(
        self, center: Point, radius: float, k: t.Optional[int] = None
    ) -> t.List[StoredPoint]:
        """
        Points within `radius` of `center` (inclusive), closest first. With `k`,
        only the k closest of them are returned.
        """
        return [n.point for n in self.radial_search_entries(center, radius, k)]

    def radial_search_entries(
        self, center: Point, radius: float, k: t.Optional[int] = None
    ) -> t.List[Neighbor]:
        target = self._check_point(center)
        try:
            valid_radius = radius >= 0
        except TypeError:
            raise InvalidRadiusError(radius) from None
        if not valid_radius:
            raise InvalidRadiusError(radius)
        if k is None:
            k = self._count
        else:
            k = check_capacity(k)
        if k == 0:
            return []
        neighbors = BoundedPriorityList[int](k)
        self._search_for_nearest_neighbors(target, neighbors, radius)
        return self._to_entries(neighbors)

    def _check_point(self, point: Point) -> StoredPoint:
        target = tuple(point)
        if len(target) != self._dimensions:
            raise DimensionMismatchError(self._dimensions, len(target))
        return target

    def _distance(self, a: Point, b: Point) -> float:
        distance = self._metric(a, b)
        try:
            valid = distance >= 0
        except TypeError:
            raise MetricContractError(distance) from None
        if not valid:
            raise MetricContractError(distance)
        return distance

    def _to_entries(self, neighbors: BoundedPriorityList[int]) -> t.List[Neighbor]:
        return [
            Neighbor(
                t.cast(StoredPoint, self._slots[index]),
                self._slot_nodes[index] if self._slot_nodes is not None else None,
                distance,
            )
            for (index, distance) in neighbors.items_with_priorities(ascending=True)
        ]

    def _write_slot(self, index: int, entry: _Entry) -> None:
        if index >= len(self._slots):
            raise TreeCapacityError(index, len(self._slots))
        self._slots[index] = entry[0]
        if self._slot_nodes is not None:
            self._slot_nodes[index] = entry[1]

    def _generate_tree(self, index: int, dim: int, entries: t.List[_Entry]) -> None:
        """Grows the tree by median splitting, with a full (stable) sort per level."""
        sorted_entries = sorted(entries, key=lambda e: e[0][dim])
        median = len(sorted_entries) // 2
        self._write_slot(index, sorted_entries[median])

        next_dim = (dim + 1) % self._dimensions
        for child_index, part in (
            (left_child_index(index), sorted_entries[:median]),
            (right_child_index(index), sorted_entries[median + 1 :]),
        ):
            if len(part) == 1:
                self._write_slot(child_index, part[0])
            elif len(part) > 1:
                self._generate_tree(child_index, next_dim, part)

    def _search_for_nearest_neighbors(
        self,
        target: StoredPoint,
        neighbors: BoundedPriorityList[int],
        max_search_radius: float,
    ) -> None:
        """
        Top-down pruning search. For each node: the nearer child is searched
        first, then the further child only if the closest point of its region
        lies within the search radius and could beat the current worst
        neighbor, and finally the node itself is offered to `neighbors`.
        The explicit stack replays exactly that order.
        """
        slots = self._slots
        capacity = len(slots)
        rect = HyperRect.infinite(self._dimensions, self._max_value, self._min_value)
        stack: t.List[t.Tuple[t.Any, ...]] = [(_VISIT, 0, rect, 0)]

        while stack:
            frame = stack.pop()
            kind = frame[0]

            if kind == _VISIT:
                _, index, rect, depth = frame
                if index < 0 or index >= capacity or slots[index] is None:
                    continue
                point = slots[index]
                dim = depth % self._dimensions
                left_rect, right_rect = rect.split(dim, point[dim])

                if target[dim] <= point[dim]:
                    near = (left_child_index(index), left_rect)
                    far = (right_child_index(index), right_rect)
                else:
                    near = (right_child_index(index), right_rect)
                    far = (left_child_index(index), left_rect)

                stack.append((_EVALUATE, index))
                stack.append((_FAR, far[0], far[1], depth + 1))
                stack.append((_VISIT, near[0], near[1], depth + 1))

            elif kind == _FAR:
                _, index, rect, depth = frame
                if index >= capacity or slots[index] is None:
                    continue
                distance = self._distance(rect.closest_point(target), target)
                if distance <= max_search_radius and (
                    not neighbors.is_full or distance < neighbors.max_priority
                ):
                    stack.append((_VISIT, index, rect, depth))

            else:
                index = frame[1]
                distance = self._distance(slots[index], target)
                if distance <= max_search_radius:
                    neighbors.add(index, distance)
