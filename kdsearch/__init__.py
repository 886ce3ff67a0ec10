"""Balanced, array-backed KD-tree for exact nearest-neighbor and radius queries."""

from kdsearch.algorithms.binary_tree_navigation import (
    BinaryTreeNodeNavigator,
    StorageView,
    left_child_index,
    parent_index,
    right_child_index,
)
from kdsearch.algorithms.bounded_priority_list import BoundedPriorityList
from kdsearch.algorithms.hyper_rect import HyperRect
from kdsearch.algorithms.kd_tree import KDTree
from kdsearch.data_models import Neighbor
from kdsearch.exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    InvalidBoundsError,
    InvalidCapacityError,
    InvalidDimensionsError,
    InvalidRadiusError,
    KDTreeError,
    MetricContractError,
    NodeCountMismatchError,
    ScalarLimitsError,
    TreeCapacityError,
)
from kdsearch.utils.utils import (
    KDTreeLog,
    KDTreeLogger,
    chebyshev_distance,
    euclidean_distance,
    manhattan_distance,
    register_scalar_limits,
    scalar_limits,
    squared_euclidean_distance,
)

__all__ = [
    "BinaryTreeNodeNavigator",
    "BoundedPriorityList",
    "DimensionMismatchError",
    "EmptyInputError",
    "HyperRect",
    "InvalidBoundsError",
    "InvalidCapacityError",
    "InvalidDimensionsError",
    "InvalidRadiusError",
    "KDTree",
    "KDTreeError",
    "KDTreeLog",
    "KDTreeLogger",
    "MetricContractError",
    "Neighbor",
    "NodeCountMismatchError",
    "ScalarLimitsError",
    "StorageView",
    "TreeCapacityError",
    "chebyshev_distance",
    "euclidean_distance",
    "left_child_index",
    "manhattan_distance",
    "parent_index",
    "register_scalar_limits",
    "right_child_index",
    "scalar_limits",
    "squared_euclidean_distance",
]
