import typing as t


class KDTreeError(Exception):
    pass


class DimensionMismatchError(KDTreeError, ValueError):
    def __init__(self, expected: int, actual: int, *args: object):
        super().__init__(
            f"Point dimension {actual} does not match tree dimensions {expected}", *args
        )
        self.expected = expected
        self.actual = actual


class EmptyInputError(KDTreeError, ValueError):
    def __init__(self, *args: object):
        super().__init__("Cannot build a KDTree from an empty point set", *args)


class InvalidCapacityError(KDTreeError, ValueError):
    def __init__(self, k: t.Any, *args: object):
        super().__init__(f"k must be a non-negative integer, got {k!r}", *args)
        self.k = k


class InvalidDimensionsError(KDTreeError, ValueError):
    def __init__(self, dimensions: t.Any, *args: object):
        super().__init__(f"dimensions must be positive, got {dimensions}", *args)
        self.dimensions = dimensions


class InvalidBoundsError(KDTreeError, ValueError):
    def __init__(self, min_value: t.Any, max_value: t.Any, *args: object):
        super().__init__(
            f"min_value {min_value!r} must not exceed max_value {max_value!r}", *args
        )
        self.min_value = min_value
        self.max_value = max_value


class InvalidRadiusError(KDTreeError, ValueError):
    def __init__(self, radius: t.Any, *args: object):
        super().__init__(f"radius must be a non-negative number, got {radius}", *args)
        self.radius = radius


class NodeCountMismatchError(KDTreeError, ValueError):
    def __init__(self, n_points: int, n_nodes: int, *args: object):
        super().__init__(
            f"Got {n_nodes} nodes for {n_points} points; they must pair one to one",
            *args,
        )
        self.n_points = n_points
        self.n_nodes = n_nodes


class ScalarLimitsError(KDTreeError, ValueError):
    pass


class MetricContractError(KDTreeError, ValueError):
    def __init__(self, distance: t.Any, *args: object):
        super().__init__(
            f"Metric must return a non-negative comparable number, got {distance!r}",
            *args,
        )
        self.distance = distance


class TreeCapacityError(KDTreeError, RuntimeError):
    """
    Raised when construction tries to write a slot beyond the storage capacity.
    Median splitting never does this, so seeing it means the build is broken.
    """

    def __init__(self, index: int, capacity: int, *args: object):
        super().__init__(
            f"Slot {index} is outside the tree storage of capacity {capacity}", *args
        )
        self.index = index
        self.capacity = capacity
