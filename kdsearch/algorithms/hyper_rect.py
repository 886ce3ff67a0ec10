import typing as t

from typing_extensions import Self

from kdsearch.data_models import Point


class HyperRect:
    """Axis-aligned box given by per-dimension lower and upper corners."""

    def __init__(self, min_point: t.Sequence[t.Any], max_point: t.Sequence[t.Any]):
        if len(min_point) != len(max_point):
            raise ValueError("Corners of a HyperRect must have the same dimension")
        self.min_point = list(min_point)
        self.max_point = list(max_point)

    @classmethod
    def infinite(cls, dimensions: int, max_value: t.Any, min_value: t.Any) -> Self:
        return cls([min_value] * dimensions, [max_value] * dimensions)

    @property
    def dimensions(self) -> int:
        return len(self.min_point)

    def __repr__(self):
        return f"HyperRect(min_point={self.min_point!r}, max_point={self.max_point!r})"

    def __eq__(self, other):
        if not isinstance(other, HyperRect):
            return NotImplemented
        return self.min_point == other.min_point and self.max_point == other.max_point

    def clone(self) -> Self:
        return type(self)(self.min_point, self.max_point)

    def split(self, dim: int, value: t.Any) -> t.Tuple[Self, Self]:
        """Returns the (left, right) halves of the box cut at `value` along `dim`."""
        left = self.clone()
        left.max_point[dim] = value
        right = self.clone()
        right.min_point[dim] = value
        return left, right

    def contains(self, point: Point) -> bool:
        return all(
            lo <= x <= hi for (lo, x, hi) in zip(self.min_point, point, self.max_point)
        )

    def closest_point(self, target: Point) -> t.List[t.Any]:
        """Target clamped into the box, the nearest point of the box to it."""
        closest = []
        for lo, x, hi in zip(self.min_point, target, self.max_point):
            if x < lo:
                closest.append(lo)
            elif x > hi:
                closest.append(hi)
            else:
                closest.append(x)
        return closest
