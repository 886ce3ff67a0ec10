import json
import math
import typing as t
from datetime import datetime
from decimal import Decimal
from fractions import Fraction

import numpy as np

from kdsearch.data_models import Metric, Point
from kdsearch.exceptions import InvalidBoundsError, ScalarLimitsError


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class KDTreeLog:
    def __init__(self, message: str, event: str, timestamp: str | None = None):
        self.message = message
        self.event = event
        self.timestamp = timestamp if timestamp is not None else timestamp_string()

    def __str__(self):
        return "[{}]: '{}'".format(self.event, self.message)

    def toJSON(self):
        return json.dumps(self, default=lambda o: o.__dict__, sort_keys=True, indent=4)


class InfoLogger(t.Protocol):
    def info(self, msg: str) -> t.Any: ...


class KDTreeLogger(list[KDTreeLog]):
    def __init__(self, printout: bool = True, delegate: InfoLogger | None = None):
        super(KDTreeLogger, self).__init__()
        self.printout = printout
        self.delegate = delegate

    def append(self, log: KDTreeLog):
        super(KDTreeLogger, self).append(log)
        if self.printout:
            print(log)
        if self.delegate:
            self.delegate.info(f"[kdsearch]:[{log.event}]: {log.message}")

    def log(self, message: str, event: str = "info"):
        self.append(KDTreeLog(message, event))

    def events(self, event: str) -> t.List[KDTreeLog]:
        return [x for x in self if x.event == event]


# Metrics


def _difference(x: t.Any, y: t.Any) -> t.Any:
    # numpy fixed-width scalars become Python numbers so differences cannot wrap around
    if isinstance(x, np.generic):
        x = x.item()
    if isinstance(y, np.generic):
        y = y.item()
    return x - y


def squared_euclidean_distance(a: Point, b: Point) -> float:
    return sum(_difference(x, y) ** 2 for (x, y) in zip(a, b))


def euclidean_distance(a: Point, b: Point) -> float:
    return math.sqrt(squared_euclidean_distance(a, b))


def manhattan_distance(a: Point, b: Point) -> float:
    return sum(abs(_difference(x, y)) for (x, y) in zip(a, b))


def chebyshev_distance(a: Point, b: Point) -> float:
    return max((abs(_difference(x, y)) for (x, y) in zip(a, b)), default=0.0)


METRICS: t.Dict[str, Metric] = {
    "squared_euclidean": squared_euclidean_distance,
    "euclidean": euclidean_distance,
    "manhattan": manhattan_distance,
    "chebyshev": chebyshev_distance,
}


def get_metric(name: str) -> Metric:
    try:
        return METRICS[name]
    except KeyError:
        raise ValueError(
            f"Unknown metric '{name}', expected one of {sorted(METRICS)}"
        ) from None


def brute_force_neighbors(
    points: t.Iterable[Point],
    target: Point,
    metric: Metric,
    k: int | None = None,
    radius: float = math.inf,
) -> t.List[t.Tuple[Point, float]]:
    """
    Linear scan returning (point, distance) pairs within `radius` of `target`,
    closest first and truncated to `k` when given. Ties keep input order.
    """
    scored = [(p, metric(p, target)) for p in points]
    scored = [(p, d) for (p, d) in scored if d <= radius]
    scored.sort(key=lambda x: x[1])
    return scored if k is None else scored[:k]


# Scalar limits

_SCALAR_LIMITS: t.Dict[type, t.Tuple[t.Any, t.Any]] = {
    int: (-math.inf, math.inf),
    float: (-math.inf, math.inf),
    bool: (False, True),
    Fraction: (-math.inf, math.inf),
    Decimal: (Decimal("-Infinity"), Decimal("Infinity")),
}

for _int_type in (
    np.int8,
    np.int16,
    np.int32,
    np.int64,
    np.uint8,
    np.uint16,
    np.uint32,
    np.uint64,
):
    _info = np.iinfo(_int_type)
    _SCALAR_LIMITS[_int_type] = (_int_type(_info.min), _int_type(_info.max))

# Floating types bound themselves with their own infinities rather than finfo limits
for _float_type in (np.float16, np.float32, np.float64):
    _SCALAR_LIMITS[_float_type] = (_float_type(-np.inf), _float_type(np.inf))


def register_scalar_limits(scalar_type: type, min_value: t.Any, max_value: t.Any):
    if min_value > max_value:
        raise InvalidBoundsError(min_value, max_value)
    _SCALAR_LIMITS[scalar_type] = (min_value, max_value)


def scalar_limits(scalar_type: type) -> t.Tuple[t.Any, t.Any]:
    if scalar_type in _SCALAR_LIMITS:
        return _SCALAR_LIMITS[scalar_type]
    raise ScalarLimitsError(
        f"No known limits for scalar type {scalar_type.__name__}; "
        "pass min_value and max_value explicitly or call register_scalar_limits"
    )
