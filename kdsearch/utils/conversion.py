import typing as t

import numpy as np

from kdsearch.data_models import Point


def parse_point(text: str) -> t.Tuple[float, ...]:
    """Parses "1.5, 2, -3" (commas and/or whitespace) into a tuple of floats."""
    fields = text.replace(",", " ").split()
    if not fields:
        raise ValueError("Empty point")
    return tuple(float(x) for x in fields)


def load_points(path: str) -> t.List[t.Tuple[float, ...]]:
    with open(path, "r") as f:
        first = ""
        for line in f:
            if line.strip() and not line.lstrip().startswith("#"):
                first = line
                break
    delimiter = "," if "," in first else None
    data = np.loadtxt(path, delimiter=delimiter, ndmin=2, dtype=np.float64)
    return [tuple(float(x) for x in row) for row in data]


def format_point(point: Point, precision: int = 6) -> str:
    return ",".join(f"{float(x):.{precision}g}" for x in point)
