import typing as t

import yaml
from pydantic import BaseModel, Field, model_validator

Point = t.Sequence[t.Any]
StoredPoint = t.Tuple[t.Any, ...]
Metric = t.Callable[[Point, Point], float]
MetricName = t.Literal["squared_euclidean", "euclidean", "manhattan", "chebyshev"]


class Neighbor(t.NamedTuple):
    point: StoredPoint
    node: t.Any
    distance: float


class TreeConfigModel(BaseModel):
    dimensions: t.Optional[int] = Field(default=None, ge=1)
    metric: MetricName = "squared_euclidean"
    min_value: t.Optional[float] = None
    max_value: t.Optional[float] = None
    printout: bool = False

    @model_validator(mode="after")
    def check_bounds(self) -> "TreeConfigModel":
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError("min_value must not exceed max_value")
        return self


class QueryConfigModel(BaseModel):
    kind: t.Literal["knn", "radius"] = "knn"
    target: t.List[float]
    k: t.Optional[int] = Field(default=None, ge=0)
    radius: t.Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_kind(self) -> "QueryConfigModel":
        if self.kind == "knn" and self.k is None:
            raise ValueError("A knn query needs k")
        if self.kind == "radius" and self.radius is None:
            raise ValueError("A radius query needs a radius")
        return self


class KDSearchConfigModel(BaseModel):
    tree: TreeConfigModel = Field(default_factory=TreeConfigModel)
    queries: t.List[QueryConfigModel] = Field(default_factory=list)


def load_config(path: str) -> KDSearchConfigModel:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return KDSearchConfigModel.model_validate(data)


def load_tree_config(path: str) -> TreeConfigModel:
    return load_config(path).tree
