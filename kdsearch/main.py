import typing as t
from contextlib import contextmanager

import typer
from pydantic import ValidationError

from kdsearch.algorithms.kd_tree import KDTree
from kdsearch.data_models import (
    KDSearchConfigModel,
    Neighbor,
    QueryConfigModel,
    TreeConfigModel,
    load_config,
)
from kdsearch.exceptions import KDTreeError
from kdsearch.utils import utils
from kdsearch.utils.conversion import format_point, load_points, parse_point

app = typer.Typer(help="Build a KD-tree from a points file and query it.")

ConfigOption = t.Annotated[
    t.Optional[str], typer.Option("--config", help="YAML configuration file.")
]
MetricOption = t.Annotated[
    t.Optional[str], typer.Option("--metric", help="Overrides the configured metric.")
]
VerboseOption = t.Annotated[bool, typer.Option("--verbose", "-v")]


@contextmanager
def reported_errors():
    try:
        yield
    except (KDTreeError, ValidationError, ValueError, OSError) as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(code=1)


def _load_settings(config: t.Optional[str]) -> KDSearchConfigModel:
    if config is None:
        return KDSearchConfigModel()
    return load_config(config)


def _build_tree(
    points_file: str,
    tree_config: TreeConfigModel,
    metric: t.Optional[str],
    logger: utils.KDTreeLogger,
) -> KDTree:
    points = load_points(points_file)
    logger.log(f"Loaded {len(points)} points from {points_file}", "load")
    metric_name = metric or tree_config.metric
    dimensions = tree_config.dimensions or (len(points[0]) if points else 1)
    return KDTree(
        dimensions,
        points,
        utils.get_metric(metric_name),
        tree_config.min_value,
        tree_config.max_value,
        logger=logger,
    )


def _print_neighbors(neighbors: t.List[Neighbor]):
    for n in neighbors:
        typer.echo(f"{format_point(n.point)}\t{n.distance:.6g}")


def _run_query(
    tree: KDTree, query: QueryConfigModel, logger: utils.KDTreeLogger
) -> t.List[Neighbor]:
    if query.kind == "knn":
        result = tree.nearest_neighbor_entries(query.target, t.cast(int, query.k))
    else:
        result = tree.radial_search_entries(
            query.target, t.cast(float, query.radius), query.k
        )
    logger.log(
        f"{query.kind} query at {format_point(query.target)} returned {len(result)} points",
        "query",
    )
    return result


@app.command()
def knn(
    points_file: str,
    target: t.Annotated[str, typer.Option("--target", help='e.g. "1.0,2.5"')],
    k: t.Annotated[int, typer.Option("-k", "--k")] = 1,
    metric: MetricOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """Prints the k nearest points to the target, closest first."""
    with reported_errors():
        settings = _load_settings(config)
        logger = utils.KDTreeLogger(printout=verbose or settings.tree.printout)
        tree = _build_tree(points_file, settings.tree, metric, logger)
        query = QueryConfigModel(kind="knn", target=list(parse_point(target)), k=k)
        _print_neighbors(_run_query(tree, query, logger))


@app.command()
def radius(
    points_file: str,
    center: t.Annotated[str, typer.Option("--center", help='e.g. "1.0,2.5"')],
    radius: t.Annotated[float, typer.Option("--radius")],
    k: t.Annotated[t.Optional[int], typer.Option("-k", "--k")] = None,
    metric: MetricOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """Prints every point within the radius of the center, closest first."""
    with reported_errors():
        settings = _load_settings(config)
        logger = utils.KDTreeLogger(printout=verbose or settings.tree.printout)
        tree = _build_tree(points_file, settings.tree, metric, logger)
        query = QueryConfigModel(
            kind="radius", target=list(parse_point(center)), radius=radius, k=k
        )
        _print_neighbors(_run_query(tree, query, logger))


@app.command()
def run(
    points_file: str,
    config: t.Annotated[str, typer.Option("--config", help="YAML configuration file.")],
    verbose: VerboseOption = False,
):
    """Runs every query listed in the configuration file."""
    with reported_errors():
        settings = load_config(config)
        logger = utils.KDTreeLogger(printout=verbose or settings.tree.printout)
        tree = _build_tree(points_file, settings.tree, None, logger)
        for i, query in enumerate(settings.queries):
            typer.echo(f"# query {i}: {query.kind} {format_point(query.target)}")
            _print_neighbors(_run_query(tree, query, logger))


@app.command()
def info(
    points_file: str,
    metric: MetricOption = None,
):
    """Prints the shape of the tree built from the points file."""
    with reported_errors():
        logger = utils.KDTreeLogger(printout=False)
        tree = _build_tree(points_file, TreeConfigModel(), metric, logger)
        typer.echo(f"count: {tree.count}")
        typer.echo(f"dimensions: {tree.dimensions}")
        typer.echo(f"capacity: {tree.capacity}")
        typer.echo(f"height: {tree.storage.height()}")


if __name__ == "__main__":
    app()
