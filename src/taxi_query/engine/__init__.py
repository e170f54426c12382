"""Query execution: the QueryEngine and its fork-join scanner."""
from taxi_query.engine.fork_join import PARALLEL_THRESHOLD, ForkJoinScanner, partition
from taxi_query.engine.query_engine import QueryEngine

__all__ = [
    "PARALLEL_THRESHOLD",
    "ForkJoinScanner",
    "QueryEngine",
    "partition",
]
