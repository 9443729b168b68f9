"""
lloyd - k-means clustering of 2D points with Lloyd's algorithm.
"""

from .cluster import Cluster, sse, total_sse
from .engine import (
    EMPTY_CLUSTER_POLICIES,
    Iteration,
    KMeansResult,
    fit,
    iterate,
    nearest_cluster,
    nearest_clusters,
    run,
    step,
)
from .errors import (
    ConfigurationError,
    ConvergenceError,
    DegenerateDataError,
    EmptyClusterError,
    LloydError,
    PointSourceError,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Cluster",
    "Iteration",
    "KMeansResult",
    "EMPTY_CLUSTER_POLICIES",
    "fit",
    "iterate",
    "nearest_cluster",
    "nearest_clusters",
    "run",
    "step",
    "sse",
    "total_sse",
    # Errors
    "LloydError",
    "ConfigurationError",
    "ConvergenceError",
    "DegenerateDataError",
    "EmptyClusterError",
    "PointSourceError",
]
