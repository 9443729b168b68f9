"""
Lloyd's algorithm.

Each iteration clears every cluster, reassigns all points to their nearest
centroid, moves each centroid to the mean of its points and stops once the
largest centroid move falls below the convergence threshold.

The engine does no I/O and no logging.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .cluster import Cluster, total_sse
from .errors import ConfigurationError, ConvergenceError, EmptyClusterError

__all__ = [
    "EMPTY_CLUSTER_POLICIES",
    "Iteration",
    "KMeansResult",
    "as_points",
    "nearest_cluster",
    "nearest_clusters",
    "assign",
    "update",
    "step",
    "iterate",
    "fit",
    "run",
]

DEFAULT_MAX_ITER = 300

# keep: leave an empty cluster's centroid where it was
# nan: centroid becomes NaN and the cluster never wins a point again
# error: raise EmptyClusterError
EMPTY_CLUSTER_POLICIES = ("keep", "nan", "error")


@dataclass
class Iteration:
    """State after one assignment/update pass.

    ``clusters`` is the live cluster list and keeps changing if iteration
    continues.
    """

    number: int
    displacement: float
    sse: float
    clusters: list[Cluster]
    converged: bool


@dataclass
class KMeansResult:
    clusters: list[Cluster]
    iterations: int
    displacements: list[float]
    sse_history: list[float]

    @property
    def centroids(self) -> np.ndarray:
        return np.array([c.centroid for c in self.clusters])

    @property
    def labels(self) -> np.ndarray:
        """Cluster index of every point, in dataset order."""
        labels = np.empty(len(self.clusters[0].data), dtype=int)
        for index, cluster in enumerate(self.clusters):
            labels[cluster.members] = index
        return labels

    @property
    def sse(self) -> float:
        return total_sse(self.clusters)


def as_points(points) -> np.ndarray:
    """Copy ``points`` into a read-only float64 array of shape (n, dim)."""
    try:
        data = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("points must be numeric coordinates") from e
    if data.size == 0:
        raise ConfigurationError("cannot cluster an empty dataset")
    if data.ndim != 2:
        raise ConfigurationError(
            "points must be a sequence of coordinates, got shape %s" % (data.shape,))
    if not np.all(np.isfinite(data)):
        raise ConfigurationError("points contain non-finite coordinates")
    data.flags.writeable = False
    return data


def _as_centroids(initial_centroids, dim: int) -> np.ndarray:
    try:
        centroids = np.array(initial_centroids, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("centroids must be numeric coordinates") from e
    if centroids.size == 0:
        raise ConfigurationError("at least one initial centroid is required")
    if centroids.ndim != 2 or centroids.shape[1] != dim:
        raise ConfigurationError(
            "centroids have shape %s, expected (k, %d)" % (centroids.shape, dim))
    if not np.all(np.isfinite(centroids)):
        raise ConfigurationError("centroids contain non-finite coordinates")
    if len(np.unique(centroids, axis=0)) != len(centroids):
        raise ConfigurationError("initial centroids must be distinct")
    return centroids


def _check_options(convergence_threshold, max_iter, empty_cluster) -> float:
    try:
        threshold = float(convergence_threshold)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("convergence threshold must be a number") from e
    # NaN fails this comparison too
    if not threshold >= 0:
        raise ConfigurationError(
            "convergence threshold must be non-negative, got %r" % convergence_threshold)
    try:
        max_iter = int(max_iter)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("max_iter must be an integer, got %r" % (max_iter,)) from e
    if max_iter < 1:
        raise ConfigurationError("max_iter must be at least 1, got %r" % max_iter)
    if empty_cluster not in EMPTY_CLUSTER_POLICIES:
        raise ConfigurationError(
            "unknown empty cluster policy %r, expected one of %s"
            % (empty_cluster, ", ".join(EMPTY_CLUSTER_POLICIES)))
    return threshold


def nearest_clusters(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for every row of ``data``.

    Ties go to the lowest index. NaN centroids are never nearest unless all
    centroids are NaN.
    """
    diff = data[:, None, :] - centroids[None, :, :]
    dist = np.sum(diff * diff, axis=2)
    dist[np.isnan(dist)] = np.inf
    return np.argmin(dist, axis=1)


def nearest_cluster(point, centroids) -> int:
    point = np.asarray(point, dtype=np.float64)
    centroids = np.asarray(centroids, dtype=np.float64)
    return int(nearest_clusters(point[None, :], centroids)[0])


def assign(data: np.ndarray, clusters: list[Cluster]) -> np.ndarray:
    """Rebuild every cluster's member list from scratch."""
    for cluster in clusters:
        cluster.members.clear()

    labels = nearest_clusters(data, np.array([c.centroid for c in clusters]))
    for index, label in enumerate(labels):
        clusters[label].members.append(index)
    return labels


def update(clusters: list[Cluster], empty_cluster: str = "keep", iteration: int = 1) -> float:
    """Move centroids to their members' mean, return the largest move."""
    max_delta = 0.0
    for index, cluster in enumerate(clusters):
        previous = cluster.centroid
        if cluster.members:
            cluster.centroid = cluster.mean()
        elif empty_cluster == "keep":
            continue
        elif empty_cluster == "error":
            raise EmptyClusterError(index, iteration)
        else:
            cluster.centroid = np.full_like(previous, np.nan)

        delta = float(np.linalg.norm(cluster.centroid - previous))
        # A NaN delta never compares greater and is left out of the maximum.
        if delta > max_delta:
            max_delta = delta
    return max_delta


def step(data: np.ndarray, clusters: list[Cluster], empty_cluster: str = "keep",
         iteration: int = 1) -> float:
    assign(data, clusters)
    return update(clusters, empty_cluster, iteration)


def _iterate(data, clusters, threshold, max_iter, empty_cluster):
    displacement = float("inf")
    for number in range(1, max_iter + 1):
        displacement = step(data, clusters, empty_cluster, number)
        # An exact fixed point also ends the loop when the threshold is 0.
        converged = displacement < threshold or displacement == 0.0
        yield Iteration(number, displacement, total_sse(clusters), clusters, converged)
        if converged:
            return
    raise ConvergenceError(max_iter, displacement)


def iterate(
    points,
    initial_centroids,
    convergence_threshold: float,
    max_iter: int = DEFAULT_MAX_ITER,
    empty_cluster: str = "keep",
) -> Iterator[Iteration]:
    """
    Run Lloyd's algorithm one iteration at a time.

    Arguments are validated immediately, so configuration errors surface
    here rather than on the first ``next()``. The returned generator yields
    an :class:`Iteration` after every update and stops after the first
    converged one. Stop consuming it to cancel a run. If ``max_iter``
    iterations pass without convergence it raises
    :class:`~lloyd.errors.ConvergenceError`.

    Args:
        points: Sequence of coordinates, shape (n, dim)
        initial_centroids: K distinct starting centroids, shape (k, dim)
        convergence_threshold: Stop once no centroid moves this far or more
        max_iter: Upper bound on iterations
        empty_cluster: One of EMPTY_CLUSTER_POLICIES
    """
    threshold = _check_options(convergence_threshold, max_iter, empty_cluster)
    data = as_points(points)
    centroids = _as_centroids(initial_centroids, data.shape[1])
    clusters = [Cluster(centroid=c.copy(), data=data) for c in centroids]
    return _iterate(data, clusters, threshold, int(max_iter), empty_cluster)


def fit(
    points,
    initial_centroids,
    convergence_threshold: float,
    max_iter: int = DEFAULT_MAX_ITER,
    empty_cluster: str = "keep",
) -> KMeansResult:
    """Run to convergence and keep the per-iteration history."""
    displacements = []
    sse_history = []
    last = None
    for last in iterate(points, initial_centroids, convergence_threshold,
                        max_iter=max_iter, empty_cluster=empty_cluster):
        displacements.append(last.displacement)
        sse_history.append(last.sse)

    return KMeansResult(
        clusters=last.clusters,
        iterations=last.number,
        displacements=displacements,
        sse_history=sse_history,
    )


def run(
    points,
    initial_centroids,
    convergence_threshold: float,
    max_iter: int = DEFAULT_MAX_ITER,
    empty_cluster: str = "keep",
) -> list[Cluster]:
    return fit(points, initial_centroids, convergence_threshold,
               max_iter=max_iter, empty_cluster=empty_cluster).clusters
