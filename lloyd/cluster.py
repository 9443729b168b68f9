"""
Cluster state for the k-means engine.

A cluster holds its centroid and the indices of the points currently
assigned to it. Points live in one shared read-only array; clusters never
copy them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class Cluster:
    centroid: np.ndarray
    data: np.ndarray = field(repr=False)
    members: list[int] = field(default_factory=list)

    @property
    def points(self) -> np.ndarray:
        """Coordinates of the assigned points, shape (len(members), dim)."""
        return self.data[self.members]

    def __len__(self):
        return len(self.members)

    def mean(self) -> np.ndarray:
        """Mean of the members. Only defined for a non-empty cluster."""
        return self.points.mean(axis=0)

    def sse(self) -> float:
        if not self.members:
            return 0.0
        diff = self.points - self.centroid
        return float(np.sum(diff * diff))


def sse(cluster: Cluster) -> float:
    """Sum of squared distances from each member to the centroid."""
    return cluster.sse()


def total_sse(clusters) -> float:
    return float(sum(c.sse() for c in clusters))
