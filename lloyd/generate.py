"""Synthetic blob datasets for trying out the engine."""

from pathlib import Path

import numpy as np
import sklearn.datasets


def make_dataset(n, k, seed=None):
    """Return (points, true_labels) for ``n`` 2D points around ``k`` centers."""
    data, labels = sklearn.datasets.make_blobs(
        n_samples=n, n_features=2, centers=k, random_state=seed)
    return data, labels


def write_points(path, points):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        for x, y in np.asarray(points):
            print(float(x), float(y), file=f)
    return path
