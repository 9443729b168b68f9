"""
Point sources: delimited text files, built-in datasets and z-score
normalization.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from scipy.stats import zscore
from sklearn.datasets import load_iris

from .errors import DegenerateDataError, PointSourceError

__all__ = ["KMTEST", "DATASETS", "read_points", "load_dataset", "normalize"]

KMTEST = np.array([
    (2, 4), (3, 3), (3, 4), (3, 5), (4, 3), (4, 4),
    (9, 4), (9, 5), (9, 9), (9, 10), (10, 4), (10, 5),
    (10, 9), (10, 10), (11, 10), (15, 4), (15, 5), (15, 6),
    (16, 4), (16, 6),
], dtype=np.float64)
KMTEST.flags.writeable = False

DATASETS = ("kmtest", "iris")


def read_points(path, columns=(0, 1), delimiter=None) -> np.ndarray:
    """
    Read points from a delimited text file.

    Fields are split on whitespace, or on ``delimiter`` when given. Empty
    fields left by repeated delimiters are dropped before the columns are
    picked, so ``"1,,2"`` and ``"1  2"`` both read as (1, 2). Columns not
    listed in ``columns`` (labels, extra measurements) are ignored.

    Args:
        path: Text file, one record per line
        columns: Field indexes to read as coordinates
        delimiter: Field separator (default: any whitespace)

    Returns:
        float64 array of shape (n, len(columns))
    """
    path = Path(path)
    rows = []
    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            if delimiter is None:
                fields = line.split()
            else:
                fields = [x.strip() for x in line.split(delimiter)]
            fields = [x for x in fields if x]
            if not fields:
                continue
            try:
                rows.append([float(fields[c]) for c in columns])
            except (IndexError, ValueError) as e:
                raise PointSourceError(
                    "%s:%d: cannot read columns %s from %r"
                    % (path, lineno, list(columns), line.rstrip("\n"))) from e

    if not rows:
        raise PointSourceError("%s: no points found" % path)
    return np.array(rows, dtype=np.float64)


def _guess_delimiter(path: Path):
    if path.suffix.lower() != ".csv":
        return None
    with open(path) as f:
        for line in f:
            if line.strip():
                return "," if "," in line else None
    return None


def load_dataset(name, columns=(0, 1)) -> np.ndarray:
    """Load a built-in dataset by name, or read a file path."""
    if name == "kmtest":
        return KMTEST.copy()
    if name == "iris":
        # petal length, petal width
        return load_iris().data[:, 2:4].astype(np.float64)

    path = Path(name)
    return read_points(path, columns=columns, delimiter=_guess_delimiter(path))


def normalize(points) -> np.ndarray:
    """Z-score each dimension with the population mean and deviation."""
    data = np.asarray(points, dtype=np.float64)
    # Compare the range, not the deviation: a constant column such as 0.1
    # can have a tiny non-zero deviation from rounding.
    flat = np.flatnonzero(np.ptp(data, axis=0) == 0)
    if len(flat):
        raise DegenerateDataError(
            "cannot normalize: dimension %s has zero variance"
            % ", ".join(str(d) for d in flat))
    return zscore(data, axis=0, ddof=0)
