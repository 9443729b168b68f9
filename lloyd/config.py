"""
Run configuration for a clustering pipeline.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

import yaml

from .engine import DEFAULT_MAX_ITER, EMPTY_CLUSTER_POLICIES
from .errors import ConfigurationError

__all__ = ["RunConfig", "load_config", "PRESETS_DIR"]

PRESETS_DIR = Path(__file__).parent / "configs"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class RunConfig:
    """Everything one pipeline run needs."""

    # Input
    dataset: str = "kmtest"          # "kmtest", "iris" or a file path
    columns: list[int] = field(default_factory=lambda: [0, 1])
    normalize: bool = False

    # Clustering
    k: Optional[int] = None          # checked against initial_centroids when set
    initial_centroids: list[list[float]] = field(default_factory=list)
    convergence_threshold: float = 0.1
    max_iter: int = DEFAULT_MAX_ITER
    empty_cluster: str = "keep"

    # Output
    output: Optional[str] = None     # plotting log
    plot: Optional[str] = None       # PNG rendered from the log

    def validate(self) -> "RunConfig":
        # YAML hands back whatever was written, so check types first.
        if self.k is not None and not _is_int(self.k):
            raise ConfigurationError("k must be an integer, got %r" % (self.k,))
        if not _is_int(self.max_iter):
            raise ConfigurationError("max_iter must be an integer, got %r" % (self.max_iter,))
        if not (_is_int(self.convergence_threshold)
                or isinstance(self.convergence_threshold, float)):
            raise ConfigurationError(
                "convergence_threshold must be a number, got %r" % (self.convergence_threshold,))
        if not isinstance(self.columns, list) or not all(_is_int(c) for c in self.columns):
            raise ConfigurationError("columns must be a list of integers, got %r" % (self.columns,))
        if not isinstance(self.initial_centroids, list) or not all(
                isinstance(c, (list, tuple)) for c in self.initial_centroids):
            raise ConfigurationError(
                "initial_centroids must be a list of coordinates, got %r"
                % (self.initial_centroids,))

        if self.k is not None and self.k <= 0:
            raise ConfigurationError("k must be positive, got %r" % self.k)
        if not self.initial_centroids:
            raise ConfigurationError("initial_centroids must list at least one centroid")
        if self.k is not None and len(self.initial_centroids) != self.k:
            raise ConfigurationError(
                "k is %d but %d initial centroids were given"
                % (self.k, len(self.initial_centroids)))
        if len(self.columns) != len(self.initial_centroids[0]):
            raise ConfigurationError(
                "%d columns selected but centroids have %d coordinates"
                % (len(self.columns), len(self.initial_centroids[0])))
        if self.empty_cluster not in EMPTY_CLUSTER_POLICIES:
            raise ConfigurationError("unknown empty_cluster policy %r" % self.empty_cluster)
        if self.plot and not self.output:
            raise ConfigurationError("plot requires an output log path")
        return self

    def to_dict(self) -> dict:
        """Convert to a YAML-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RunConfig":
        """Create from dict, ignoring unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_config(path) -> RunConfig:
    """
    Load and validate a RunConfig from a YAML file.

    Args:
        path: YAML file, or the name of a bundled preset (e.g. "kmtest_k3")

    Returns:
        Validated RunConfig
    """
    path = Path(path)
    if not path.exists() and (PRESETS_DIR / (path.name + ".yaml")).exists():
        path = PRESETS_DIR / (path.name + ".yaml")
    if not path.exists():
        raise FileNotFoundError(f"No config at {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at top level")
    return RunConfig.from_dict(data).validate()
