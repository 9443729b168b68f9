"""Point source -> engine -> report, driven by a RunConfig."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from . import engine, report
from .config import RunConfig
from .points import load_dataset, normalize

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    points: np.ndarray
    result: engine.KMeansResult
    log_path: Optional[str] = None


def run_pipeline(config: RunConfig) -> PipelineResult:
    config.validate()

    points = load_dataset(config.dataset, columns=config.columns)
    logger.info("Loaded %d points from %s", len(points), config.dataset)
    if config.normalize:
        points = normalize(points)
        logger.debug("Normalized points to zero mean and unit variance")

    result = engine.fit(
        points,
        config.initial_centroids,
        config.convergence_threshold,
        max_iter=config.max_iter,
        empty_cluster=config.empty_cluster,
    )
    logger.info("Converged after %d iterations", result.iterations)
    for number, (moved, sse) in enumerate(zip(result.displacements, result.sse_history), 1):
        logger.debug("  iteration %d: max displacement %.6g, sse %.6g", number, moved, sse)

    empty = [i for i, c in enumerate(result.clusters) if not c.members]
    if empty:
        logger.warning("Clusters %s finished with no points", empty)
    logger.info("SSE: %s", result.sse)

    log_path = None
    if config.output:
        log_path = str(report.write_log(config.output, result.clusters))
        logger.info("Wrote %s", log_path)
        if config.plot:
            report.plot_log(log_path, output=config.plot)
            logger.info("Wrote %s", config.plot)

    return PipelineResult(points=points, result=result, log_path=log_path)
