"""
Compare the engine against scikit-learn's KMeans started from the same
centroids.
"""

import time

import numpy as np
import sklearn.cluster

from . import engine

SKLEARN_MAX_ITER = 300


def compare(points, initial_centroids, convergence_threshold, max_iter=engine.DEFAULT_MAX_ITER,
            empty_cluster="keep"):
    """
    Cluster ``points`` with both implementations.

    Returns:
        Dict with timings in milliseconds, the iteration counts, the largest
        distance between matching centroids and the fraction of points given
        the same label.
    """
    data = engine.as_points(points)
    centroids = np.array(initial_centroids, dtype=np.float64)

    start = time.time()
    result = engine.fit(data, centroids, convergence_threshold, max_iter=max_iter,
                        empty_cluster=empty_cluster)
    lloyd_ms = (time.time() - start) * 1000

    start = time.time()
    kmeans = sklearn.cluster.KMeans(
        len(centroids), init=centroids, n_init=1, max_iter=SKLEARN_MAX_ITER, tol=0.0)
    labels = kmeans.fit_predict(data)
    sklearn_ms = (time.time() - start) * 1000

    # Both start from the same centroids, so cluster i matches cluster i.
    distance = np.linalg.norm(result.centroids - kmeans.cluster_centers_, axis=1)
    return {
        "lloyd_ms": lloyd_ms,
        "sklearn_ms": sklearn_ms,
        "lloyd_iterations": result.iterations,
        "sklearn_iterations": int(kmeans.n_iter_),
        "max_centroid_distance": float(distance.max()),
        "label_agreement": float(np.mean(result.labels == labels)),
    }
