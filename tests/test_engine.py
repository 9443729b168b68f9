"""
Test the k-means engine: assignment, update, convergence and SSE.
"""

import numpy as np
import pytest

from lloyd import engine
from lloyd.cluster import Cluster, sse, total_sse
from lloyd.errors import ConfigurationError, ConvergenceError, EmptyClusterError
from lloyd.points import KMTEST

KMTEST_CENTROIDS = [(2.5, 2.5), (5.0, 5.0), (16.0, 10.0)]


def members_as_points(cluster):
    return sorted(tuple(p) for p in cluster.points.tolist())


def test_kmtest_three_clusters():
    """The 20-point test set splits into its low, middle and high groups."""
    result = engine.fit(KMTEST, KMTEST_CENTROIDS, 0.1)
    low, mid, high = result.clusters

    assert members_as_points(low) == [(2, 4), (3, 3), (3, 4), (3, 5), (4, 3), (4, 4)]
    assert members_as_points(mid) == [
        (9, 4), (9, 5), (9, 9), (9, 10), (10, 4), (10, 5), (10, 9), (10, 10), (11, 10)]
    assert members_as_points(high) == [(15, 4), (15, 5), (15, 6), (16, 4), (16, 6)]

    assert low.centroid == pytest.approx([19 / 6, 23 / 6])
    assert mid.centroid == pytest.approx([87 / 9, 66 / 9])
    assert high.centroid == pytest.approx([15.4, 5.0])
    assert result.iterations == 4


def test_run_returns_clusters():
    clusters = engine.run(KMTEST, KMTEST_CENTROIDS, 0.1)
    assert len(clusters) == 3
    assert all(isinstance(c, Cluster) for c in clusters)
    assert sum(len(c) for c in clusters) == len(KMTEST)


def test_tie_goes_to_first_cluster():
    assert engine.nearest_cluster((1.0, 0.0), [(0.0, 0.0), (2.0, 0.0)]) == 0
    assert engine.nearest_cluster((1.0, 0.0), [(2.0, 0.0), (0.0, 0.0)]) == 0

    clusters = engine.run([(1.0, 0.0)], [(0.0, 0.0), (2.0, 0.0)], 0.1)
    assert clusters[0].members == [0]
    assert clusters[1].members == []


def test_nearest_clusters_matches_single_point_lookup():
    centroids = np.array(KMTEST_CENTROIDS)
    labels = engine.nearest_clusters(KMTEST, centroids)
    expected = [engine.nearest_cluster(p, centroids) for p in KMTEST]
    assert labels.tolist() == expected


def test_nan_centroid_is_never_nearest():
    centroids = np.array([(np.nan, np.nan), (10.0, 10.0)])
    assert engine.nearest_cluster((0.0, 0.0), centroids) == 1


def test_true_centers_converge_in_one_iteration():
    points = [(-1, 0), (1, 0), (0, -1), (0, 1),
              (9, 10), (11, 10), (10, 9), (10, 11)]
    result = engine.fit(points, [(0, 0), (10, 10)], 0.001)

    assert result.iterations == 1
    assert result.displacements == [0.0]


def test_every_pass_partitions_the_dataset():
    for state in engine.iterate(KMTEST, [(4, 4), (12, 7)], 0.01):
        indices = sorted(i for c in state.clusters for i in c.members)
        assert indices == list(range(len(KMTEST))), \
            f"iteration {state.number} lost or duplicated points"


def test_sse_never_increases():
    rng = np.random.default_rng(3)
    points = np.concatenate([
        rng.normal((0, 0), 1.0, size=(40, 2)),
        rng.normal((6, 1), 1.5, size=(40, 2)),
        rng.normal((2, 7), 0.8, size=(40, 2)),
    ])
    result = engine.fit(points, [(0, 6), (1, 1), (2, 0)], 1e-6)

    history = result.sse_history
    assert len(history) > 1
    for before, after in zip(history, history[1:]):
        assert after <= before + 1e-9


def test_converged_state_is_a_fixed_point():
    result = engine.fit(KMTEST, KMTEST_CENTROIDS, 0.1)
    data = result.clusters[0].data

    moved = engine.step(data, result.clusters)
    assert moved < 0.1


def test_zero_threshold_stops_at_exact_fixed_point():
    result = engine.fit(KMTEST, KMTEST_CENTROIDS, 0.0)
    assert result.displacements[-1] == 0.0


def test_max_iter_raises_convergence_error():
    with pytest.raises(ConvergenceError) as info:
        engine.fit(KMTEST, KMTEST_CENTROIDS, 0.1, max_iter=2)
    assert info.value.iterations == 2
    assert info.value.displacement > 0.1


def test_iterate_can_be_abandoned():
    states = engine.iterate(KMTEST, KMTEST_CENTROIDS, 0.1)
    first = next(states)
    states.close()

    assert first.number == 1
    assert not first.converged


# Empty clusters: the third centroid is far from every point.

EMPTY_POINTS = [(0.0, 0.0), (1.0, 0.0)]
EMPTY_CENTROIDS = [(0.0, 0.0), (1.0, 0.0), (50.0, 50.0)]


def test_empty_cluster_keeps_centroid():
    result = engine.fit(EMPTY_POINTS, EMPTY_CENTROIDS, 0.1)
    far = result.clusters[2]

    assert far.members == []
    assert far.centroid.tolist() == [50.0, 50.0]
    assert result.iterations == 1


def test_empty_cluster_nan_policy():
    result = engine.fit(EMPTY_POINTS, EMPTY_CENTROIDS, 0.1, empty_cluster="nan")
    far = result.clusters[2]

    assert np.all(np.isnan(far.centroid))
    assert result.clusters[0].members == [0]
    assert result.clusters[1].members == [1]


def test_empty_cluster_error_policy():
    with pytest.raises(EmptyClusterError) as info:
        engine.fit(EMPTY_POINTS, EMPTY_CENTROIDS, 0.1, empty_cluster="error")
    assert info.value.index == 2
    assert info.value.iteration == 1


@pytest.mark.parametrize("points, centroids, threshold, kwargs", [
    ([], [(0, 0)], 0.1, {}),
    ([(0, 0)], [], 0.1, {}),
    ([(0, 0)], [(0, 0, 0)], 0.1, {}),
    ([(0, 0), (1, 1)], [(0, 0), (0, 0)], 0.1, {}),
    ([(0, 0)], [(0, 0)], -1.0, {}),
    ([(0, 0)], [(0, 0)], float("nan"), {}),
    ([(0, 0)], [(0, 0)], 0.1, {"max_iter": 0}),
    ([(0, 0)], [(0, 0)], 0.1, {"max_iter": None}),
    ([(0, 0)], [(0, 0)], 0.1, {"max_iter": "ten"}),
    ([(0, 0)], [(0, 0)], 0.1, {"empty_cluster": "drop"}),
    ([(0, float("inf"))], [(0, 0)], 0.1, {}),
    ([(0, 0), (1,)], [(0, 0)], 0.1, {}),
])
def test_bad_configuration_rejected_before_iterating(points, centroids, threshold, kwargs):
    with pytest.raises(ConfigurationError):
        engine.iterate(points, centroids, threshold, **kwargs)


def test_points_are_shared_read_only():
    clusters = engine.run(KMTEST, KMTEST_CENTROIDS, 0.1)
    data = clusters[0].data

    assert all(c.data is data for c in clusters)
    assert not data.flags.writeable
    assert all(isinstance(i, int) for c in clusters for i in c.members)


def test_result_labels_and_centroids():
    result = engine.fit(KMTEST, KMTEST_CENTROIDS, 0.1)

    assert result.labels.tolist() == [0] * 6 + [1] * 9 + [2] * 5
    assert result.centroids.shape == (3, 2)
    assert result.sse == pytest.approx(total_sse(result.clusters))


def test_higher_dimensions():
    points = [(0, 0, 0), (0, 0, 1), (10, 10, 10), (10, 10, 11)]
    clusters = engine.run(points, [(0, 0, 0), (10, 10, 10)], 0.01)

    assert clusters[0].centroid.tolist() == [0, 0, 0.5]
    assert clusters[1].centroid.tolist() == [10, 10, 10.5]


def test_sse():
    data = np.array([(0.0, 0.0), (2.0, 0.0), (5.0, 5.0)])
    cluster = Cluster(centroid=np.array([1.0, 0.0]), data=data, members=[0, 1])

    assert sse(cluster) == pytest.approx(2.0)
    assert sse(Cluster(centroid=np.array([1.0, 0.0]), data=data)) == 0.0


def test_cluster_mean_of_members():
    data = np.array([(0.0, 0.0), (2.0, 4.0), (9.0, 9.0)])
    cluster = Cluster(centroid=np.array([0.0, 0.0]), data=data, members=[0, 1])

    assert cluster.mean().tolist() == [1.0, 2.0]
