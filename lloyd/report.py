"""
Cluster reports: the plotting log, summaries and scatter plots.

Log lines look like ``x y "label"``. Points are labelled with a colour per
cluster, cycling through PALETTE, and every cluster is followed by one line
for its centroid labelled CENTROID_LABEL.
"""

from pathlib import Path

import matplotlib.pyplot as plot
import numpy as np

from .cluster import total_sse

PALETTE = ("r", "g", "b", "c", "m", "y")
CENTROID_LABEL = "k"


def cluster_label(index):
    return PALETTE[index % len(PALETTE)]


def write_log(path, clusters):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        for index, cluster in enumerate(clusters):
            label = cluster_label(index)
            for x, y in cluster.points:
                f.write('%s %s "%s"\n' % (float(x), float(y), label))
            x, y = cluster.centroid
            f.write('%s %s "%s"\n' % (float(x), float(y), CENTROID_LABEL))
    return path


def read_log(path):
    """Return (points, labels) from a log written by write_log."""
    data = []
    labels = []
    with open(path) as f:
        for line in f:
            fields = line.split()
            if not fields:
                continue
            data.append([float(fields[0]), float(fields[1])])
            labels.append(fields[2].strip('"'))
    return np.array(data).reshape(-1, 2), labels


def summarize(clusters):
    return {
        "clusters": [
            {
                "label": cluster_label(index),
                "size": len(cluster.members),
                "centroid": [float(v) for v in cluster.centroid],
                "sse": cluster.sse(),
            }
            for index, cluster in enumerate(clusters)
        ],
        "sse": total_sse(clusters),
    }


def plot_log(path, output=None, show=False):
    data, labels = read_log(path)
    labels = np.array(labels)
    means = labels == CENTROID_LABEL

    figure = plot.figure()
    plot.scatter(data[~means, 0], data[~means, 1], c=list(labels[~means]))
    plot.scatter(data[means, 0], data[means, 1], linewidths=2, marker='x', c=CENTROID_LABEL)
    if output is not None:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        figure.savefig(output)
    if show:
        plot.show()
    plot.close(figure)
    return output
