#!/usr/bin/env python3
"""
Command line for lloyd.

Usage:
    lloyd run kmtest_k3
    lloyd run my-config.yaml --dataset data/points.txt --normalize
    lloyd plot logs/kmtest_k3.csv --output logs/kmtest_k3.png
    lloyd generate 1000 4 data/blobs.txt --seed 7
    lloyd baseline kmtest_k3
"""

import argparse
import logging
import sys

from . import baseline, generate, report
from .config import load_config
from .errors import LloydError
from .logging_config import setup_logging
from .pipeline import run_pipeline
from .points import load_dataset, normalize

logger = logging.getLogger(__name__)


def cmd_run(args) -> int:
    config = load_config(args.config)
    if args.dataset:
        config.dataset = args.dataset
    if args.normalize:
        config.normalize = True
    if args.output:
        config.output = args.output
    if args.plot:
        config.plot = args.plot

    outcome = run_pipeline(config)
    for entry in report.summarize(outcome.result.clusters)["clusters"]:
        logger.info("  %s: %d points, centroid (%s), sse %.6g",
                    entry["label"], entry["size"],
                    ", ".join("%.6g" % v for v in entry["centroid"]), entry["sse"])
    print(outcome.result.sse)
    return 0


def cmd_plot(args) -> int:
    report.plot_log(args.log, output=args.output, show=args.output is None)
    return 0


def cmd_generate(args) -> int:
    data, _ = generate.make_dataset(args.n, args.k, seed=args.seed)
    path = generate.write_points(args.output, data)
    logger.info("Wrote %d points around %d centers to %s", args.n, args.k, path)
    return 0


def cmd_baseline(args) -> int:
    config = load_config(args.config)
    points = load_dataset(config.dataset, columns=config.columns)
    if config.normalize:
        points = normalize(points)

    stats = baseline.compare(points, config.initial_centroids,
                             config.convergence_threshold, max_iter=config.max_iter,
                             empty_cluster=config.empty_cluster)
    print('lloyd   %.4f ms (%d iterations)' % (stats["lloyd_ms"], stats["lloyd_iterations"]))
    print('sklearn %.4f ms (%d iterations)' % (stats["sklearn_ms"], stats["sklearn_iterations"]))
    print('max centroid distance %.6g, label agreement %.1f%%'
          % (stats["max_centroid_distance"], stats["label_agreement"] * 100))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lloyd",
        description="K-means clustering of 2D points with Lloyd's algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configs are YAML files or the name of a bundled preset:
  kmtest_k2, kmtest_k3, iris_normalized
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', help='Also write log records to this file')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('run', help='Cluster a dataset and write the plotting log')
    p.add_argument('config', help='Config file or preset name')
    p.add_argument('--dataset', help='Override dataset (kmtest, iris or a path)')
    p.add_argument('--normalize', action='store_true', help='Z-score points first')
    p.add_argument('--output', help='Override output log path')
    p.add_argument('--plot', help='Also render the log to this image')
    p.set_defaults(func=cmd_run)

    p = sub.add_parser('plot', help='Scatter plot of a log written by run')
    p.add_argument('log')
    p.add_argument('--output', help='Save to file instead of showing a window')
    p.set_defaults(func=cmd_plot)

    p = sub.add_parser('generate', help='Write a synthetic blob dataset')
    p.add_argument('n', type=int, help='Number of points')
    p.add_argument('k', type=int, help='Number of blobs')
    p.add_argument('output')
    p.add_argument('--seed', type=int, default=None)
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('baseline', help='Compare against scikit-learn KMeans')
    p.add_argument('config', help='Config file or preset name')
    p.set_defaults(func=cmd_baseline)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        return args.func(args)
    except (LloydError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
