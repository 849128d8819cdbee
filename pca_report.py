"""
Command-line report for composition PCA.

Usage:
    python pca_report.py dados.csv resultados/ --top-n 10

Reads one semicolon-separated observations file and writes the biplot,
boxplots, scree and contribution charts as HTML plus the ranking table
as CSV into the output directory.
"""

import argparse
import logging
import sys
from pathlib import Path

from composition_analysis import run_composition_pca
from pca_utils.config import (
    CONSTANT_POLICIES,
    DEFAULT_ARROW_SCALE,
    DEFAULT_CONSTANT_POLICY,
    DEFAULT_DECIMAL,
    DEFAULT_DUPLICATE_POLICY,
    DEFAULT_ENCODING,
    DEFAULT_SEPARATOR,
    DEFAULT_TOP_N,
    DUPLICATE_POLICIES
)
from pca_utils.errors import CompositionPCAError
from utils.data_loaders import FileSource

logger = logging.getLogger("pca_report")

FIGURE_FILES = {
    'biplot': 'biplot.html',
    'boxplot': 'boxplots.html',
    'scree': 'scree.html',
    'contributions': 'contributions.html',
}
RANKING_FILE = 'ranking.csv'


def build_parser():
    parser = argparse.ArgumentParser(
        description="PCA biplot and top-compound boxplots for composition data."
    )
    parser.add_argument('input', type=Path, help="Semicolon-separated observations file")
    parser.add_argument('output_dir', type=Path, help="Directory for figures and ranking table")
    parser.add_argument('--top-n', type=int, default=DEFAULT_TOP_N,
                        help=f"Compounds to emphasize and plot (default {DEFAULT_TOP_N})")
    parser.add_argument('--separator', default=DEFAULT_SEPARATOR)
    parser.add_argument('--decimal', choices=[',', '.'], default=DEFAULT_DECIMAL)
    parser.add_argument('--encoding', default=DEFAULT_ENCODING)
    parser.add_argument('--duplicates', choices=DUPLICATE_POLICIES,
                        default=DEFAULT_DUPLICATE_POLICY)
    parser.add_argument('--constant-columns', choices=CONSTANT_POLICIES,
                        default=DEFAULT_CONSTANT_POLICY)
    parser.add_argument('--arrow-scale', type=float, default=DEFAULT_ARROW_SCALE)
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def write_report(report, output_dir, separator=DEFAULT_SEPARATOR, decimal=DEFAULT_DECIMAL):
    """Write every figure of ``report`` as HTML and the ranking as CSV."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for attribute, filename in FIGURE_FILES.items():
        fig = getattr(report, attribute)
        if fig is None:
            continue
        path = output_dir / filename
        fig.write_html(str(path), include_plotlyjs='cdn')
        written.append(path)

    ranking_path = output_dir / RANKING_FILE
    report.ranking.to_csv(ranking_path, sep=separator, decimal=decimal, index=False)
    written.append(ranking_path)

    for path in written:
        logger.info("Wrote %s", path)
    return written


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    source = FileSource(
        path=args.input,
        separator=args.separator,
        decimal=args.decimal,
        encoding=args.encoding
    )

    try:
        report = run_composition_pca(
            source,
            top_n=args.top_n,
            duplicate_policy=args.duplicates,
            constant_policy=args.constant_columns,
            arrow_scale=args.arrow_scale
        )
    except FileNotFoundError:
        print(f"Input file not found: {args.input}", file=sys.stderr)
        return 1
    except CompositionPCAError as exc:
        kind = type(exc).__name__
        where = f" [{exc.field}]" if exc.field else ""
        print(f"{kind}{where}: {exc}", file=sys.stderr)
        return 1

    write_report(report, args.output_dir, separator=args.separator, decimal=args.decimal)
    return 0


if __name__ == "__main__":
    sys.exit(main())
