"""Command-line entry point for exporting isnad network data."""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .core.isnad_analyzer import IsnadNetworkAnalyzer
from .core.models import IsnadNetworkConfig, RecordLoadError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the narrator network from hadith chains and export JSON data"
    )
    parser.add_argument("--hadiths", dest="hadiths_path", help="Path to the hadiths CSV")
    parser.add_argument("--narrators", dest="narrators_path", help="Path to the narrators CSV")
    parser.add_argument("--output-dir", dest="output_dir", help="Directory for the JSON artifacts")
    parser.add_argument("--max-hadiths", type=int, help="Process at most this many hadiths")
    parser.add_argument("--top-n", type=int, help="Number of narrators in graph.json")
    parser.add_argument("--pagerank-iterations", type=int, help="PageRank iteration count")
    parser.add_argument("--damping", type=float, help="PageRank damping factor")
    parser.add_argument("--betweenness-sample-size", type=int,
                        help="Number of source nodes used for betweenness")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline; returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    load_dotenv()

    try:
        config = IsnadNetworkConfig.from_env(
            hadiths_path=args.hadiths_path,
            narrators_path=args.narrators_path,
            output_dir=args.output_dir,
            max_hadiths=args.max_hadiths,
            top_n=args.top_n,
            pagerank_iterations=args.pagerank_iterations,
            damping=args.damping,
            betweenness_sample_size=args.betweenness_sample_size,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    analyzer = IsnadNetworkAnalyzer(config)
    try:
        analyzer.analyze()
    except RecordLoadError as e:
        logger.error(f"Aborting: the {e.dataset} dataset could not be loaded ({e.reason})")
        return 1

    written = analyzer.export_results()
    for name, path in written.items():
        logger.info(f"  - {name}: {path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
