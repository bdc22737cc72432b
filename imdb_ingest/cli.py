"""
Command-line entry point: download the IMDb datasets and import them into PostgreSQL.
"""

import argparse
import sys
from typing import List, Optional

from imdb_ingest import __version__
from imdb_ingest.config import Config
from imdb_ingest.errors import PipelineError
from imdb_ingest.pipeline import run_pipeline

BANNER = r"""
░▀█▀░█▄█░█▀▄░█▀▄░░░░█▀▄░█▀▀
░░█░░█░█░█░█░█▀▄░░░░█▀▄░▀▀█
░▀▀▀░▀░▀░▀▀░░▀▀░░▀░░▀░▀░▀▀▀
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imdb-ingest",
        description="Download the IMDb datasets and import them into PostgreSQL.",
    )
    parser.add_argument(
        "-p",
        "--pg-connection-string",
        required=True,
        help="libpq connection string of the target database",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline and return the process exit status."""
    args = build_parser().parse_args(argv)

    print(BANNER)
    print("🚀 Downloading IMDB datasets and importing them into PostgreSQL...")

    try:
        Config.validate()
        run_pipeline(
            Config.pipeline_config(),
            args.pg_connection_string,
            decompressor=Config.get_decompressor(),
            executor=Config.get_executor(),
        )
    except (PipelineError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
