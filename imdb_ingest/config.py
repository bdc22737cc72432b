"""
Configuration module for the ingestion pipeline.

Reads environment variables and provides configuration values for the
dataset list, the working directory and the external tools used to
decompress and load files.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Inject variables from a local .env without overriding the shell environment
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=False)


IMDB_DATASETS: Tuple[str, ...] = (
    "https://datasets.imdbws.com/name.basics.tsv.gz",
    "https://datasets.imdbws.com/title.basics.tsv.gz",
    "https://datasets.imdbws.com/title.ratings.tsv.gz",
    "https://datasets.imdbws.com/title.crew.tsv.gz",
    "https://datasets.imdbws.com/title.principals.tsv.gz",
    "https://datasets.imdbws.com/title.episode.tsv.gz",
    "https://datasets.imdbws.com/title.akas.tsv.gz",
)

DECOMPRESSORS = ("gunzip", "gzip")
LOAD_BACKENDS = ("psql", "psycopg2")


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable inputs of one pipeline run."""

    dataset_urls: Tuple[str, ...]
    working_dir: Path


def _parse_dataset_urls(raw: str) -> Tuple[str, ...]:
    if not raw.strip():
        return IMDB_DATASETS
    return tuple(url.strip() for url in raw.split(",") if url.strip())


class Config:
    """
    Configuration class that reads environment variables for the ingestion pipeline.
    """

    # Local staging
    DATASETS_DIR: str = os.getenv("IMDB_DATASETS_DIR", "./datasets")

    # Sources
    DATASET_URLS: Tuple[str, ...] = _parse_dataset_urls(
        os.getenv("IMDB_DATASET_URLS", "")
    )

    # External tools
    DECOMPRESSOR: str = os.getenv("IMDB_DECOMPRESSOR", "gunzip").lower()
    LOAD_BACKEND: str = os.getenv("IMDB_LOAD_BACKEND", "psql").lower()
    PSQL_BIN: str = os.getenv("PSQL_BIN", "psql")
    GUNZIP_BIN: str = os.getenv("GUNZIP_BIN", "gunzip")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that configuration values are usable.

        Raises:
            ValueError: If any configuration value is missing or unsupported.
        """
        problems = []
        if not cls.DATASET_URLS:
            problems.append("IMDB_DATASET_URLS must name at least one dataset")
        if not cls.DATASETS_DIR:
            problems.append("IMDB_DATASETS_DIR must not be empty")
        if cls.DECOMPRESSOR not in DECOMPRESSORS:
            problems.append(
                f"IMDB_DECOMPRESSOR must be one of: {', '.join(DECOMPRESSORS)}"
            )
        if cls.LOAD_BACKEND not in LOAD_BACKENDS:
            problems.append(
                f"IMDB_LOAD_BACKEND must be one of: {', '.join(LOAD_BACKENDS)}"
            )

        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")

    @classmethod
    def pipeline_config(cls) -> PipelineConfig:
        """
        Build the run configuration from the current settings.

        Returns:
            PipelineConfig: Dataset list and working directory for the run.
        """
        return PipelineConfig(
            dataset_urls=tuple(cls.DATASET_URLS),
            working_dir=Path(cls.DATASETS_DIR),
        )

    @classmethod
    def get_decompressor(cls):
        """Return the decompression capability selected by IMDB_DECOMPRESSOR."""
        from imdb_ingest.extract.decompressor import (
            GunzipDecompressor,
            GzipDecompressor,
        )

        if cls.DECOMPRESSOR == "gzip":
            return GzipDecompressor()
        return GunzipDecompressor(binary=cls.GUNZIP_BIN)

    @classmethod
    def get_executor(cls):
        """Return the statement executor selected by IMDB_LOAD_BACKEND."""
        from imdb_ingest.load.loader import PsqlExecutor, Psycopg2Executor

        if cls.LOAD_BACKEND == "psycopg2":
            return Psycopg2Executor()
        return PsqlExecutor(binary=cls.PSQL_BIN)
