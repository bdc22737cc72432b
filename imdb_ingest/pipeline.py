"""
Pipeline orchestrator for IMDb dataset ingestion.

Drives every configured dataset through fetch, decompress, schema inference,
table provisioning and bulk load, one dataset at a time. The first failure
aborts the run: tables loaded before it stay loaded and the working directory
is left on disk.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from imdb_ingest.config import PipelineConfig
from imdb_ingest.errors import WorkspaceError
from imdb_ingest.extract.decompressor import Decompressor, GunzipDecompressor
from imdb_ingest.extract.fetcher import fetch_file
from imdb_ingest.load.loader import StatementExecutor, load
from imdb_ingest.schema.ddl import build_ddl
from imdb_ingest.schema.inference import describe_table
from imdb_ingest.utils.logging_utils import (
    log_section_start,
    log_section_complete,
    log_progress,
    log_error,
)

Fetcher = Callable[[str, Path], Path]


@dataclass(frozen=True)
class LoadOutcome:
    table_name: str
    summary: str


def ensure_working_dir(working_dir: Path) -> None:
    """Create the working directory; an existing one is reused."""
    try:
        working_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log_error("Working Directory", e)
        raise WorkspaceError(f"Failed to create {working_dir}: {e}") from e


def remove_working_dir(working_dir: Path) -> None:
    """Recursively delete the working directory."""
    try:
        shutil.rmtree(working_dir)
    except OSError as e:
        log_error("Working Directory", e)
        raise WorkspaceError(f"Failed to remove {working_dir}: {e}") from e


def process_dataset(
    url: str,
    working_dir: Path,
    connection_target: str,
    fetcher: Fetcher,
    decompressor: Decompressor,
    executor: Optional[StatementExecutor],
) -> LoadOutcome:
    """
    Fetch, decompress, describe and load a single dataset.

    Args:
        url: Dataset source URL
        working_dir: Directory receiving the downloaded and decompressed files
        connection_target: Store connection string
        fetcher: Download capability
        decompressor: Decompression capability
        executor: Statement executor for the load

    Returns:
        LoadOutcome with the table name and the store's summary line
    """
    compressed_path = fetcher(url, working_dir)
    source_path = decompressor.decompress(compressed_path)

    # Columns for both the DDL and the COPY come from this one header read
    table = describe_table(source_path)
    log_progress(
        f"Processing {url}",
        f"Table {table.name} with {len(table.columns)} columns",
    )
    ddl = build_ddl(table.name, table.columns)

    summary = load(connection_target, ddl, table.name, source_path, executor=executor)
    return LoadOutcome(table_name=table.name, summary=summary)


def run_pipeline(
    pipeline_config: PipelineConfig,
    connection_target: str,
    fetcher: Fetcher = fetch_file,
    decompressor: Optional[Decompressor] = None,
    executor: Optional[StatementExecutor] = None,
) -> List[LoadOutcome]:
    """
    Load every configured dataset into the store, strictly in order.

    Args:
        pipeline_config: Dataset list and working directory
        connection_target: Store connection string, passed through unexamined
        fetcher: Download capability
        decompressor: Decompression capability, gunzip by default
        executor: Statement executor, psql by default

    Returns:
        One LoadOutcome per dataset, in dataset order

    Raises:
        PipelineError: The first stage failure; no later dataset is attempted
    """
    decompressor = decompressor or GunzipDecompressor()
    working_dir = Path(pipeline_config.working_dir)

    log_section_start("Ingestion Pipeline")
    ensure_working_dir(working_dir)

    outcomes = []
    for url in pipeline_config.dataset_urls:
        log_section_start(f"Processing {url}")
        outcome = process_dataset(
            url, working_dir, connection_target, fetcher, decompressor, executor
        )
        outcomes.append(outcome)
        log_section_complete(f"Processing {url}")
        print(f"✅ Done: {outcome.table_name} - {outcome.summary}", flush=True)

    remove_working_dir(working_dir)
    log_section_complete(
        "Ingestion Pipeline", f"Loaded {len(outcomes)} datasets"
    )
    return outcomes
