"""
Column inference from a dataset's header row.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from imdb_ingest.errors import SchemaError
from imdb_ingest.schema.naming import table_name_for
from imdb_ingest.utils.logging_utils import log_error

FIELD_DELIMITER = "\t"


@dataclass(frozen=True)
class TableDescriptor:
    name: str
    columns: Tuple[str, ...]


def infer_columns(path: Path) -> List[str]:
    """
    Read the first line of a tab-separated file and split it into column names.

    Names are returned verbatim, in file order; only the line terminator is
    removed.

    Args:
        path: Decompressed dataset file

    Returns:
        Ordered list of column names

    Raises:
        SchemaError: If the file cannot be read or has no header line
    """
    section = f"Schema Inference - {Path(path).name}"
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            header = fh.readline()
    except (OSError, UnicodeDecodeError) as e:
        log_error(section, e)
        raise SchemaError(f"Failed to read header of {path}: {e}", dataset=str(path)) from e

    if not header:
        log_error(section, "file is empty")
        raise SchemaError(f"No header line in {path}", dataset=str(path))

    return header.rstrip("\r\n").split(FIELD_DELIMITER)


def describe_table(path: Path) -> TableDescriptor:
    """Build the table descriptor for a decompressed dataset file."""
    return TableDescriptor(name=table_name_for(path), columns=tuple(infer_columns(path)))
