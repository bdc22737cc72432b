"""
SQL statement builders for table provisioning and bulk import.

Every column is created as TEXT; values are loaded as raw strings.
"""

from pathlib import Path
from typing import Sequence

from imdb_ingest.errors import SchemaError

# IMDb files have no quoting. Backspace is assumed never to occur in a field,
# a field containing it would break the import.
QUOTE_CHARACTER = "E'\\b'"
NULL_TOKEN = "'\\N'"
DELIMITER = "E'\\t'"


def build_ddl(table_name: str, columns: Sequence[str]) -> str:
    """
    Build the create-if-absent and truncate statements for a table.

    Args:
        table_name: Table identifier
        columns: Column names in file order

    Returns:
        Both statements in one string

    Raises:
        SchemaError: If no columns are given
    """
    if not columns:
        raise SchemaError(f"Table {table_name} has no columns")

    column_defs = ",".join(f"{column} TEXT" for column in columns)
    return (
        f"CREATE TABLE IF NOT EXISTS {table_name} ({column_defs}); "
        f"TRUNCATE {table_name};"
    )


def copy_options() -> str:
    return f"WITH DELIMITER {DELIMITER} QUOTE {QUOTE_CHARACTER} NULL AS {NULL_TOKEN} CSV HEADER"


def build_copy_statement(table_name: str, source_path: Path) -> str:
    """
    Build the client-side bulk import of a tab-separated file with a header row.

    Args:
        table_name: Target table
        source_path: File read by the client

    Returns:
        A psql \\COPY meta-command
    """
    quoted_path = str(source_path).replace("'", "''")
    return f"\\COPY {table_name} FROM '{quoted_path}' {copy_options()}"
