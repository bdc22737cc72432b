"""
PostgreSQL loading module.

Provisions a dataset's table and bulk imports the decompressed file. The
statements go through a statement executor: either the psql client, run once
per dataset, or an in-process psycopg2 connection opened per dataset.
"""

import re
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

import psycopg2

from imdb_ingest.errors import LoadError
from imdb_ingest.schema.ddl import build_copy_statement
from imdb_ingest.utils.logging_utils import (
    log_section_start,
    log_section_complete,
    log_error,
)

_CLIENT_COPY = re.compile(
    r"^\\COPY\s+(?P<table>\S+)\s+FROM\s+'(?P<path>(?:[^']|'')*)'\s*(?P<options>.*)$",
    re.IGNORECASE | re.DOTALL,
)


class StatementExecutor(Protocol):
    def execute(self, connection_target: str, statements: Sequence[str]) -> str:
        ...


def split_client_copy(statement: str) -> Optional[Tuple[str, Path]]:
    """
    Translate a psql \\COPY ... FROM '<file>' into a server COPY ... FROM STDIN.

    Args:
        statement: SQL statement or psql meta-command

    Returns:
        Tuple of (server statement, source file), or None for other statements
    """
    match = _CLIENT_COPY.match(statement.strip())
    if not match:
        return None
    server_statement = f"COPY {match['table']} FROM STDIN {match['options']}".strip()
    return server_statement, Path(match["path"].replace("''", "'"))


class PsqlExecutor:
    """Runs statements through the psql command-line client."""

    def __init__(self, binary: str = "psql"):
        self.binary = binary

    def build_command(self, connection_target: str, statements: Sequence[str]) -> List[str]:
        # ON_ERROR_STOP makes psql skip the remaining -c arguments and exit non-zero
        command = [self.binary, connection_target, "-v", "ON_ERROR_STOP=1"]
        for statement in statements:
            command.extend(["-c", statement])
        return command

    def execute(self, connection_target: str, statements: Sequence[str]) -> str:
        """
        Run all statements in a single psql invocation.

        Args:
            connection_target: libpq connection string, passed through unexamined
            statements: SQL statements and psql meta-commands, in order

        Returns:
            Standard output of psql

        Raises:
            LoadError: If psql cannot be started or reports an error
        """
        try:
            result = subprocess.run(
                self.build_command(connection_target, statements),
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise LoadError(f"Could not run {self.binary}: {e}") from e
        except subprocess.CalledProcessError as e:
            output = (e.stderr or e.stdout or "").strip()
            raise LoadError(
                f"{self.binary} exited with status {e.returncode}: {output}",
                output=output,
            ) from e
        return result.stdout


class Psycopg2Executor:
    """Runs statements over a psycopg2 connection in one transaction."""

    def execute(self, connection_target: str, statements: Sequence[str]) -> str:
        responses = []
        conn = None
        try:
            conn = psycopg2.connect(connection_target)
            with conn:
                with conn.cursor() as cursor:
                    for statement in statements:
                        client_copy = split_client_copy(statement)
                        if client_copy is None:
                            cursor.execute(statement)
                            responses.append(cursor.statusmessage or "")
                            continue

                        server_statement, source_path = client_copy
                        with open(source_path, "rb") as fh:
                            cursor.copy_expert(server_statement, fh)
                        responses.append(f"COPY {cursor.rowcount}")
        except psycopg2.Error as e:
            output = str(e).strip()
            raise LoadError(f"Database error: {output}", output=output) from e
        except OSError as e:
            raise LoadError(f"Failed to read source file: {e}") from e
        finally:
            if conn is not None:
                conn.close()

        return "\n".join(responses)


def summarize(output: str) -> str:
    """Return the trailing non-empty line of a store response, lower-cased."""
    lines = [line.strip() for line in output.strip().splitlines() if line.strip()]
    return lines[-1].lower() if lines else ""


def load(
    connection_target: str,
    ddl: str,
    table_name: str,
    source_path: Path,
    executor: Optional[StatementExecutor] = None,
) -> str:
    """
    Provision a table and bulk import a decompressed dataset into it.

    The DDL and the import are issued in one executor call, so a failing DDL
    statement keeps the import from running.

    Args:
        connection_target: Store connection string
        ddl: Create-if-absent and truncate statements for the table
        table_name: Target table
        source_path: Decompressed tab-separated file
        executor: Statement executor, psql by default

    Returns:
        Last line of the store's response, lower-cased (e.g. "copy 1520")

    Raises:
        LoadError: If either statement fails
    """
    executor = executor or PsqlExecutor()
    section = f"Load - {table_name}"
    log_section_start(section)

    statements = [ddl, build_copy_statement(table_name, source_path)]
    try:
        output = executor.execute(connection_target, statements)
    except LoadError as e:
        e.dataset = e.dataset or str(source_path)
        log_error(section, e)
        raise

    summary = summarize(output)
    log_section_complete(section, summary)
    return summary
