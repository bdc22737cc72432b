"""
Dataset download module.

Retrieves one remote dataset over HTTP and writes it into the working
directory under the name taken from the URL.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from imdb_ingest.errors import FetchError
from imdb_ingest.utils.logging_utils import log_progress, log_error

PLACEHOLDER_FILE_NAME = "tmp.bin"


def file_name_for_url(url: str) -> str:
    """
    Derive the local file name from the final path segment of a URL.

    Args:
        url: Source URL (after any redirects)

    Returns:
        The last path segment, or PLACEHOLDER_FILE_NAME when it is empty
    """
    segment = urlparse(url).path.rsplit("/", 1)[-1]
    return segment or PLACEHOLDER_FILE_NAME


def fetch_file(
    url: str, dest_dir: Path, session: Optional[requests.Session] = None
) -> Path:
    """
    Download a URL into dest_dir, overwriting any file of the same name.

    The whole body is buffered before it is written. No retries are made.

    Args:
        url: Source URL
        dest_dir: Directory receiving the file
        session: Optional requests session to issue the request with

    Returns:
        Path of the written file

    Raises:
        FetchError: On network failure, non-success status, or write failure
    """
    section = f"Fetch - {url}"
    client = session or requests

    try:
        response = client.get(url)
        response.raise_for_status()
        body = response.content
    except requests.exceptions.RequestException as e:
        log_error(section, e)
        raise FetchError(f"Failed to download {url}: {e}", dataset=url) from e

    destination = Path(dest_dir) / file_name_for_url(response.url or url)
    try:
        destination.write_bytes(body)
    except OSError as e:
        log_error(section, e)
        raise FetchError(
            f"Failed to write {destination}: {e}", dataset=url
        ) from e

    log_progress(section, f"Wrote {len(body)} bytes to {destination}")
    return destination
