"""
Decompression of downloaded datasets.

Both implementations decompress in place: the output lands next to the input
with the .gz suffix removed, an existing output is overwritten, and the
compressed input is removed on success.
"""

import gzip
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from imdb_ingest.errors import DecompressError
from imdb_ingest.utils.logging_utils import log_progress, log_error

GZIP_SUFFIX = ".gz"


def decompressed_path_for(path: Path) -> Path:
    """
    Compute the path a gzip file decompresses to.

    Only a trailing .gz suffix is removed, so "a.gz.tsv.gz" maps to "a.gz.tsv".

    Args:
        path: Compressed file path

    Returns:
        Sibling path without the compression suffix

    Raises:
        DecompressError: If the path does not end with .gz
    """
    path = Path(path)
    if path.suffix != GZIP_SUFFIX or path.name == GZIP_SUFFIX:
        raise DecompressError(f"Not a gzip file name: {path}", dataset=str(path))
    return path.with_suffix("")


class Decompressor(Protocol):
    def decompress(self, path: Path) -> Path:
        ...


class GunzipDecompressor:
    """Runs the gunzip binary in force mode."""

    def __init__(self, binary: str = "gunzip"):
        self.binary = binary

    def decompress(self, path: Path) -> Path:
        """
        Decompress path with `gunzip -f`.

        Args:
            path: Compressed file path

        Returns:
            Path of the decompressed file

        Raises:
            DecompressError: If gunzip cannot be started or exits non-zero
        """
        path = Path(path)
        output_path = decompressed_path_for(path)
        section = f"Decompress - {path.name}"

        try:
            subprocess.run(
                [self.binary, "-f", str(path)],
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            log_error(section, e)
            raise DecompressError(
                f"Could not run {self.binary}: {e}", dataset=str(path)
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            log_error(section, f"exit status {e.returncode}: {stderr}")
            raise DecompressError(
                f"{self.binary} failed on {path} (exit status {e.returncode}): {stderr}",
                dataset=str(path),
            ) from e

        log_progress(section, f"Decompressed to {output_path}")
        return output_path


class GzipDecompressor:
    """In-process decompression with the gzip module."""

    def decompress(self, path: Path) -> Path:
        path = Path(path)
        output_path = decompressed_path_for(path)
        section = f"Decompress - {path.name}"

        try:
            with gzip.open(path, "rb") as src, open(output_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
        except (OSError, EOFError) as e:
            # Keep the compressed input, drop the partial output
            output_path.unlink(missing_ok=True)
            log_error(section, e)
            raise DecompressError(
                f"Failed to decompress {path}: {e}", dataset=str(path)
            ) from e

        path.unlink()
        log_progress(section, f"Decompressed to {output_path}")
        return output_path
