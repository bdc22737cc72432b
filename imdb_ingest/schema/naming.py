"""
Table name derivation from dataset file paths.
"""

import re
from pathlib import Path

TABULAR_SUFFIX = ".tsv"

_SEPARATORS = re.compile(r"[.\-]")


def table_name_for(path) -> str:
    """
    Derive the table identifier for a decompressed dataset file.

    The basename loses its trailing .tsv suffix and every remaining separator
    becomes an underscore: "datasets/title.basics.tsv" -> "title_basics".

    Args:
        path: Path of the decompressed file

    Returns:
        Table identifier
    """
    name = Path(path).name
    if name.endswith(TABULAR_SUFFIX) and name != TABULAR_SUFFIX:
        name = name[: -len(TABULAR_SUFFIX)]
    return _SEPARATORS.sub("_", name)
