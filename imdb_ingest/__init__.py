"""
IMDb dataset ingestion into PostgreSQL.

This package downloads the public IMDb TSV dumps, decompresses them, derives a
text-only table for each file from its header row, and bulk loads the rows,
replacing whatever the table held before.
"""

__version__ = "0.1.0"
