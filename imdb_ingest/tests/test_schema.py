"""
Unit tests for table naming, header inference and DDL generation.
"""

from pathlib import Path

import pytest

from imdb_ingest.errors import SchemaError
from imdb_ingest.schema.ddl import build_copy_statement, build_ddl
from imdb_ingest.schema.inference import TableDescriptor, describe_table, infer_columns
from imdb_ingest.schema.naming import table_name_for


class TestTableNameFor:
    """Test table identifiers derived from file paths."""

    @pytest.mark.parametrize("path, expected", [
        ("datasets/title.basics.tsv", "title_basics"),
        ("./datasets/name.basics.tsv", "name_basics"),
        ("title.ratings.tsv", "title_ratings"),
        ("/abs/dir.with.dots/title.akas.tsv", "title_akas"),
        ("plain", "plain"),
        ("some-file.v2.tsv", "some_file_v2"),
    ])
    def test_derivation(self, path, expected):
        """Test suffix stripping and separator normalization."""
        assert table_name_for(path) == expected

    def test_only_trailing_suffix_is_stripped(self):
        """Test that an inner .tsv is treated as a separator, not a suffix."""
        assert table_name_for("a.tsv.backup.tsv") == "a_tsv_backup"

    def test_accepts_path_objects(self):
        """Test that Path and str inputs agree."""
        assert table_name_for(Path("x/title.crew.tsv")) == table_name_for("x/title.crew.tsv")


class TestInferColumns:
    """Test column inference from header rows."""

    def test_reads_header_fields_in_order(self, tmp_path):
        """Test the first line is split on tabs."""
        path = tmp_path / "t.tsv"
        path.write_text("a\tb\tc\n1\t2\t3\n", encoding="utf-8")

        assert infer_columns(path) == ["a", "b", "c"]

    def test_fields_are_verbatim(self, tmp_path):
        """Test that names are neither trimmed nor deduplicated."""
        path = tmp_path / "t.tsv"
        path.write_text(" a \ta\ta\r\n", encoding="utf-8")

        assert infer_columns(path) == [" a ", "a", "a"]

    def test_header_without_newline(self, tmp_path):
        """Test a file holding only an unterminated header."""
        path = tmp_path / "t.tsv"
        path.write_text("tconst\taverageRating\tnumVotes", encoding="utf-8")

        assert infer_columns(path) == ["tconst", "averageRating", "numVotes"]

    def test_empty_file_raises(self, tmp_path):
        """Test that an empty file is an error, not an empty schema."""
        path = tmp_path / "empty.tsv"
        path.write_bytes(b"")

        with pytest.raises(SchemaError) as exc_info:
            infer_columns(path)

        assert "No header line" in str(exc_info.value)

    def test_missing_file_raises(self, tmp_path):
        """Test that an unreadable file surfaces as a SchemaError."""
        with pytest.raises(SchemaError) as exc_info:
            infer_columns(tmp_path / "missing.tsv")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_describe_table(self, tmp_path):
        """Test the descriptor combines naming and inference."""
        path = tmp_path / "title.episode.tsv"
        path.write_text("tconst\tparentTconst\tseasonNumber\tepisodeNumber\n", encoding="utf-8")

        assert describe_table(path) == TableDescriptor(
            name="title_episode",
            columns=("tconst", "parentTconst", "seasonNumber", "episodeNumber"),
        )


class TestBuildDdl:
    """Test DDL generation."""

    def test_create_then_truncate(self):
        """Test the create-if-absent and truncate statements."""
        ddl = build_ddl("foo", ["a", "b"])

        assert ddl == "CREATE TABLE IF NOT EXISTS foo (a TEXT,b TEXT); TRUNCATE foo;"

    def test_column_order_is_preserved(self):
        """Test that columns appear in the given order, all typed TEXT."""
        ddl = build_ddl("title_ratings", ("tconst", "averageRating", "numVotes"))

        assert "(tconst TEXT,averageRating TEXT,numVotes TEXT)" in ddl
        assert ddl.index("CREATE TABLE IF NOT EXISTS") < ddl.index("TRUNCATE title_ratings")

    def test_is_deterministic(self):
        """Test that repeated builds yield identical, re-runnable statements."""
        assert build_ddl("foo", ["a", "b"]) == build_ddl("foo", ["a", "b"])

    def test_empty_columns_raise(self):
        """Test that a table without columns is rejected."""
        with pytest.raises(SchemaError):
            build_ddl("foo", [])


class TestBuildCopyStatement:
    """Test the bulk import statement."""

    def test_copy_grammar(self):
        """Test delimiter, quote, null token and header options."""
        statement = build_copy_statement("title_crew", Path("./datasets/title.crew.tsv"))

        assert statement == (
            "\\COPY title_crew FROM 'datasets/title.crew.tsv' "
            "WITH DELIMITER E'\\t' QUOTE E'\\b' NULL AS '\\N' CSV HEADER"
        )

    def test_path_quotes_are_escaped(self):
        """Test that single quotes in the path are doubled."""
        statement = build_copy_statement("t", Path("/tmp/o'neil/t.tsv"))

        assert "FROM '/tmp/o''neil/t.tsv'" in statement
