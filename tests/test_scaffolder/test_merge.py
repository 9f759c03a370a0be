"""Unit tests for the marker-based merge guard (genai_scaffold.scaffolder.merge)."""

from __future__ import annotations

import pytest

from genai_scaffold.errors import IOFailure
from genai_scaffold.scaffolder.merge import ensure_block, has_marker, merge_block

pytestmark = pytest.mark.unit

CORE = "# Project tasks\ninstall:\n\tpoetry install\n"
DOCKER = "# Docker commands\ndocker-build:\n\tdocker build .\n"


class TestHasMarker:
    def test_exact_line(self):
        assert has_marker("a\n# DVC\nb", "# DVC")

    def test_surrounding_whitespace_ignored(self):
        assert has_marker("  # DVC  \n", "# DVC")

    def test_substring_is_not_a_match(self):
        assert not has_marker("# DVC commands\n", "# DVC")


class TestMergeBlock:
    def test_into_empty_content(self):
        assert merge_block("", "# Project tasks", CORE) == CORE

    def test_append_separated_by_blank_line(self):
        merged = merge_block(CORE, "# Docker commands", DOCKER)
        assert merged == CORE + "\n" + DOCKER

    def test_prepend(self):
        merged = merge_block(DOCKER, "# Project tasks", CORE, prepend=True)
        assert merged.startswith("# Project tasks\n")
        assert merged.index("# Docker commands") > merged.index("install:")

    def test_present_marker_leaves_content_unchanged(self):
        content = CORE + "\n" + DOCKER
        assert merge_block(content, "# Docker commands", DOCKER) is content

    def test_block_without_marker_rejected(self):
        with pytest.raises(ValueError):
            merge_block("", "# Missing", "no marker here\n")


class TestEnsureBlock:
    def test_creates_file(self, tmp_path):
        path = tmp_path / "Makefile"
        assert ensure_block(path, "# Project tasks", CORE) is True
        assert path.read_text() == CORE

    def test_second_call_is_noop(self, tmp_path):
        path = tmp_path / "Makefile"
        ensure_block(path, "# Docker commands", DOCKER)
        assert ensure_block(path, "# Docker commands", DOCKER) is False
        assert path.read_text().count("# Docker commands") == 1

    def test_order_independent(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"

        ensure_block(first, "# Project tasks", CORE, prepend=True)
        ensure_block(first, "# Docker commands", DOCKER)

        ensure_block(second, "# Docker commands", DOCKER)
        ensure_block(second, "# Project tasks", CORE, prepend=True)

        assert first.read_text() == second.read_text()

    def test_unwritable_path_raises_io_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(IOFailure):
            ensure_block(blocker / "Makefile", "# Project tasks", CORE)
