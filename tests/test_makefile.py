# ==============================================
# Tests for Automake Source Parsing
# ==============================================

import pytest

from discovery import canonical_program_name, normalize_makefile, parse_sources, sources_from_makefile


@pytest.mark.parametrize(
    "name,expected",
    [("ls", "ls"), ("git-ls", "git_ls"), ("[", "_"), ("sha256sum", "sha256sum"), ("a.out", "a_out")],
)
def test_canonical_program_name(name, expected):
    assert canonical_program_name(name) == expected


class TestNormalizeMakefile:
    def test_joins_continuations(self):
        lines = ["a_SOURCES = x.c \\", "\ty.c \\", "\tz.c", "b = 1"]
        assert normalize_makefile(lines) == ["a_SOURCES = x.c  \ty.c  \tz.c", "b = 1"]

    def test_trailing_continuation_kept(self):
        assert normalize_makefile(["a = x \\"]) == ["a = x"]


class TestParseSources:
    def test_plain_assignment(self):
        assert parse_sources(["ls_SOURCES = src/ls.c src/ls-ls.c"], "ls") == ["src/ls.c", "src/ls-ls.c"]

    def test_append_and_prefixed_variable(self):
        lines = [
            "src_ls_SOURCES = src/ls.c",
            "src_ls_SOURCES += src/ls-dir.c",
        ]
        assert parse_sources(lines, "ls") == ["src/ls.c", "src/ls-dir.c"]

    def test_other_programs_ignored(self):
        lines = ["lsblk_SOURCES = lsblk.c", "dir_SOURCES = dir.c", "ls_LDADD = $(LIBINTL)"]
        assert parse_sources(lines, "ls") == []

    def test_variables_and_comments_skipped(self):
        lines = ["cat_SOURCES = $(common) src/cat.c # src/old.c", "cat_SOURCES += src/cat.c"]
        assert parse_sources(lines, "cat") == ["src/cat.c"]

    def test_canonical_name_used(self):
        assert parse_sources(["src___SOURCES = src/lbracket.c"], "[") == ["src/lbracket.c"]


def test_sources_from_makefile(tmp_path):
    makefile = tmp_path / "local.mk"
    makefile.write_text("src_cp_SOURCES = src/cp.c \\\n  src/copy.c\n")
    assert sources_from_makefile(makefile, "cp") == ["src/cp.c", "src/copy.c"]


def test_unreadable_makefile_yields_nothing(tmp_path):
    assert sources_from_makefile(tmp_path / "missing.mk", "cp") == []
