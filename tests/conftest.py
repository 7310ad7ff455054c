# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures: a corpus layout under tmp_path, sample metadata
# documents, a fake git client, and a small C repository.
#
# No test touches the network or runs git.
# ==============================================

import json
from pathlib import Path

import pytest

from config import CorpusConfig
from corpus.errors import CloneError


def individual_pair(name: str = "cat", **overrides) -> dict:
    pair = {
        "program_name": name,
        "program_description": f"The {name} utility",
        "translation_tools": [],
        "feature_relationship": "rust_subset_of_c",
        "c_program": {
            "documentation_url": f"https://example.org/docs/{name}",
            "repository_url": "https://example.org/gnu/coreutils.git",
            "source_paths": [f"src/{name}.c"],
        },
        "rust_program": {
            "documentation_url": f"https://example.org/rust/{name}",
            "repository_url": "https://example.org/uutils/coreutils.git",
            "source_paths": [f"src/uu/{name}"],
        },
    }
    pair.update(overrides)
    return pair


def project_document(*names: str) -> dict:
    return {
        "project_information": {
            "translation_tools": ["c2rust"],
            "feature_relationship": "rust_equivalent_to_c",
            "c_program": {
                "documentation_url": "https://example.org/diffutils",
                "repository_url": "https://example.org/gnu/diffutils.git",
            },
            "rust_program": {
                "documentation_url": "https://example.org/diffutils-rs",
                "repository_url": "https://example.org/uutils/diffutils",
            },
        },
        "pairs": [
            {
                "program_name": name,
                "program_description": f"The {name} utility",
                "c_program": {"source_paths": [f"src/{name}.c"]},
                "rust_program": {"source_paths": [f"src/{name}.rs"]},
            }
            for name in names
        ],
    }


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path) -> CorpusConfig:
    """Corpus layout rooted in a temporary directory."""
    return CorpusConfig(
        metadata_directory=tmp_path / "metadata",
        program_pairs_directory=tmp_path / "program_pairs",
        repository_clones_directory=tmp_path / "repository_clones",
        rejected_pairs_file=tmp_path / "metadata" / "rejected.json",
    )


@pytest.fixture
def individual_document() -> dict:
    return {"pairs": [individual_pair("cat"), individual_pair("ls")]}


@pytest.fixture
def individual_file(config, individual_document) -> Path:
    return write_json(config.individual_metadata_directory / "system-tools.json", individual_document)


@pytest.fixture
def project_file(config) -> Path:
    return write_json(config.project_metadata_directory / "diffutils.json", project_document("diff", "cmp"))


class FakeGitClient:
    """Stands in for GitClient: 'clones' by writing files from a template.

    ``repositories`` maps repository URL to {relative path: content}.
    """

    def __init__(self, repositories: dict[str, dict[str, str]]):
        self.repositories = repositories
        self.clones: list[str] = []

    def clone(self, repository_url: str, destination: Path, depth: int = 1) -> Path:
        self.clones.append(repository_url)
        if repository_url not in self.repositories:
            raise CloneError(f"Failed to clone repository '{repository_url}': not found", repository_url)
        destination = Path(destination)
        (destination / ".git").mkdir(parents=True)
        for relative, content in self.repositories[repository_url].items():
            target = destination / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return destination


@pytest.fixture
def fake_git():
    return FakeGitClient(
        {
            "https://example.org/gnu/coreutils.git": {
                "src/cat.c": "int main(void) { return 0; }\n",
                "src/ls.c": "int main(void) { return 1; }\n",
            },
            "https://example.org/uutils/coreutils.git": {
                "src/uu/cat/src/cat.rs": "fn main() {}\n",
                "src/uu/cat/Cargo.toml": "[package]\nname = \"uu_cat\"\n",
                "src/uu/ls/src/ls.rs": "fn main() {}\n",
            },
            "https://example.org/gnu/diffutils.git": {
                "src/diff.c": "/* diff */\n",
                "src/cmp.c": "/* cmp */\n",
            },
            "https://example.org/uutils/diffutils": {
                "src/diff.rs": "// diff\n",
                "src/cmp.rs": "// cmp\n",
            },
        }
    )


@pytest.fixture
def c_repository(tmp_path) -> Path:
    """A small automake-style C repository."""
    repo = tmp_path / "repo"
    files = {
        "Makefile.am": "bin_PROGRAMS = hello\nhello_SOURCES = src/hello.c \\\n\tsrc/greet.c\n",
        "lib/local.mk": "libgnu_a_SOURCES = lib/util.c\n",
        "src/hello.c": '#include <stdio.h>\n#include "greet.h"\nint main(void) { greet(); }\n',
        "src/greet.c": '#include "greet.h"\n#include "util.h"\nvoid greet(void) {}\n',
        "src/greet.h": '#include "greet.h"\nvoid greet(void);\n',
        "lib/util.h": "void util(void);\n",
        "lib/util.c": '#include "util.h"\n',
        "src/unrelated.c": "int x;\n",
    }
    for relative, content in files.items():
        target = repo / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return repo
