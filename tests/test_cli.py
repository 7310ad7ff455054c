# ==============================================
# Tests for the Command-Line Interface
# ==============================================

import json

import pytest

import cli
from conftest import individual_pair, write_json
from corpus import ProgramPairDownloader
from utils import EXIT_INVALID_INPUT, EXIT_RUNTIME_ERROR, EXIT_SUCCESS


@pytest.fixture
def config_file(tmp_path, config):
    path = tmp_path / "corpus.yaml"
    path.write_text(
        f"metadata_directory: {config.metadata_directory}\n"
        f"program_pairs_directory: {config.program_pairs_directory}\n"
        f"repository_clones_directory: {config.repository_clones_directory}\n"
        f"rejected_pairs_file: {config.rejected_pairs_file}\n"
    )
    return path


@pytest.fixture
def run(config_file):
    def run(*argv):
        return cli.main(["--config", str(config_file), *argv])

    return run


@pytest.fixture(autouse=True)
def no_llm(monkeypatch):
    monkeypatch.setattr(cli, "get_llm_client", lambda provider=None: None)


@pytest.fixture
def offline_downloader(monkeypatch, fake_git):
    monkeypatch.setattr(
        cli,
        "ProgramPairDownloader",
        lambda config: ProgramPairDownloader(config, git=fake_git, show_progress=False),
    )


class TestDownloadCommands:
    def test_default_command_downloads(self, run, config, offline_downloader, individual_file, capsys):
        config.project_metadata_directory.mkdir(parents=True)
        assert run() == EXIT_SUCCESS
        assert "Downloaded all program pairs (2)" in capsys.readouterr().out
        assert (config.program_pairs_directory / "ls" / "c-program" / "ls.c").exists()

    def test_partial_failure_exit_code(self, run, config, offline_downloader, capsys):
        config.project_metadata_directory.mkdir(parents=True)
        broken = individual_pair("yes")
        broken["c_program"]["repository_url"] = "https://example.org/nowhere.git"
        write_json(config.individual_metadata_directory / "tools.json", {"pairs": [broken]})

        assert run("download") == EXIT_RUNTIME_ERROR
        assert "- yes" in capsys.readouterr().err

    def test_demo(self, run, config, offline_downloader):
        write_json(config.demo_metadata_directory / "demo.json", {"pairs": [individual_pair("cat")]})
        assert run("demo") == EXIT_SUCCESS
        assert (config.program_pairs_directory / "cat").is_dir()

    def test_missing_metadata_directory(self, run, offline_downloader, capsys):
        assert run("download") == EXIT_RUNTIME_ERROR
        assert "Failed to read" in capsys.readouterr().err

    def test_delete(self, run, config, capsys):
        config.program_pairs_directory.mkdir(parents=True)
        assert run("delete") == EXIT_SUCCESS
        assert not config.program_pairs_directory.exists()
        assert run("delete") == EXIT_SUCCESS
        assert "Nothing to delete" in capsys.readouterr().out


class TestMetadataCommands:
    def test_metadata_lists_sources(self, run, c_repository, capsys):
        assert run("metadata", "hello", str(c_repository)) == EXIT_SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "lib/util.h",
            "src/greet.c",
            "src/greet.h",
            "src/hello.c",
        ]

    def test_metadata_unknown_program(self, run, c_repository):
        assert run("metadata", "goodbye", str(c_repository)) == EXIT_INVALID_INPUT

    def test_metadata_missing_repository(self, run, tmp_path):
        assert run("metadata", "hello", str(tmp_path / "nope")) == EXIT_INVALID_INPUT

    def test_update_metadata(self, run, tmp_path, c_repository, capsys):
        path = write_json(tmp_path / "hello.json", {"pairs": [individual_pair("hello")]})
        assert run("update-metadata", str(path), str(c_repository)) == EXIT_SUCCESS
        assert "Successfully updated metadata at" in capsys.readouterr().out
        assert "src/hello.c" in json.loads(path.read_text())["pairs"][0]["c_program"]["source_paths"]

    def test_validate_all(self, run, individual_file, project_file, capsys):
        assert run("validate") == EXIT_SUCCESS
        assert "2 metadata files are valid" in capsys.readouterr().out

    def test_validate_reports_duplicates(self, run, config, individual_file, capsys):
        write_json(config.project_metadata_directory / "more.json", {"pairs": [individual_pair("cat")]})
        assert run("validate") == EXIT_INVALID_INPUT
        assert "'cat' is listed more than once" in capsys.readouterr().err

    def test_demo_duplicates_allowed(self, run, config, individual_file):
        write_json(config.demo_metadata_directory / "demo.json", {"pairs": [individual_pair("cat")]})
        assert run("validate") == EXIT_SUCCESS

    def test_validate_invalid_file(self, run, tmp_path, capsys):
        path = write_json(tmp_path / "bad.json", {"pairs": [individual_pair(feature_relationship="x")]})
        assert run("validate", str(path)) == EXIT_INVALID_INPUT
        assert str(path) in capsys.readouterr().err

    def test_catalog_export(self, run, tmp_path, individual_file):
        output = tmp_path / "catalog.json"
        assert run("catalog", "--output", str(output)) == EXIT_SUCCESS
        assert [row["program_name"] for row in json.loads(output.read_text())] == ["cat", "ls"]

    def test_catalog_listing(self, run, individual_file, capsys):
        assert run("catalog") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "rust_subset_of_c: 2" in out


class TestReviewCommands:
    def test_suggest_prints_prompt_without_llm(self, run, individual_file, capsys):
        assert run("suggest", "--count", "3") == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert "up to 3 new program pairs" in captured.out
        assert "No LLM API key found" in captured.err

    def test_review_prompt_only(self, run, individual_file, capsys):
        assert run("review", str(individual_file), "--program", "ls", "--prompt-only") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "===== ls =====" in out
        assert "===== cat =====" not in out

    def test_review_with_llm(self, run, individual_file, monkeypatch, capsys):
        class LLM:
            def complete(self, prompt, **kwargs):
                return json.dumps(
                    {
                        "recommendation": "reject",
                        "actively_maintained": True,
                        "is_rewrite": False,
                        "comparable_scope": True,
                        "notes": "different tool",
                    }
                )

        monkeypatch.setattr(cli, "get_llm_client", lambda provider=None: LLM())
        assert run("review", str(individual_file), "--program", "cat") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "✗ cat: reject" in out
        assert "failed: is_rewrite" in out

    def test_review_unknown_program(self, run, individual_file):
        assert run("review", str(individual_file), "--program", "dd") == EXIT_INVALID_INPUT

    def test_reject_and_list(self, run, config, individual_file, capsys):
        assert run("reject", str(individual_file), "cat", "--reason", "not a rewrite", "--remove") == EXIT_SUCCESS
        assert run("rejected") == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "- cat (" in out
        assert "not a rewrite" in out
        assert json.loads(config.rejected_pairs_file.read_text())["rejected_pairs"][0]["program_name"] == "cat"
        assert [p["program_name"] for p in json.loads(individual_file.read_text())["pairs"]] == ["ls"]

    def test_reject_remove_last_pair_changes_nothing(self, run, config, tmp_path, capsys):
        solo = write_json(tmp_path / "solo.json", {"pairs": [individual_pair("cat")]})
        before = solo.read_text()

        assert run("reject", str(solo), "cat", "--reason", "unmaintained", "--remove") == EXIT_INVALID_INPUT
        assert "only pair" in capsys.readouterr().err
        assert not config.rejected_pairs_file.exists()
        assert solo.read_text() == before

    def test_rejected_names_excluded_from_suggest_prompt(self, run, individual_file, capsys):
        run("reject", str(individual_file), "ls", "--reason", "scope differs")
        capsys.readouterr()
        run("suggest", "--prompt-only")
        assert 'Programs previously rejected:\n[\n  "ls"\n]' in capsys.readouterr().out


def test_invalid_config(tmp_path, capsys):
    path = tmp_path / "bad.yaml"
    path.write_text("clone_depth: 0\n")
    assert cli.main(["--config", str(path), "rejected"]) == EXIT_INVALID_INPUT
    assert "Invalid configuration" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit):
        cli.parse_args(["--version"])
    assert "PairCorpus" in capsys.readouterr().out
