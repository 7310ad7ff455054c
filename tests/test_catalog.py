# ==============================================
# Tests for the Corpus Catalog
# ==============================================

import json

import pandas as pd
import pytest

from conftest import individual_pair, write_json
from corpus import (
    CatalogError,
    build_catalog,
    export_catalog,
    find_duplicate_programs,
    load_corpus,
    summarize_catalog,
)
from corpus.catalog import CATALOG_COLUMNS


class TestLoadCorpus:
    def test_loads_projects_then_individual(self, config, individual_file, project_file):
        entries, errors = load_corpus(config)
        assert errors == {}
        assert [path.name for path, _ in entries] == ["diffutils.json", "system-tools.json"]

    def test_invalid_file_reported(self, config, individual_file):
        bad = write_json(config.individual_metadata_directory / "bad.json", {"pairs": []})
        entries, errors = load_corpus(config)
        assert len(entries) == 1
        assert list(errors) == [bad]

    def test_missing_directories_skipped(self, config):
        assert load_corpus(config) == ([], {})


class TestBuildCatalog:
    def test_one_row_per_pair(self, config, individual_file, project_file):
        catalog = build_catalog(load_corpus(config)[0])

        assert list(catalog.columns) == CATALOG_COLUMNS
        assert catalog["program_name"].tolist() == ["diff", "cmp", "cat", "ls"]
        diff = catalog.iloc[0]
        assert diff["translation_tools"] == "c2rust"
        assert diff["c_source_count"] == 1
        assert diff["metadata_file"] == "diffutils.json"

    def test_empty(self):
        catalog = build_catalog([])
        assert catalog.empty
        assert list(catalog.columns) == CATALOG_COLUMNS
        assert find_duplicate_programs(catalog) == []

    def test_duplicates(self, config, individual_file):
        write_json(config.individual_metadata_directory / "more.json", {"pairs": [individual_pair("ls")]})
        catalog = build_catalog(load_corpus(config)[0])
        assert find_duplicate_programs(catalog) == ["ls"]

    def test_summary(self, config, individual_file, project_file):
        summary = summarize_catalog(build_catalog(load_corpus(config)[0]))
        assert summary["total_pairs"] == 4
        assert summary["by_feature_relationship"] == {"rust_equivalent_to_c": 2, "rust_subset_of_c": 2}
        assert summary["by_metadata_file"] == {"diffutils.json": 2, "system-tools.json": 2}


class TestExportCatalog:
    @pytest.fixture
    def catalog(self, config, individual_file):
        return build_catalog(load_corpus(config)[0])

    def test_csv(self, catalog, tmp_path):
        path = export_catalog(catalog, tmp_path / "out" / "catalog.csv")
        assert pd.read_csv(path)["program_name"].tolist() == ["cat", "ls"]

    def test_json(self, catalog, tmp_path):
        path = export_catalog(catalog, tmp_path / "catalog.json")
        records = json.loads(path.read_text())
        assert records[1]["program_name"] == "ls"
        assert records[1]["rust_source_count"] == 1

    def test_unsupported_format(self, catalog, tmp_path):
        with pytest.raises(CatalogError, match="Unsupported"):
            export_catalog(catalog, tmp_path / "catalog.xlsx")
