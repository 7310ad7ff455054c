"""Command-line interface for PairCorpus.

This module provides the CLI entry point. It handles argument parsing,
configuration loading, and dispatch to the corpus, discovery and review
packages. Running without a command downloads the whole corpus.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from config import ConfigError, CorpusConfig, load_config
from corpus import (
    CatalogError,
    DownloaderError,
    MetadataValidationError,
    ParserError,
    ProgramPairDownloader,
    WriterError,
    build_catalog,
    delete,
    export_catalog,
    find_duplicate_programs,
    load_corpus,
    metadata_files,
    parse,
    summarize_catalog,
)
from discovery import get_c_source_files, update_metadata_file
from review import (
    CandidateReviewAgent,
    RejectedPair,
    RejectionStore,
    RejectionStoreError,
    ReviewError,
    build_discovery_prompt,
    build_review_prompt,
    remove_pair_from_metadata,
)
from utils import (
    APP_NAME,
    APP_VERSION,
    EXIT_INVALID_INPUT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    get_llm_client,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)

CATALOG_DISPLAY_COLUMNS = ["program_name", "feature_relationship", "c_source_count", "rust_source_count", "metadata_file"]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="paircorpus",
        description=f"{APP_NAME} - manages the corpus of C-Rust program pairs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML/JSON configuration (optional; defaults to the standard layout)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("download", help="Download all C-Rust program pairs (default)")
    subparsers.add_parser("demo", help="Download the demo subset of the corpus")
    subparsers.add_parser("delete", help="Delete the program pairs and repository clones directories")

    metadata_parser = subparsers.add_parser("metadata", help="List the C source files of a program")
    metadata_parser.add_argument("program_name", help='The program name, e.g. "ls"')
    metadata_parser.add_argument("repository", type=Path, help="Path to a local clone of the C repository")

    update_parser = subparsers.add_parser(
        "update-metadata", help="Rewrite the C source paths of a metadata file from a clone"
    )
    update_parser.add_argument("metadata_file", type=Path, help="Metadata file to update")
    update_parser.add_argument("repository", type=Path, help="Path to a local clone of the C repository")

    validate_parser = subparsers.add_parser("validate", help="Validate metadata files")
    validate_parser.add_argument(
        "files", nargs="*", type=Path, help="Metadata files (default: every file in the metadata directory)"
    )

    catalog_parser = subparsers.add_parser("catalog", help="List or export all program pairs")
    catalog_parser.add_argument("--output", type=Path, default=None, help="Export to .csv or .json")
    catalog_parser.add_argument("--demo", action="store_true", help="Only the demo metadata")

    suggest_parser = subparsers.add_parser("suggest", help="Ask for new candidate pairs (or print the prompt)")
    suggest_parser.add_argument("--count", type=int, default=10, help="Maximum number of suggestions")
    suggest_parser.add_argument("--provider", default=None, help="LLM provider: openai, anthropic or gemini")
    suggest_parser.add_argument("--prompt-only", action="store_true", help="Print the prompt without calling an LLM")

    review_parser = subparsers.add_parser("review", help="Review pairs of a metadata file (or print the prompts)")
    review_parser.add_argument("metadata_file", type=Path, help="Metadata file holding the candidates")
    review_parser.add_argument("--program", default=None, help="Only review this program")
    review_parser.add_argument("--provider", default=None, help="LLM provider: openai, anthropic or gemini")
    review_parser.add_argument("--prompt-only", action="store_true", help="Print the prompts without calling an LLM")

    reject_parser = subparsers.add_parser("reject", help="Record a pair as rejected")
    reject_parser.add_argument("metadata_file", type=Path, help="Metadata file holding the pair")
    reject_parser.add_argument("program_name", help="Program to reject")
    reject_parser.add_argument("--reason", required=True, help="Why the pair failed verification")
    reject_parser.add_argument(
        "--remove", action="store_true", help="Also remove the pair from the metadata file"
    )

    subparsers.add_parser("rejected", help="List rejected pairs")

    return parser.parse_args(argv)


def run_download(args: argparse.Namespace, config: CorpusConfig) -> int:
    demo = args.command == "demo"
    summary = ProgramPairDownloader(config).download_metadata(demo=demo)

    if summary.ok:
        print(f"✓ Downloaded all program pairs ({len(summary.pairs_downloaded)})")
        return EXIT_SUCCESS

    print(
        f"✗ Downloaded {len(summary.pairs_downloaded)} program pairs; "
        f"{len(summary.pairs_failed)} failed, {len(summary.files_failed)} metadata files could not be parsed",
        file=sys.stderr,
    )
    for name in summary.pairs_failed:
        print(f"  - {name}", file=sys.stderr)
    for path in summary.files_failed:
        print(f"  - {path}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR


def run_delete(args: argparse.Namespace, config: CorpusConfig) -> int:
    removed = delete(config)
    if removed:
        print(f"✓ Deleted {', '.join(str(path) for path in removed)}")
    else:
        print("✓ Nothing to delete")
    return EXIT_SUCCESS


def run_metadata(args: argparse.Namespace, config: CorpusConfig) -> int:
    sources = get_c_source_files(args.program_name, args.repository, config.makefile_names)
    if not sources:
        print(f"✗ No source files found for '{args.program_name}'", file=sys.stderr)
        return EXIT_INVALID_INPUT
    for path in sorted(path.as_posix() for path in sources):
        print(path)
    return EXIT_SUCCESS


def run_update_metadata(args: argparse.Namespace, config: CorpusConfig) -> int:
    report = update_metadata_file(args.metadata_file, args.repository, config.makefile_names)
    for name, count in report.updated.items():
        print(f"✓ {name}: {count} source files")
    for name in report.unchanged:
        print(f"✗ {name}: no source files found, kept existing paths")
    print(f"Successfully updated metadata at: {report.metadata_file}")
    return EXIT_SUCCESS


def run_validate(args: argparse.Namespace, config: CorpusConfig) -> int:
    files = list(args.files) or metadata_files(config) + metadata_files(config, demo=True)
    if not files:
        print("✗ No metadata files found", file=sys.stderr)
        return EXIT_INVALID_INPUT

    entries = []
    failures = 0
    for path in files:
        try:
            metadata = parse(path)
        except ParserError as e:
            failures += 1
            print(f"✗ {path}: {e}", file=sys.stderr)
            continue
        entries.append((path, metadata))
        print(f"✓ {path} ({len(metadata.pairs)} pairs)")

    # Demo files repeat corpus entries on purpose, so duplicates are checked per corpus
    demo_directory = config.demo_metadata_directory.resolve()
    corpus_entries = [(p, m) for p, m in entries if Path(p).resolve().parent != demo_directory]
    duplicates = find_duplicate_programs(build_catalog(corpus_entries))
    for name in duplicates:
        print(f"✗ Program '{name}' is listed more than once", file=sys.stderr)

    if failures or duplicates:
        return EXIT_INVALID_INPUT
    print(f"✓ {len(entries)} metadata files are valid")
    return EXIT_SUCCESS


def run_catalog(args: argparse.Namespace, config: CorpusConfig) -> int:
    entries, errors = load_corpus(config, demo=args.demo)
    catalog = build_catalog(entries)

    if args.output is not None:
        path = export_catalog(catalog, args.output)
        print(f"✓ Catalog with {len(catalog)} pairs written to {path}")
    elif catalog.empty:
        print("No program pairs found")
    else:
        print(catalog[CATALOG_DISPLAY_COLUMNS].to_string(index=False))
        summary = summarize_catalog(catalog)
        print(f"\n{summary['total_pairs']} program pairs")
        for relationship, count in summary["by_feature_relationship"].items():
            print(f"  {relationship}: {count}")

    for path in errors:
        print(f"✗ Skipped invalid metadata file {path}", file=sys.stderr)
    return EXIT_INVALID_INPUT if errors else EXIT_SUCCESS


def run_suggest(args: argparse.Namespace, config: CorpusConfig) -> int:
    entries, _ = load_corpus(config)
    known = [name for _, metadata in entries for name in metadata.program_names()]
    rejected = RejectionStore(config.rejected_pairs_file).names()

    llm_client = None if args.prompt_only else get_llm_client(args.provider)
    if llm_client is None:
        if not args.prompt_only:
            print("ℹ No LLM API key found. Paste this prompt into a chat tool:\n", file=sys.stderr)
        print(build_discovery_prompt(known, rejected, args.count))
        return EXIT_SUCCESS

    suggestions = CandidateReviewAgent(llm_client).suggest(known, rejected, args.count)
    if not suggestions:
        print("No new candidates suggested")
        return EXIT_SUCCESS
    for suggestion in suggestions:
        print(f"- {suggestion.program_name}")
        print(f"    C:    {suggestion.c_repository_url}")
        print(f"    Rust: {suggestion.rust_repository_url}")
        if suggestion.rationale:
            print(f"    {suggestion.rationale}")
    print("\nSuggestions are unverified. Check each one before adding metadata.")
    return EXIT_SUCCESS


def run_review(args: argparse.Namespace, config: CorpusConfig) -> int:
    metadata = parse(args.metadata_file)
    pairs = metadata.pairs
    if args.program is not None:
        pairs = [pair for pair in pairs if pair.program_name == args.program]
        if not pairs:
            print(f"✗ No pair named '{args.program}' in {args.metadata_file}", file=sys.stderr)
            return EXIT_INVALID_INPUT

    llm_client = None if args.prompt_only else get_llm_client(args.provider)
    if llm_client is None:
        if not args.prompt_only:
            print("ℹ No LLM API key found. Paste these prompts into a chat tool:\n", file=sys.stderr)
        for pair in pairs:
            print(f"===== {pair.program_name} =====")
            print(build_review_prompt(pair))
            print()
        return EXIT_SUCCESS

    agent = CandidateReviewAgent(llm_client)
    for pair in pairs:
        verdict = agent.review(pair)
        marker = "✓" if verdict.recommendation == "accept" else "✗"
        print(f"{marker} {pair.program_name}: {verdict.recommendation}")
        if verdict.failed_criteria:
            print(f"    failed: {', '.join(verdict.failed_criteria)}")
        if verdict.notes:
            print(f"    {verdict.notes}")
    print("\nVerdicts are advisory. Record rejections with the 'reject' command after checking.")
    return EXIT_SUCCESS


def run_reject(args: argparse.Namespace, config: CorpusConfig) -> int:
    metadata = parse(args.metadata_file)
    pair = next((p for p in metadata.pairs if p.program_name == args.program_name), None)
    if pair is None:
        print(f"✗ No pair named '{args.program_name}' in {args.metadata_file}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    if args.remove and len(metadata.pairs) == 1:
        print(
            f"✗ '{pair.program_name}' is the only pair in {args.metadata_file}; "
            "delete the file instead of using --remove",
            file=sys.stderr,
        )
        return EXIT_INVALID_INPUT

    store = RejectionStore(config.rejected_pairs_file)
    if store.add(RejectedPair.from_pair(pair, args.reason)):
        print(f"✓ Recorded rejection of '{pair.program_name}' in {store.path}")
    else:
        print(f"ℹ '{pair.program_name}' was already recorded as rejected")

    if args.remove:
        remove_pair_from_metadata(args.metadata_file, pair.program_name)
        print(f"✓ Removed '{pair.program_name}' from {args.metadata_file}")
    return EXIT_SUCCESS


def run_rejected(args: argparse.Namespace, config: CorpusConfig) -> int:
    entries = RejectionStore(config.rejected_pairs_file).load().rejected_pairs
    if not entries:
        print("No rejected pairs recorded")
        return EXIT_SUCCESS
    for entry in entries:
        print(f"- {entry.program_name} ({entry.rejected_at}): {entry.reason}")
    return EXIT_SUCCESS


COMMANDS = {
    "download": run_download,
    "demo": run_download,
    "delete": run_delete,
    "metadata": run_metadata,
    "update-metadata": run_update_metadata,
    "validate": run_validate,
    "catalog": run_catalog,
    "suggest": run_suggest,
    "review": run_review,
    "reject": run_reject,
    "rejected": run_rejected,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_args(argv)
    if args.command is None:
        args.command = "download"

    setup_logging(verbose=args.verbose)

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)
    except ConfigError as e:
        print(f"✗ Invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except MetadataValidationError as e:
        print(f"✗ Invalid metadata:\n{e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except ParserError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except (DownloaderError, WriterError, CatalogError, ReviewError, RejectionStoreError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (FileNotFoundError, FileExistsError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except KeyboardInterrupt:
        print("\n✗ Interrupted by user", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        print(f"✗ Runtime error: {e}", file=sys.stderr)
        logger.exception("Unexpected error")
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
