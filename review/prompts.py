"""Prompt templates for candidate discovery and review.

Both prompts work pasted into any chat tool as well as sent through the
API client, and both ask for JSON so answers can be parsed either way.
"""

from corpus.schema import ProgramPair
from utils import sanitize_json_for_prompt, sanitize_name, sanitize_string_for_prompt

REVIEW_CRITERIA = {
    "actively_maintained": "The Rust program is actively maintained (recent commits or releases).",
    "is_rewrite": "The Rust program is a rewrite of the C program, not an unrelated tool with a similar name.",
    "comparable_scope": "Both programs implement substantially the same command-line functionality.",
}


def build_discovery_prompt(
    known_programs: list[str],
    rejected_programs: list[str],
    count: int = 10,
) -> str:
    """Prompt asking for new C CLI programs that have Rust rewrites.

    Args:
        known_programs: Programs already in the corpus
        rejected_programs: Programs that were reviewed and rejected
        count: Maximum number of suggestions

    Returns:
        Prompt text
    """
    known_json = sanitize_json_for_prompt(sorted(set(known_programs)))
    rejected_json = sanitize_json_for_prompt(sorted(set(rejected_programs)))

    return f"""You are helping curate a dataset of program pairs: command-line tools originally written in C, each paired with a Rust rewrite of the same tool.

Suggest up to {int(count)} new program pairs. Each suggestion must be:
- a command-line program whose original implementation is written in C;
- paired with a Rust program that reimplements it and is still maintained;
- not already in the dataset and not previously rejected.

Programs already in the dataset:
{known_json}

Programs previously rejected:
{rejected_json}

Return ONLY valid JSON in this exact format:

{{
  "candidates": [
    {{
      "program_name": "name of the command",
      "c_repository_url": "https://...",
      "rust_repository_url": "https://...",
      "rationale": "one sentence on why this is a rewrite"
    }}
  ]
}}

Return an empty candidates array if you know of no further pairs. Return ONLY the JSON, no other text."""


def build_review_prompt(pair: ProgramPair) -> str:
    """Prompt asking whether one program pair meets the acceptance criteria.

    Args:
        pair: The pair under review

    Returns:
        Prompt text
    """
    pair_info = {
        "program_name": sanitize_name(pair.program_name),
        "description": sanitize_string_for_prompt(pair.program_description, max_length=2000),
        "feature_relationship": pair.feature_relationship.value,
        "translation_tools": [sanitize_name(tool) for tool in pair.translation_tools],
        "c_program": {
            "repository_url": sanitize_name(pair.c_program.repository_url),
            "documentation_url": sanitize_name(pair.c_program.documentation_url),
            "source_paths": pair.c_program.source_paths[:50],
        },
        "rust_program": {
            "repository_url": sanitize_name(pair.rust_program.repository_url),
            "documentation_url": sanitize_name(pair.rust_program.documentation_url),
            "source_paths": pair.rust_program.source_paths[:50],
        },
    }
    criteria = "\n".join(f"- {key}: {text}" for key, text in REVIEW_CRITERIA.items())

    return f"""You are reviewing a candidate entry for a dataset of C programs paired with their Rust rewrites.

Candidate:
{sanitize_json_for_prompt(pair_info)}

Check each criterion:
{criteria}

Return ONLY valid JSON in this exact format:

{{
  "recommendation": "accept | reject",
  "actively_maintained": true,
  "is_rewrite": true,
  "comparable_scope": true,
  "notes": "brief justification, citing what you checked"
}}

Recommend "reject" if any criterion is false. Say so in the notes if you are unsure about a criterion. Return ONLY the JSON, no other text."""
