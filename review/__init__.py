"""Candidate review: prompts, LLM-assisted verdicts, and the rejection log.

Key principles:
- LLM output is advisory; a curator makes every decision
- Without an API key, prompts are printed for use in any chat tool
- Rejected pairs are recorded apart from accepted metadata
"""

from .agent import (
    CandidateReviewAgent,
    CandidateSuggestion,
    ReviewError,
    ReviewVerdict,
    extract_json,
)
from .prompts import REVIEW_CRITERIA, build_discovery_prompt, build_review_prompt
from .rejections import (
    RejectedPair,
    RejectionLog,
    RejectionStore,
    RejectionStoreError,
    remove_pair_from_metadata,
)

__all__ = [
    "CandidateReviewAgent",
    "CandidateSuggestion",
    "REVIEW_CRITERIA",
    "RejectedPair",
    "RejectionLog",
    "RejectionStore",
    "RejectionStoreError",
    "ReviewError",
    "ReviewVerdict",
    "build_discovery_prompt",
    "build_review_prompt",
    "extract_json",
    "remove_pair_from_metadata",
]
