"""LLM-assisted review of candidate program pairs.

The agent sends discovery and review prompts to an LLM and validates the
JSON that comes back. Its output is advisory: nothing here accepts, rejects
or writes anything. A curator reads the verdict and decides.

Safety boundaries:
- LLM only receives metadata fields, never repository contents
- LLM output must be valid JSON matching a schema
- Without an LLM client the caller prints the prompt for manual use
"""

import json
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config.loader import format_validation_error
from corpus.schema import ProgramPair
from utils import get_logger

from .prompts import build_discovery_prompt, build_review_prompt

logger = get_logger(__name__)


class ReviewError(Exception):
    """Raised when an LLM review or suggestion fails."""

    pass


class ReviewVerdict(BaseModel):
    """An LLM's assessment of one program pair."""

    recommendation: Literal["accept", "reject"]
    actively_maintained: bool
    is_rewrite: bool
    comparable_scope: bool
    notes: str = ""

    model_config = ConfigDict(extra="ignore")

    @property
    def failed_criteria(self) -> list[str]:
        return [
            name
            for name in ("actively_maintained", "is_rewrite", "comparable_scope")
            if not getattr(self, name)
        ]


class CandidateSuggestion(BaseModel):
    """A program pair suggested for inclusion."""

    program_name: str = Field(..., min_length=1)
    c_repository_url: str = ""
    rust_repository_url: str = ""
    rationale: str = ""

    model_config = ConfigDict(extra="ignore")


class SuggestionList(BaseModel):
    candidates: list[CandidateSuggestion] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


def extract_json(response: Any) -> Any:
    """Decode an LLM response, tolerating a ```json fenced block.

    Raises:
        ReviewError: If the response is not valid JSON
    """
    if not isinstance(response, str):
        return response

    text = response.strip()
    if text.startswith("```"):
        first_nl = text.find("\n")
        last_ticks = text.rfind("```")
        if first_nl != -1 and last_ticks > first_nl:
            text = text[first_nl + 1 : last_ticks].strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"LLM returned invalid JSON. Response snippet (first 500 chars): {text[:500]}")
        raise ReviewError(f"LLM returned invalid JSON: {e}") from e


class CandidateReviewAgent:
    """Sends review and discovery prompts to an LLM.

    Args:
        llm_client: Object with ``complete(prompt, **kwargs) -> str``; None
            for manual mode, in which review methods return None.
    """

    def __init__(self, llm_client: Optional[Any] = None):
        self.llm_client = llm_client
        logger.debug(f"CandidateReviewAgent initialized (llm={'yes' if llm_client else 'no'})")

    def review(self, pair: ProgramPair) -> Optional[ReviewVerdict]:
        """Ask the LLM whether ``pair`` meets the acceptance criteria.

        Returns:
            ReviewVerdict, or None when no LLM client is configured

        Raises:
            ReviewError: If the call fails or the answer does not validate
        """
        if self.llm_client is None:
            return None

        logger.info(f"Requesting review of '{pair.program_name}' from LLM")
        data = extract_json(self._call_llm(build_review_prompt(pair)))
        try:
            verdict = ReviewVerdict.model_validate(data)
        except ValidationError as e:
            raise ReviewError(
                f"LLM review of '{pair.program_name}' has an unexpected format:\n{format_validation_error(e)}"
            ) from e

        logger.info(f"LLM recommends '{verdict.recommendation}' for '{pair.program_name}'")
        return verdict

    def suggest(
        self,
        known_programs: list[str],
        rejected_programs: list[str],
        count: int = 10,
    ) -> Optional[list[CandidateSuggestion]]:
        """Ask the LLM for new candidate pairs.

        Suggestions naming a program already known or rejected are dropped,
        as are any beyond ``count``.

        Returns:
            Suggestions, or None when no LLM client is configured

        Raises:
            ReviewError: If the call fails or the answer does not validate
        """
        if self.llm_client is None:
            return None

        prompt = build_discovery_prompt(known_programs, rejected_programs, count)
        data = extract_json(self._call_llm(prompt))
        try:
            suggestions = SuggestionList.model_validate(data).candidates
        except ValidationError as e:
            raise ReviewError(
                f"LLM suggestions have an unexpected format:\n{format_validation_error(e)}"
            ) from e

        excluded = {name.lower() for name in known_programs} | {name.lower() for name in rejected_programs}
        fresh = [s for s in suggestions if s.program_name.lower() not in excluded]
        if len(fresh) < len(suggestions):
            logger.info(f"Dropped {len(suggestions) - len(fresh)} suggestions already known or rejected")
        return fresh[:count]

    def _call_llm(self, prompt: str) -> str:
        try:
            return self.llm_client.complete(prompt, temperature=0.2)
        except Exception as e:
            raise ReviewError(f"Failed to call LLM: {e}") from e
