"""LLM client initialization utilities.

This module provides functions to initialize LLM clients from environment variables.
Supports multiple providers (OpenAI, Anthropic, Gemini). Without any key the
review commands fall back to printing prompts for manual use.
"""

import os
from typing import Any, Optional

from .logging import get_logger
from .rate_limiter import RateLimiter, get_rate_limiter

logger = get_logger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-3-5-sonnet-latest",
    "gemini": "gemini-2.5-flash-lite",
}

RATE_LIMIT_KEYWORDS = ["rate limit", "rate_limit", "429", "too many requests", "quota"]


class LLMClientWrapper:
    """Wrapper to provide unified interface for different LLM providers.

    Includes rate limiting to prevent excessive API usage.
    """

    def __init__(self, client: Any, provider: str, rate_limiter: Optional[RateLimiter] = None):
        """Initialize wrapper with LLM client and provider name.

        Args:
            client: The actual LLM client instance
            provider: Provider name ('openai', 'anthropic', 'gemini')
            rate_limiter: Optional limiter; provider defaults when omitted
        """
        self.client = client
        self.provider = provider
        self.rate_limiter = rate_limiter or get_rate_limiter(provider=provider)
        logger.debug(f"LLMClientWrapper initialized for provider: {provider}")

    def complete(self, prompt: str, **kwargs) -> str:
        """Call LLM with prompt and return response text.

        Args:
            prompt: Input prompt string
            **kwargs: model, temperature, max_tokens, rate_limit_timeout

        Returns:
            LLM response text

        Raises:
            ValueError: If provider is unknown
            RuntimeError: If the rate limit wait times out or the API call fails
        """
        max_wait_time = kwargs.get("rate_limit_timeout", 300.0)
        if not self.rate_limiter.acquire(wait=True, timeout=max_wait_time):
            raise RuntimeError(
                f"LLM rate limit exceeded: waited more than {max_wait_time}s"
            )

        model = kwargs.get("model") or DEFAULT_MODELS.get(self.provider)
        temperature = kwargs.get("temperature", 0.2)

        if self.provider not in DEFAULT_MODELS:
            raise ValueError(f"Unknown provider: {self.provider}")

        try:
            if self.provider == "openai":
                response = self.client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                )
                return response.choices[0].message.content

            elif self.provider == "anthropic":
                response = self.client.messages.create(
                    model=model,
                    max_tokens=kwargs.get("max_tokens", 4096),
                    temperature=temperature,
                    messages=[{"role": "user", "content": prompt}],
                )
                return response.content[0].text

            else:
                response = self.client.GenerativeModel(model).generate_content(prompt)
                return response.text

        except (KeyError, AttributeError, IndexError) as e:
            raise RuntimeError(
                f"LLM API returned unexpected response format for provider {self.provider}: {e}"
            ) from e
        except Exception as e:
            error_str = str(e).lower()
            if any(keyword in error_str for keyword in RATE_LIMIT_KEYWORDS):
                self.rate_limiter.reset()
                raise RuntimeError(
                    f"LLM API rate limit exceeded for provider {self.provider}. "
                    f"Please wait before retrying: {e}"
                ) from e
            raise RuntimeError(f"LLM API error for provider {self.provider}: {e}") from e


def _init_openai() -> Optional[LLMClientWrapper]:
    openai_key = os.getenv("OPENAI_API_KEY")
    if not openai_key:
        return None

    try:
        import openai

        logger.info("Initializing OpenAI client from OPENAI_API_KEY")
        return LLMClientWrapper(openai.OpenAI(api_key=openai_key), "openai")
    except ImportError:
        logger.warning(
            "OPENAI_API_KEY found but openai package not installed. "
            "Install with: pip install 'paircorpus[llm]'"
        )
    except Exception as e:
        logger.error(f"Failed to initialize OpenAI client: {e}")
    return None


def _init_anthropic() -> Optional[LLMClientWrapper]:
    anthropic_key = os.getenv("ANTHROPIC_API_KEY")
    if not anthropic_key:
        return None

    try:
        import anthropic

        logger.info("Initializing Anthropic client from ANTHROPIC_API_KEY")
        return LLMClientWrapper(anthropic.Anthropic(api_key=anthropic_key), "anthropic")
    except ImportError:
        logger.warning(
            "ANTHROPIC_API_KEY found but anthropic package not installed. "
            "Install with: pip install 'paircorpus[llm]'"
        )
    except Exception as e:
        logger.error(f"Failed to initialize Anthropic client: {e}")
    return None


def _init_gemini() -> Optional[LLMClientWrapper]:
    gemini_key = os.getenv("GEMINI_API_KEY")
    if not gemini_key:
        return None

    try:
        import google.generativeai as genai

        logger.info("Initializing Gemini client from GEMINI_API_KEY")
        genai.configure(api_key=gemini_key)
        return LLMClientWrapper(genai, "gemini")
    except ImportError:
        logger.warning(
            "GEMINI_API_KEY found but google-generativeai package not installed. "
            "Install with: pip install 'paircorpus[llm]'"
        )
    except Exception as e:
        logger.error(f"Failed to initialize Gemini client: {e}")
    return None


_INITIALIZERS = {
    "openai": _init_openai,
    "anthropic": _init_anthropic,
    "gemini": _init_gemini,
}


def get_llm_client(preferred_provider: Optional[str] = None) -> Optional[LLMClientWrapper]:
    """Get LLM client from environment variables.

    If ``preferred_provider`` is provided, only that provider is attempted.
    Otherwise, providers are tried in the following order:

    1. OpenAI (OPENAI_API_KEY)
    2. Anthropic (ANTHROPIC_API_KEY)
    3. Gemini (GEMINI_API_KEY)
    """
    provider = preferred_provider.lower() if preferred_provider else None

    if provider is not None:
        initializer = _INITIALIZERS.get(provider)
        if initializer is None:
            logger.error(f"Unknown LLM provider requested: {preferred_provider}")
            return None
        client = initializer()
        if client is None:
            logger.error(
                f"Requested provider '{provider}' but its API key is missing or client init failed."
            )
        return client

    for initializer in _INITIALIZERS.values():
        client = initializer()
        if client is not None:
            return client

    logger.debug(
        "No LLM API key found in environment variables. "
        "Set OPENAI_API_KEY, ANTHROPIC_API_KEY, or GEMINI_API_KEY to enable LLM review."
    )
    return None
