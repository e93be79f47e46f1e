"""
Advisory settings, read from the environment

No API key means no network call: every analysis is served by the
deterministic fallback.
"""

import os

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AdvisorySettings(BaseModel):
    """
    Attributes:
        api_key: Key for the text-generation API (None disables remote calls)
        base_url: API root; the messages endpoint is {base_url}/v1/messages
        model: Model name sent with each request
        timeout_seconds: Upper bound for one HTTP request
        max_attempts: Attempts per analysis on transport errors
    """

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = Field(default=20.0, gt=0)
    max_attempts: int = Field(default=2, ge=1, le=5)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AdvisorySettings":
        """
        Build settings from PWL_ADVISORY_* variables

        PWL_ADVISORY_API_KEY falls back to ANTHROPIC_API_KEY.
        """
        return cls(
            api_key=os.getenv("PWL_ADVISORY_API_KEY") or os.getenv("ANTHROPIC_API_KEY"),
            base_url=os.getenv("PWL_ADVISORY_BASE_URL", DEFAULT_BASE_URL),
            model=os.getenv("PWL_ADVISORY_MODEL", DEFAULT_MODEL),
            timeout_seconds=float(os.getenv("PWL_ADVISORY_TIMEOUT_SECONDS", "20")),
        )
