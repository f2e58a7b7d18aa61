"""Language utilities for cep-race.

This module centralizes the language options supported by the CLI output.
Keeping it in the domain layer allows both CLI and service layers to share
a single source of truth without creating circular imports with adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for user-facing output."""

    ENGLISH = "en"
    PORTUGUESE = "pt"

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "Portuguese" if self is Language.PORTUGUESE else "English"
