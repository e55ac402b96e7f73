"""
Input Validators - Sanitization of user prompts and mode flags.
"""
import re

from nilo.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_PROMPT_LENGTH = 2000

MODE_SQL = "SQL"
MODE_CHAT = "CHAT"


def sanitize_prompt(prompt: str, max_length: int = MAX_PROMPT_LENGTH) -> str:
    """
    Sanitize a user prompt.

    - Removes null bytes
    - Strips leading/trailing whitespace
    - Normalizes excessive whitespace
    - Limits length

    Args:
        prompt: Raw user prompt
        max_length: Maximum allowed length

    Returns:
        Sanitized prompt (empty string for None/blank input)
    """
    if not prompt:
        return ""

    cleaned = prompt.replace("\x00", "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    if len(cleaned) > max_length:
        logger.warning(f"Prompt truncated from {len(cleaned)} to {max_length} characters")
        cleaned = cleaned[:max_length]

    return cleaned


def normalize_mode(mode) -> str:
    """
    Resolve the requested answering mode.

    Only an explicit "SQL" selects SQL mode; anything else, including a
    missing value, is conversational.
    """
    if isinstance(mode, str) and mode.strip().upper() == MODE_SQL:
        return MODE_SQL
    return MODE_CHAT
