"""Name validation and noise filtering for raw components."""

import re

from pantryparse.logging_config import get_logger
from pantryparse.parse.lexicon import is_food_name

logger = get_logger(__name__)

MIN_NAME_LENGTH = 2
MAX_REPEATED_CHARS = 3

FILLER_CHARACTERS = frozenset("呜啊哦嗯额唉哎诶")
FILLER_WORDS = frozenset({"uh", "um", "umm", "er", "erm", "ah", "oh", "hmm", "mm"})

_REPEAT_RE = re.compile(rf"(.)\1{{{MAX_REPEATED_CHARS},}}")
_FILLER_WORD_RE = re.compile(
    r"\b(?:" + "|".join(sorted(FILLER_WORDS, key=len, reverse=True)) + r")\b"
)


def is_noise(name: str) -> bool:
    """Repeated-character artifacts and pure filler interjections are noise."""
    if _REPEAT_RE.search(name):
        return True
    stripped = _FILLER_WORD_RE.sub("", name.lower())
    stripped = "".join(ch for ch in stripped if ch not in FILLER_CHARACTERS and not ch.isspace())
    return not stripped


def validate_name(name: str | None) -> str | None:
    """
    Validate a component name.

    Returns:
        The trimmed name, or None when the component should be dropped.
    """
    trimmed = (name or "").strip()
    if len(trimmed) < MIN_NAME_LENGTH:
        return None
    if is_noise(trimmed):
        logger.debug(f"Dropping noise component '{trimmed}'")
        return None
    if not is_food_name(trimmed):
        logger.debug(f"Dropping unrecognized component '{trimmed}'")
        return None
    return trimmed
