"""Join codes: short, human-shareable keys that map to a session."""

import logging
import random
import re
import string
from typing import Callable

from src.core.exceptions import CodeExhaustedError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_CODE_LENGTH = 5
DEFAULT_MAX_ATTEMPTS = 5
MAX_NORMALIZED_LENGTH = 8

CodeLookupFn = Callable[[str], bool]


def random_code(length: int = DEFAULT_CODE_LENGTH, rng: random.Random | None = None) -> str:
    """
    Candidate code, ex. "K3X9Q".

    NOTE: not cryptographically strong, and not checked for uniqueness (see generate_code).
    """
    chooser = rng or random
    return "".join(chooser.choices(CODE_ALPHABET, k=length))


def generate_code(
    code_in_use: CodeLookupFn,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    length: int = DEFAULT_CODE_LENGTH,
    rng: random.Random | None = None,
) -> str:
    """
    Draw candidates until one is not used by an existing session.

    `code_in_use` asks the store "does a session with this code already exist?".
    Two creators drawing the same code at the same moment can both pass this check: the lookup is not atomic with the insert.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = random_code(length, rng)
        if not code_in_use(candidate):
            return candidate
        logger.warning("Join code collision on attempt %d/%d", attempt, max_attempts)
    raise CodeExhaustedError(
        f"Could not generate unique game code after {max_attempts} attempts."
    )


def normalize_code(raw_code: str | None, max_length: int = MAX_NORMALIZED_LENGTH) -> str:
    """Uppercase, drop anything that is not A-Z / 0-9, and cut off at max_length. Can return an empty string."""
    cleaned = re.sub(r"[^A-Z0-9]", "", str(raw_code or "").upper())
    return cleaned[:max_length]
