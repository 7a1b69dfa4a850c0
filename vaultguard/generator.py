"""
Random password generation with per-category guarantees.
"""

import secrets
from typing import List

from . import config
from .errors import InvalidLength

_random = secrets.SystemRandom()


def _pick(chars: str, excluded: str = "") -> str:
    """Pick one character of *chars* that is not in *excluded*, or "" if none is left."""
    candidates = [c for c in chars if c not in excluded]
    return _random.choice(candidates) if candidates else ""


def generate_password(length: int = config.PASSWORD_GENERATOR_DEFAULT_LENGTH, include_uppercase: bool = True,
                      include_digits: bool = True, include_special: bool = True,
                      forbidden_chars: str = "") -> str:
    """
    Generate a random password.

    Lowercase letters are always used. Every enabled category contributes at
    least one character unless all of its characters are forbidden.

    Args:
        length: Number of characters, at least PASSWORD_GENERATOR_MIN_LENGTH
        include_uppercase: Add A-Z
        include_digits: Add 0-9
        include_special: Add SPECIAL_CHARS
        forbidden_chars: Characters that must never appear

    Returns:
        The password, or "" if every usable character is forbidden

    Raises:
        InvalidLength: If length is below the minimum
    """
    if length < config.PASSWORD_GENERATOR_MIN_LENGTH:
        raise InvalidLength(f"Password length must be at least {config.PASSWORD_GENERATOR_MIN_LENGTH} characters.")
    forbidden_chars = forbidden_chars or ""

    categories = [
        (include_uppercase, config.UPPERCASE_CHARS),
        (include_digits, config.DIGIT_CHARS),
        (include_special, config.SPECIAL_CHARS),
    ]
    enabled = [chars for include, chars in categories if include]

    character_set = config.LOWERCASE_CHARS + "".join(enabled)
    mandatory = [_pick(chars, forbidden_chars) for chars in enabled]

    character_set = "".join(c for c in character_set if c not in forbidden_chars)
    if not character_set:
        return ""

    mandatory = _ensure_mandatory(mandatory, enabled, character_set)
    return _build_password(character_set, length, mandatory)


def _ensure_mandatory(mandatory: List[str], enabled: List[str], available: str) -> List[str]:
    """Keep valid picks and redraw a representative for any category that lost its pick."""
    kept = [c for c in mandatory if c and c in available]
    for chars in enabled:
        if not any(c in chars for c in kept):
            redrawn = _pick("".join(c for c in available if c in chars))
            if redrawn:
                kept.append(redrawn)
    return kept


def _build_password(character_set: str, length: int, mandatory: List[str]) -> str:
    _random.shuffle(mandatory)
    password = mandatory[:length]
    password.extend(_random.choice(character_set) for _ in range(length - len(password)))
    _random.shuffle(password)
    return "".join(password)
