"""
Heuristic password strength scoring.

The score is additive: points for length, character classes and entropy,
minus a penalty for similarity to known passwords and English words.
"""

import logging
import math
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, utils

from . import config
from .models import StrengthCategory

logger = logging.getLogger(__name__)

_DIGIT = re.compile(r"[0-9]")
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_OTHER = re.compile(r"[^A-Za-z0-9]")


@lru_cache(maxsize=None)
def load_word_list(path: str) -> Tuple[str, ...]:
    """
    Read a reference word list once per process.

    A missing or unreadable file yields an empty list so that scoring keeps
    working without the similarity penalty.
    """
    try:
        with open(path, 'r', encoding=config.TEXT_ENCODING) as f:
            return tuple(line.strip() for line in f if line.strip())
    except OSError as e:
        logger.error(f"Error reading password reference file {path}: {e}")
        return ()


class PasswordStrengthCalculator:
    """Scores passwords into StrengthCategory buckets."""

    def __init__(self, common_passwords: Optional[Iterable[str]] = None,
                 english_words: Optional[Iterable[str]] = None):
        """
        Args:
            common_passwords: Known password list, defaults to the bundled file
            english_words: English vocabulary, defaults to the bundled file
        """
        if common_passwords is None:
            common_passwords = load_word_list(config.COMMON_PASSWORDS_FILE)
        if english_words is None:
            english_words = load_word_list(config.ENGLISH_WORDS_FILE)
        self.common_passwords: List[str] = list(common_passwords)
        self.english_words: List[str] = list(english_words)
        self._exact = set(self.common_passwords) | set(self.english_words)

    def calculate_strength(self, password: str) -> StrengthCategory:
        """Return the strength category of *password*."""
        return StrengthCategory.from_points(self.points(password))

    def points(self, password: str) -> int:
        """Return the raw strength score of *password*."""
        has_digit = bool(_DIGIT.search(password))
        has_upper = bool(_UPPER.search(password))
        has_lower = bool(_LOWER.search(password))
        has_other = bool(_OTHER.search(password))

        points = len(password) * 8
        if has_digit:
            points += 8
        if has_upper:
            points += 4
        if has_lower:
            points += 4
        if has_upper and has_lower:
            points += 8
        if has_other:
            points += 12
        points += self._points_for_entropy(password, has_lower, has_upper, has_digit, has_other)
        points += self._similarity_penalty(password)
        return points

    @staticmethod
    def _points_for_entropy(password: str, has_lower: bool, has_upper: bool,
                            has_digit: bool, has_other: bool) -> int:
        character_space = (26 if has_lower else 0) + (26 if has_upper else 0) \
            + (10 if has_digit else 0) + (20 if has_other else 0)
        if character_space == 0:
            return 0
        entropy = len(password) * math.log2(character_space)
        if entropy >= 100:
            return 10
        if entropy >= 80:
            return 8
        if entropy >= 60:
            return 6
        if entropy >= 40:
            return 4
        if entropy >= 20:
            return 2
        return 0

    def _similarity_penalty(self, password: str) -> int:
        if password in self._exact:
            return config.STRENGTH_EXACT_MATCH_PENALTY

        similar = self._similar_word_points(password, self.english_words) \
            + self._similar_word_points(password, self.common_passwords)
        return similar * config.STRENGTH_PENALTY_FACTOR

    @staticmethod
    def _similar_word_points(password: str, words: Iterable[str]) -> int:
        threshold = config.STRENGTH_SIMILARITY_THRESHOLD
        counter = 0
        for word in words:
            if fuzz.partial_ratio(password, word) > threshold:
                counter += config.STRENGTH_PARTIAL_MATCH_POINTS
            if fuzz.token_set_ratio(password, word, processor=utils.default_process) > threshold:
                counter += config.STRENGTH_TOKEN_SET_MATCH_POINTS
        return counter
