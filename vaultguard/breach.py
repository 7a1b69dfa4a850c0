"""
Leaked-password lookup using the k-anonymity range API.

Only the first five hex characters of the SHA-1 hash leave the device. The
API answers with every known suffix for that prefix and its breach count.
"""

import logging
from typing import Optional

import requests

from . import config
from .errors import BreachCheckFailure
from .hashing import digest

logger = logging.getLogger(__name__)


class BreachChecker:
    """Client for the breach corpus range endpoint."""

    def __init__(self, session: Optional[requests.Session] = None, base_url: str = config.BREACH_API_URL):
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': config.BREACH_USER_AGENT})
        self.base_url = base_url.rstrip('/')
        self.timeout = (config.BREACH_CONNECT_TIMEOUT_SECONDS, config.BREACH_READ_TIMEOUT_SECONDS)

    def check(self, password: str) -> int:
        """
        Return how often *password* appears in the breach corpus.

        Returns 0 when the password is unknown or the API cannot be reached.

        Raises:
            BreachCheckFailure: If the API answers with an error or an unreadable body
        """
        sha1 = digest(password).upper()
        prefix = sha1[:config.BREACH_PREFIX_LENGTH]
        suffix = sha1[config.BREACH_PREFIX_LENGTH:]

        body = self._fetch_range(prefix)
        if body is None:
            return 0
        return self.parse_response(suffix, body)

    def _fetch_range(self, prefix: str) -> Optional[str]:
        url = f"{self.base_url}/range/{prefix}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.info(f"Breach API unreachable, treating password as not breached: {e}")
            return None
        except requests.RequestException as e:
            raise BreachCheckFailure(f"Failed to check password: {e}") from e
        return response.text

    @staticmethod
    def parse_response(suffix: str, body: str) -> int:
        """Find *suffix* in a SUFFIX:COUNT range response and return its count."""
        for line in body.splitlines():
            hash_suffix, _, count = line.strip().partition(':')
            if hash_suffix == suffix:
                try:
                    return int(count)
                except ValueError as e:
                    raise BreachCheckFailure(f"Malformed count for suffix {suffix}: {count!r}") from e
        return 0
