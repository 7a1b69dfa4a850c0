"""
Filename hashing for vault files.
"""

import hashlib
from typing import Optional

from . import config
from .errors import InvalidInput


def digest(text: Optional[str]) -> str:
    """
    Return the lowercase hex SHA-1 digest of the UTF-8 bytes of *text*.

    Used only to turn account names into filenames, not to protect secrets.

    Raises:
        InvalidInput: If text is None
    """
    if text is None:
        raise InvalidInput("Text must not be None")
    return hashlib.new(config.FILENAME_HASH_ALGORITHM, text.encode(config.TEXT_ENCODING)).hexdigest()
