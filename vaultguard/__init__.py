"""
VaultGuard credential vault engine
Copyright (c) 2025

THREAT MODEL:
The vault is a single local file per account, encrypted under the account
passphrase. It is meant for one user on one device. The only network traffic
is the k-anonymity breach lookup, which never transmits a full password hash.

The decrypted document still holds the account passphrase in cleartext, and
the cipher mode (AES-ECB, no authentication tag) is kept for compatibility
with existing vault files. Neither is suitable for new designs.
"""

import logging

from . import config

__version__ = config.APP_VERSION


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for the composition root."""
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
