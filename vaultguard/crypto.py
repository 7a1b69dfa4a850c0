"""
Cryptographic operations for the vault engine.

The vault blob is AES-128 in ECB mode with PKCS7 padding under a key taken
from the SHA-256 digest of the passphrase. There is no authentication tag:
a wrong passphrase is detected only through invalid padding, so decrypt()
returns None for a wrong key and for malformed ciphertext alike.
"""

import base64
import hashlib
import logging
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from . import config
from .errors import CryptoSetupError

logger = logging.getLogger(__name__)


class CryptoManager:
    """Handles all cryptographic operations for the vault engine."""

    def __init__(self):
        """Initialize the crypto manager."""
        self.backend = default_backend()

    def derive_key(self, passphrase: str) -> bytes:
        """
        Derive the AES key from a passphrase.

        Args:
            passphrase: The account passphrase

        Returns:
            16-byte key (first half of the SHA-256 digest)
        """
        passphrase_digest = hashlib.new(config.KEY_HASH_ALGORITHM, passphrase.encode(config.TEXT_ENCODING)).digest()
        return passphrase_digest[:config.KEY_SIZE]

    def _cipher(self, passphrase: str) -> Cipher:
        try:
            return Cipher(algorithms.AES(self.derive_key(passphrase)), modes.ECB(), backend=self.backend)
        except UnsupportedAlgorithm as e:
            logger.error(f"AES/ECB is not available in this runtime: {e}")
            raise CryptoSetupError("AES/ECB cipher is not available") from e

    def encrypt(self, plaintext: str, passphrase: str) -> str:
        """
        Encrypt text under a passphrase.

        Args:
            plaintext: Text to encrypt
            passphrase: The account passphrase

        Returns:
            Base64 encoded ciphertext, identical for identical inputs

        Raises:
            CryptoSetupError: If the cipher is not available
        """
        padder = padding.PKCS7(config.BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode(config.TEXT_ENCODING)) + padder.finalize()
        encryptor = self._cipher(passphrase).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode('ascii')

    def decrypt(self, ciphertext_b64: str, passphrase: str) -> Optional[str]:
        """
        Decrypt a base64 blob produced by encrypt().

        Args:
            ciphertext_b64: Base64 encoded ciphertext
            passphrase: The account passphrase

        Returns:
            The plaintext, or None if the passphrase is wrong or the blob is malformed

        Raises:
            CryptoSetupError: If the cipher is not available
        """
        decryptor = self._cipher(passphrase).decryptor()
        try:
            ciphertext = base64.b64decode(ciphertext_b64, validate=True)
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(config.BLOCK_SIZE_BITS).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode(config.TEXT_ENCODING)
        except ValueError:
            # Block size, padding and decoding errors all mean "wrong key"
            return None
