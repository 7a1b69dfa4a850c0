"""
Exception types raised by the vault engine.

Expected outcomes (wrong passphrase, taken account name, missing file) are
never raised; they are return values or session states.
"""


class VaultGuardError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInput(VaultGuardError, ValueError):
    """A required argument was missing."""


class InvalidLength(VaultGuardError, ValueError):
    """A generated password was requested with a length below the minimum."""


class InvalidSeed(VaultGuardError, ValueError):
    """A one-time-password seed is not valid base32."""


class CryptoSetupError(VaultGuardError):
    """The cipher or padding is not available in this runtime."""


class EncryptionFailure(VaultGuardError):
    """The vault document could not be encrypted."""


class StorageFailure(VaultGuardError):
    """A vault file could not be created, read, written or deleted."""


class BreachCheckFailure(VaultGuardError):
    """The breach API answered, but not with a usable range response."""
