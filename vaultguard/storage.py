"""
File storage for encrypted vault blobs.

One file per account, named by the hashed account name. The store knows
nothing about encryption; it moves opaque text in and out of files.
"""

import logging
import os
import platform
import stat
from typing import Optional

from . import config
from .errors import InvalidInput, StorageFailure
from .hashing import digest

logger = logging.getLogger(__name__)


class StorageService:
    """Flat key-value file store keyed by digest(account_name)."""

    def __init__(self, directory: Optional[str] = None):
        """
        Initialize the storage service.
        Args:
            directory: Directory holding the vault files, created if missing
        """
        self.directory = directory or config.STORAGE_DIR
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise StorageFailure(f"Failed to create storage directory {self.directory}") from e

    def _path_for(self, account_name: str) -> str:
        try:
            return os.path.join(self.directory, digest(account_name))
        except InvalidInput as e:
            raise StorageFailure("Failed to hash account name") from e

    def exists(self, account_name: str) -> bool:
        """
        Check if a vault file exists for the account."""
        return os.path.exists(self._path_for(account_name))

    def create(self, account_name: str) -> bool:
        """
        Create an empty vault file.
        Returns:
            True if created, False if a file for this account already exists
        """
        path = self._path_for(account_name)
        try:
            os.close(self._open_private(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL))
        except FileExistsError:
            return False
        except OSError as e:
            raise StorageFailure("Failed to create file") from e
        self._set_file_permissions(path)
        return True

    def write(self, content: str, account_name: str) -> None:
        """
        Replace the vault file of the account with *content*."""
        path = self._path_for(account_name)
        try:
            if os.path.exists(path):
                os.remove(path)
            fd = self._open_private(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC)
            with os.fdopen(fd, 'w', encoding=config.TEXT_ENCODING) as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing vault file {path}: {e}", exc_info=True)
            raise StorageFailure("Failed to write file") from e
        if not self._set_file_permissions(path):
            logger.warning(f"Failed to set secure file permissions for vault: {path}. This might indicate a permission issue.")

    def read(self, account_name: str) -> Optional[str]:
        """
        Read the vault file of the account.
        Returns:
            The file body, or None if no file exists
        """
        path = self._path_for(account_name)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding=config.TEXT_ENCODING) as f:
                return f.read()
        except OSError as e:
            raise StorageFailure("Failed to read file") from e

    def delete(self, account_name: str) -> None:
        """
        Delete the vault file of the account if present."""
        path = self._path_for(account_name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageFailure("Failed to delete file") from e

    @staticmethod
    def _open_private(path: str, flags: int) -> int:
        """Open a file descriptor; a new file is created with VAULT_FILE_MODE, never wider."""
        if hasattr(os, "O_BINARY"):
            flags |= os.O_BINARY
        return os.open(path, flags, config.VAULT_FILE_MODE)

    def _set_file_permissions(self, filepath: str) -> bool:
        """
        Set file to be readable/writable by owner only."""
        if platform.system() == 'Windows':
            # NTFS ACLs are left to the user profile defaults
            return True
        try:
            os.chmod(filepath, stat.S_IMODE(config.VAULT_FILE_MODE))
        except OSError as e:
            logger.warning(f"chmod failed for {filepath}: {e}")
            return False
        return True
