"""
Account session: login, signup and logout.

Every attempt ends in a SessionState that is published on state_changed.
Wrong passphrases and taken names are states, not exceptions.
"""

import logging
from enum import Enum
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from .crypto import CryptoManager
from .errors import CryptoSetupError, StorageFailure
from .models import VaultDocument
from .storage import StorageService

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Outcome of the last session transition."""
    LOGGED_OUT = "LOGGED_OUT"
    LOGGED_IN = "LOGGED_IN"
    AUTH_FAILED = "AUTH_FAILED"
    NAME_TAKEN = "NAME_TAKEN"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class AccountSession(QObject):
    """Authenticates an account and exposes its decrypted vault document."""

    state_changed = pyqtSignal(object)

    def __init__(self, crypto: Optional[CryptoManager] = None, storage: Optional[StorageService] = None,
                 parent=None):
        super().__init__(parent)
        self.crypto = crypto or CryptoManager()
        self.storage = storage or StorageService()
        self.state = SessionState.LOGGED_OUT
        self.decrypted_content = ""

    def login(self, account_name: str, passphrase: str) -> SessionState:
        """
        Unlock the vault of an existing account.
        Returns:
            LOGGED_IN, AUTH_FAILED or SYSTEM_ERROR
        """
        try:
            raw_content = self.storage.read(account_name)
            if raw_content is None:
                logger.info("Login failed: no vault for this account")
                state = SessionState.AUTH_FAILED
            else:
                content = self.crypto.decrypt(raw_content, passphrase)
                if content is None:
                    logger.info("Login failed: vault could not be decrypted")
                    state = SessionState.AUTH_FAILED
                else:
                    self.decrypted_content = content
                    state = SessionState.LOGGED_IN
        except (StorageFailure, CryptoSetupError) as e:
            logger.error(f"Login: error during unlock process: {e}", exc_info=True)
            state = SessionState.SYSTEM_ERROR
        return self._transition(state)

    def signup(self, account_name: str, passphrase: str) -> SessionState:
        """
        Create a new account with an empty vault.
        Returns:
            LOGGED_IN, NAME_TAKEN or SYSTEM_ERROR
        """
        try:
            if not self.storage.create(account_name):
                return self._transition(SessionState.NAME_TAKEN)
        except StorageFailure as e:
            logger.error(f"Signup: error while creating the vault file: {e}", exc_info=True)
            return self._transition(SessionState.SYSTEM_ERROR)

        try:
            content = VaultDocument(account_name, passphrase).to_json()
            self.storage.write(self.crypto.encrypt(content, passphrase), account_name)
        except (StorageFailure, CryptoSetupError) as e:
            logger.error(f"Signup: error while writing the vault: {e}", exc_info=True)
            # An empty placeholder file would block the name forever
            self._discard_placeholder(account_name)
            return self._transition(SessionState.SYSTEM_ERROR)
        self.decrypted_content = content
        return self._transition(SessionState.LOGGED_IN)

    def logout(self) -> SessionState:
        """
        End the session. The vault model must be saved before calling this."""
        self.decrypted_content = ""
        return self._transition(SessionState.LOGGED_OUT)

    def delete_account(self, account_name: str) -> SessionState:
        """
        Log out and remove the vault file of the account.

        Raises:
            StorageFailure: If the file exists but cannot be removed
        """
        state = self.logout()
        self.storage.delete(account_name)
        logger.info("Account vault deleted")
        return state

    def document(self) -> VaultDocument:
        """Parse the decrypted content of the logged-in account."""
        if self.state is not SessionState.LOGGED_IN:
            raise RuntimeError("Session is not logged in")
        return VaultDocument.from_json(self.decrypted_content)

    def _discard_placeholder(self, account_name: str) -> None:
        try:
            self.storage.delete(account_name)
        except StorageFailure as e:
            logger.warning(f"Signup: could not remove the incomplete vault file: {e}")

    def is_logged_in(self) -> bool:
        return self.state is SessionState.LOGGED_IN

    def _transition(self, state: SessionState) -> SessionState:
        if state in (SessionState.LOGGED_IN, SessionState.LOGGED_OUT):
            self.state = state
        self.state_changed.emit(state)
        return state
