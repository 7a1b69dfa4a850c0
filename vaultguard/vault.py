"""
The vault model: the decrypted entries of the logged-in account.

All mutation of the entry list happens here, on the caller's thread.
Background results (breach lookups, search, strength scoring) are applied
through the methods of this class, never by the workers themselves.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from .breach import BreachChecker
from .crypto import CryptoManager
from .errors import CryptoSetupError, EncryptionFailure
from .models import Entry, VaultDocument
from .search import SearchScope, fuzzy_search
from .storage import StorageService
from .strength import PasswordStrengthCalculator
from .tasks import BreachCheckWorker, SearchWorker, StrengthWorker, TaskScheduler

logger = logging.getLogger(__name__)

IconResolver = Callable[[str], Optional[str]]

_EDITABLE_FIELDS = ("title", "username", "website", "email", "one_time_password_seed", "password", "favourite")


class VaultModel(QObject):
    """
    Owns the entries of one session and persists them.

    Signals:
        saved(list): The vault was written; carries the live entry list
        deleted(str, str): An entry was deleted; carries "" and the title
    """

    saved = pyqtSignal(list)
    deleted = pyqtSignal(str, str)

    def __init__(self, document: VaultDocument, crypto: Optional[CryptoManager] = None,
                 storage: Optional[StorageService] = None, breach_checker: Optional[BreachChecker] = None,
                 strength_calculator: Optional[PasswordStrengthCalculator] = None,
                 icon_resolver: Optional[IconResolver] = None, parent=None):
        super().__init__(parent)
        self.crypto = crypto or CryptoManager()
        self.storage = storage or StorageService()
        self.breach_checker = breach_checker or BreachChecker()
        self._strength_calculator = strength_calculator
        self.icon_resolver = icon_resolver
        self.account_name = document.account_name
        self.account_password = document.account_password
        self.entries: List[Entry] = list(document.entries)
        for entry in self.entries:
            self._resolve_icon(entry)

    @property
    def strength_calculator(self) -> PasswordStrengthCalculator:
        if self._strength_calculator is None:
            self._strength_calculator = PasswordStrengthCalculator()
        return self._strength_calculator

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def sorted_entries(self) -> List[Entry]:
        """
        Sort the live list by title, ignoring case, and return it."""
        self.entries.sort(key=lambda entry: entry.title.casefold())
        return self.entries

    def favourites(self) -> List[Entry]:
        return [entry for entry in self.entries if entry.favourite]

    def compromised(self) -> List[Entry]:
        return [entry for entry in self.entries if entry.compromised]

    def candidates(self, scope: SearchScope) -> List[Entry]:
        """Entries a search in *scope* looks at."""
        if scope is SearchScope.FAVOURITES:
            return self.favourites()
        if scope is SearchScope.COMPROMISED:
            return self.compromised()
        return list(self.sorted_entries())

    def search(self, query: str, scope: SearchScope = SearchScope.ALL) -> List[Entry]:
        """
        Fuzzy search on website and title within *scope*, without duplicates."""
        return fuzzy_search(query, self.candidates(scope))

    def find_entry(self, title: str) -> Optional[Entry]:
        """First entry with exactly this title."""
        return next((entry for entry in self.entries if entry.title == title), None)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_entry(self, entry: Entry) -> None:
        """
        Append an entry. Call save() to persist it."""
        self._resolve_icon(entry)
        self.entries.append(entry)

    def update_entry(self, entry: Entry, **changes) -> Entry:
        """
        Apply field edits to an entry in place.

        A changed password clears the compromised flag, recomputes the
        strength category and re-checks the breach corpus. The breach lookup
        runs before any field changes, so a failed lookup leaves the entry
        untouched. Call save() to persist the edit.

        Raises:
            BreachCheckFailure: If the breach API returns an unusable response
        """
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"Not editable: {', '.join(sorted(unknown))}")

        new_password = changes.get('password') or ""
        password_changed = 'password' in changes and new_password != entry.password
        breached = password_changed and self._is_breached(new_password)
        website_changed = 'website' in changes and changes['website'] != entry.website
        for name, value in changes.items():
            setattr(entry, name, "" if value is None else value)

        if website_changed:
            entry.icon = None
            self._resolve_icon(entry)
        if password_changed:
            entry.compromised = breached
            self.recompute_strength(entry)
        return entry

    def toggle_favourite(self, entry: Entry) -> bool:
        entry.favourite = not entry.favourite
        return entry.favourite

    def recompute_strength(self, entry: Entry) -> None:
        entry.strength_category = self.strength_calculator.calculate_strength(entry.password)

    def delete_entry(self, title: str) -> None:
        """
        Remove the first entry with this title, save, and emit deleted.

        saved carries the remaining entries in sorted order.

        A title that matches nothing still saves and notifies.
        """
        entry = self.find_entry(title)
        if entry is not None:
            self.entries.remove(entry)
        self.sorted_entries()
        self.save()
        self.deleted.emit("", title)

    # ------------------------------------------------------------------
    # Breach checks
    # ------------------------------------------------------------------

    def check_entry_compromised(self, entry: Entry) -> None:
        """
        Flag the entry if its password appears in the breach corpus.

        Never clears the flag.

        Raises:
            BreachCheckFailure: If the breach API returns an unusable response
        """
        if self._is_breached(entry.password):
            entry.compromised = True

    def _is_breached(self, password: str) -> bool:
        return bool(password) and self.breach_checker.check(password) > 0

    def check_all_compromised(self) -> None:
        """
        Check every entry once, typically right after login."""
        for entry in self.entries:
            self.check_entry_compromised(entry)

    def mark_compromised(self, results: Iterable[Tuple[Entry, str, int]]) -> None:
        """
        Apply breach results computed in the background.

        A result is ignored when the entry was removed or its password was
        edited after the lookup started.
        """
        for entry, checked_password, count in results:
            if count > 0 and entry.password == checked_password and any(e is entry for e in self.entries):
                entry.compromised = True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_document(self) -> VaultDocument:
        return VaultDocument(self.account_name, self.account_password, list(self.entries))

    def save(self) -> None:
        """
        Encrypt the whole vault and write it, then emit saved.

        Raises:
            EncryptionFailure: If the cipher is not available
            StorageFailure: If the file cannot be written
        """
        content = self.to_document().to_json()
        try:
            encrypted_content = self.crypto.encrypt(content, self.account_password)
        except CryptoSetupError as e:
            raise EncryptionFailure("File could not be encrypted") from e
        self.storage.write(encrypted_content, self.account_name)
        logger.info(f"Vault saved with {len(self.entries)} entries")
        self.saved.emit(self.entries)

    def update_account(self, account_name: str, account_password: str) -> bool:
        """
        Change the account name and/or passphrase and save.

        A new name moves the vault file; the old file is removed only after
        the new one is written.

        Returns:
            False if the new name belongs to another account
        """
        old_name, old_password = self.account_name, self.account_password
        renamed = account_name != old_name
        if renamed and not self.storage.create(account_name):
            return False

        self.account_name = account_name
        self.account_password = account_password
        try:
            self.save()
        except Exception:
            self.account_name, self.account_password = old_name, old_password
            if renamed:
                self.storage.delete(account_name)
            raise
        if renamed:
            self.storage.delete(old_name)
            logger.info("Vault moved to the new account name")
        return True

    def _resolve_icon(self, entry: Entry) -> None:
        if self.icon_resolver is not None and entry.icon is None and entry.website:
            entry.icon = self.icon_resolver(entry.website)

    def snapshot(self, scope: SearchScope = SearchScope.ALL) -> Sequence[Entry]:
        """Copy of the entries in *scope* for a background worker."""
        return tuple(self.candidates(scope))

    # ------------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------------

    def search_async(self, scheduler: TaskScheduler, query: str, on_result: Callable[[list], None],
                     scope: SearchScope = SearchScope.ALL,
                     on_error: Optional[Callable[[Exception], None]] = None) -> SearchWorker:
        """Run search() on a worker thread and deliver the hits to *on_result*."""
        worker = SearchWorker(query, self.snapshot(scope))
        worker.result.connect(on_result)
        if on_error is not None:
            worker.error.connect(on_error)
        scheduler.start(worker)
        return worker

    def score_async(self, scheduler: TaskScheduler, password: str, on_result: Callable[[object], None],
                    on_error: Optional[Callable[[Exception], None]] = None) -> StrengthWorker:
        """Score a password on a worker thread, e.g. while it is being typed."""
        worker = StrengthWorker(password, self.strength_calculator)
        worker.result.connect(on_result)
        if on_error is not None:
            worker.error.connect(on_error)
        scheduler.start(worker)
        return worker

    def check_all_compromised_async(self, scheduler: TaskScheduler,
                                    on_error: Optional[Callable[[Exception], None]] = None) -> BreachCheckWorker:
        """Check every entry on a worker thread and apply the results here."""
        worker = BreachCheckWorker(self.snapshot(), self.breach_checker)
        worker.result.connect(self.mark_compromised)
        if on_error is not None:
            worker.error.connect(on_error)
        scheduler.start(worker)
        return worker
