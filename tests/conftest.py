import pytest
from PyQt5.QtCore import QCoreApplication

from vaultguard.crypto import CryptoManager
from vaultguard.models import Entry, VaultDocument
from vaultguard.storage import StorageService
from vaultguard.strength import PasswordStrengthCalculator
from vaultguard.vault import VaultModel


class StubBreachChecker:
    """Answers breach lookups from a dict instead of the network."""

    def __init__(self, counts=None):
        self.counts = counts or {}
        self.checked = []

    def check(self, password):
        self.checked.append(password)
        return self.counts.get(password, 0)


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def storage(tmp_path):
    return StorageService(str(tmp_path / "vaults"))


@pytest.fixture
def crypto():
    return CryptoManager()


@pytest.fixture
def breach_checker():
    return StubBreachChecker()


@pytest.fixture
def calculator():
    return PasswordStrengthCalculator(common_passwords=[], english_words=[])


@pytest.fixture
def make_vault(crypto, storage, breach_checker, calculator):
    def _make(entries=(), account_name="alice", account_password="correct horse", **kwargs):
        document = VaultDocument(account_name, account_password, list(entries))
        kwargs.setdefault("breach_checker", breach_checker)
        kwargs.setdefault("strength_calculator", calculator)
        return VaultModel(document, crypto=crypto, storage=storage, **kwargs)
    return _make


@pytest.fixture
def sample_entries():
    return [
        Entry(title="GitHub", username="alice", website="github.com", password="gh-pass-1"),
        Entry(title="netflix", website="netflix.com", password="hunter2", favourite=True),
        Entry(title="Bank", website="mybank.example", password="Sup3r$ecret!"),
    ]
