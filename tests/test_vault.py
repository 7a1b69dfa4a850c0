import pytest
from PyQt5.QtCore import QCoreApplication

from vaultguard.errors import BreachCheckFailure, CryptoSetupError, EncryptionFailure
from vaultguard.models import Entry, StrengthCategory
from vaultguard.search import SearchScope
from vaultguard.session import AccountSession, SessionState
from vaultguard.tasks import TaskScheduler

STRONG_PASSWORD = "Xk9#mQ2!vL7$pR4&wZ"


def titles(entries):
    return [entry.title for entry in entries]


def test_sorted_entries_ignore_case_and_keep_order_of_equal_titles(make_vault):
    first_a, second_a = Entry(title="A", username="first"), Entry(title="a", username="second")
    vault = make_vault([Entry(title="b"), first_a, second_a])
    ordered = vault.sorted_entries()
    assert titles(ordered) == ["A", "a", "b"]
    assert ordered[0] is first_a and ordered[1] is second_a


def test_search_matches_website_and_title_once(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    assert vault.search("github") == [sample_entries[0]]


def test_search_respects_scope(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    assert vault.search("netflix", SearchScope.FAVOURITES) == [sample_entries[1]]
    assert vault.search("github", SearchScope.FAVOURITES) == []
    assert vault.search("github", SearchScope.COMPROMISED) == []


def test_search_without_hits_is_empty(make_vault, sample_entries):
    assert make_vault(sample_entries).search("zzzzqqq") == []


def test_delete_removes_first_match_and_notifies(make_vault):
    duplicate_one, duplicate_two = Entry(title="Mail"), Entry(title="Mail")
    zeta, alpha = Entry(title="zeta"), Entry(title="Alpha")
    vault = make_vault([zeta, duplicate_one, alpha, duplicate_two])
    saved, deleted = [], []
    vault.saved.connect(saved.append)
    vault.deleted.connect(lambda data, title: deleted.append((data, title)))

    vault.delete_entry("Mail")

    assert vault.entries == [alpha, duplicate_two, zeta]
    assert len(saved) == 1 and titles(saved[0]) == ["Alpha", "Mail", "zeta"]
    assert deleted == [("", "Mail")]


def test_delete_unknown_title_still_saves_and_notifies(make_vault, storage, sample_entries):
    vault = make_vault(sample_entries)
    deleted = []
    vault.deleted.connect(lambda data, title: deleted.append(title))
    vault.delete_entry("Nope")
    assert len(vault.entries) == 3
    assert storage.exists("alice")
    assert deleted == ["Nope"]


def test_saved_vault_round_trips_through_login(make_vault, crypto, storage, sample_entries):
    vault = make_vault(sample_entries)
    vault.entries[1].compromised = True
    vault.save()

    session = AccountSession(crypto=crypto, storage=storage)
    assert session.login("alice", "correct horse") is SessionState.LOGGED_IN
    document = session.document()
    assert document.account_password == "correct horse"
    assert [e.to_dict() for e in document.entries] == [e.to_dict() for e in sample_entries]


def test_save_with_broken_cipher_is_encryption_failure(make_vault, crypto, monkeypatch):
    def broken_cipher(*args, **kwargs):
        raise CryptoSetupError("AES/ECB cipher is not available")

    vault = make_vault()
    monkeypatch.setattr(crypto, "_cipher", broken_cipher)
    with pytest.raises(EncryptionFailure):
        vault.save()


def test_check_all_compromised_sets_but_never_clears(make_vault, breach_checker, sample_entries):
    breach_checker.counts = {"hunter2": 17}
    vault = make_vault(sample_entries)
    vault.check_all_compromised()
    assert titles(vault.compromised()) == ["netflix"]

    breach_checker.counts = {}
    vault.check_all_compromised()
    assert titles(vault.compromised()) == ["netflix"]


def test_empty_password_is_not_checked(make_vault, breach_checker):
    vault = make_vault([Entry(title="No password")])
    vault.check_all_compromised()
    assert breach_checker.checked == []


def test_password_change_resets_compromised_and_strength(make_vault, breach_checker, sample_entries):
    breach_checker.counts = {"hunter2": 17}
    vault = make_vault(sample_entries)
    netflix = vault.find_entry("netflix")
    vault.check_entry_compromised(netflix)
    assert netflix.compromised

    vault.update_entry(netflix, password=STRONG_PASSWORD)
    assert not netflix.compromised
    assert netflix.strength_category is StrengthCategory.VERY_STRONG
    assert breach_checker.checked[-1] == STRONG_PASSWORD


def test_update_entry_rejects_unknown_fields(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    with pytest.raises(TypeError):
        vault.update_entry(sample_entries[0], compromised=False)


def test_toggle_favourite(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    assert vault.toggle_favourite(sample_entries[0]) is True
    assert titles(vault.favourites()) == ["GitHub", "netflix"]


def test_icon_resolver_runs_for_loaded_added_and_edited_entries(make_vault, sample_entries):
    vault = make_vault(sample_entries, icon_resolver=lambda website: f"icon:{website}")
    assert sample_entries[0].icon == "icon:github.com"

    added = Entry(title="Shop", website="shop.example")
    vault.add_entry(added)
    assert added.icon == "icon:shop.example"

    vault.update_entry(added, website="store.example")
    assert added.icon == "icon:store.example"


def test_mark_compromised_ignores_stale_results(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    github, netflix, bank = sample_entries
    removed = vault.entries.pop()
    netflix.password = "changed meanwhile"

    vault.mark_compromised([(github, "gh-pass-1", 3), (netflix, "hunter2", 9), (removed, "Sup3r$ecret!", 1)])

    assert github.compromised
    assert not netflix.compromised
    assert not bank.compromised


def test_mark_compromised_ignores_zero_counts(make_vault, sample_entries):
    vault = make_vault(sample_entries)
    vault.mark_compromised([(sample_entries[0], "gh-pass-1", 0)])
    assert vault.compromised() == []


def test_update_account_renames_vault_file(make_vault, crypto, storage, sample_entries):
    vault = make_vault(sample_entries)
    vault.save()
    assert vault.update_account("bob", "new passphrase") is True
    assert not storage.exists("alice")

    session = AccountSession(crypto=crypto, storage=storage)
    assert session.login("bob", "new passphrase") is SessionState.LOGGED_IN
    assert session.document().account_name == "bob"


def test_update_account_refuses_taken_name(make_vault, storage):
    vault = make_vault()
    vault.save()
    storage.create("bob")
    assert vault.update_account("bob", "new passphrase") is False
    assert vault.account_name == "alice"
    assert storage.read("bob") == ""


def test_update_account_restores_on_failure(make_vault, crypto, storage, monkeypatch):
    def broken_cipher(*args, **kwargs):
        raise CryptoSetupError("AES/ECB cipher is not available")

    vault = make_vault()
    vault.save()
    monkeypatch.setattr(crypto, "_cipher", broken_cipher)
    with pytest.raises(EncryptionFailure):
        vault.update_account("bob", "new passphrase")
    assert (vault.account_name, vault.account_password) == ("alice", "correct horse")
    assert storage.exists("alice")
    assert not storage.exists("bob")


def test_background_breach_check_applies_results(make_vault, breach_checker, sample_entries):
    breach_checker.counts = {"Sup3r$ecret!": 2}
    vault = make_vault(sample_entries)
    scheduler = TaskScheduler()

    worker = vault.check_all_compromised_async(scheduler)
    assert worker.wait(5000)
    QCoreApplication.sendPostedEvents()

    assert titles(vault.compromised()) == ["Bank"]
    scheduler.shutdown()
    assert scheduler.active_workers() == []


class FailingBreachChecker:
    def check(self, password):
        raise BreachCheckFailure("Unexpected response from the breach API")


def test_failed_breach_lookup_leaves_edit_unapplied(make_vault, sample_entries):
    vault = make_vault(sample_entries, breach_checker=FailingBreachChecker())
    netflix = vault.find_entry("netflix")
    netflix.compromised = True
    before = netflix.to_dict()

    with pytest.raises(BreachCheckFailure):
        vault.update_entry(netflix, title="renamed", password=STRONG_PASSWORD)
    assert netflix.to_dict() == before


def test_new_breached_password_is_flagged_on_edit(make_vault, breach_checker, sample_entries):
    breach_checker.counts = {"123456": 40}
    vault = make_vault(sample_entries)
    github = vault.find_entry("GitHub")
    vault.update_entry(github, password="123456")
    assert github.compromised
