import pytest

from vaultguard.errors import InvalidInput
from vaultguard.hashing import digest


def test_digest_of_empty_string_is_known_constant():
    assert digest("") == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_digest_is_lowercase_hex_of_fixed_length():
    value = digest("alice")
    assert len(value) == 40
    assert value == value.lower()
    int(value, 16)


def test_digest_is_stable_and_distinguishes_inputs():
    assert digest("alice") == digest("alice")
    assert digest("alice") != digest("Alice")


def test_digest_uses_utf8_bytes():
    assert digest("password") == "5baa61e4c9b93f3f0682250b6cf8331b7ee68fd8"
    assert len(digest("päss")) == 40


def test_digest_rejects_none():
    with pytest.raises(InvalidInput):
        digest(None)
