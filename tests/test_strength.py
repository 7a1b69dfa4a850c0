import pytest

from vaultguard.models import StrengthCategory
from vaultguard.strength import PasswordStrengthCalculator, load_word_list


def test_known_password_is_very_weak_with_bundled_lists():
    assert PasswordStrengthCalculator().calculate_strength("password") is StrengthCategory.VERY_WEAK


def test_exact_dictionary_match_costs_one_hundred(calculator):
    listed = PasswordStrengthCalculator(common_passwords=["password"], english_words=[])
    assert calculator.points("password") == 70
    assert listed.points("password") == -30


def test_long_mixed_password_is_very_strong(calculator):
    assert calculator.calculate_strength("Xk9#mQ2!vL7$pR4&wZ") is StrengthCategory.VERY_STRONG


@pytest.mark.parametrize("password, expected", [
    ("abc", 28),
    ("Abcdef12", 92),
    ("", 0),
])
def test_points_without_dictionaries(calculator, password, expected):
    assert calculator.points(password) == expected


def test_similar_words_are_penalised(calculator):
    similar = PasswordStrengthCalculator(common_passwords=[], english_words=["sunshine"])
    # partial ratio (+2) and token set ratio (+8), doubled and negated
    assert similar.points("sunshine1") == calculator.points("sunshine1") - 20


@pytest.mark.parametrize("points, category", [
    (30, StrengthCategory.VERY_WEAK),
    (31, StrengthCategory.WEAK),
    (60, StrengthCategory.WEAK),
    (89, StrengthCategory.MODERATE),
    (90, StrengthCategory.STRONG),
    (119, StrengthCategory.STRONG),
    (120, StrengthCategory.VERY_STRONG),
])
def test_category_thresholds(points, category):
    assert StrengthCategory.from_points(points) is category


def test_unreadable_word_list_degrades_to_empty(tmp_path):
    assert load_word_list(str(tmp_path / "missing.txt")) == ()


def test_bundled_word_lists_load():
    calculator = PasswordStrengthCalculator()
    assert "password" in calculator.common_passwords
    assert calculator.english_words
