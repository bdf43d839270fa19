from decimal import Decimal

import pytest

from matching import (
    DEFAULT_CONFIG,
    MatchingConfig,
    amount_similarity,
    ids_equal,
    load_matching_config,
    string_similarity,
)


def test_string_similarity_exact_and_normalized_matches():
    assert string_similarity("Acme Corp", "Acme Corp") == 1.0
    assert string_similarity("John Smith", " john  SMITH. ") == 1.0
    assert string_similarity("", "") == 1.0
    assert string_similarity(None, None) == 1.0


def test_string_similarity_one_sided_empty_is_zero():
    assert string_similarity("John", "") == 0.0
    assert string_similarity(None, "John") == 0.0


def test_string_similarity_nicknames():
    assert string_similarity("Robert", "Bob") == 0.9
    assert string_similarity("bob", "Rob") == 0.9
    assert string_similarity("Margaret", "peggy") == 0.9


def test_string_similarity_levenshtein():
    assert string_similarity("Jon", "John") == pytest.approx(0.75)
    assert string_similarity("Smith", "Smyte") == pytest.approx(0.6)
    assert string_similarity("abc", "xyz") == 0.0


def test_nickname_score_comes_from_config():
    config = MatchingConfig(nickname_similarity=0.95)
    assert string_similarity("William", "Bill", config) == 0.95


def test_amount_similarity():
    assert amount_similarity(0, 0) is True
    assert amount_similarity(0, "5.00") is False
    assert amount_similarity("$100.00", Decimal("96")) is True
    assert amount_similarity(100, 94) is False
    assert amount_similarity("50,000", "50,400") is True


def test_ids_equal_compares_digits_only():
    assert ids_equal("123-45-6789", "123456789") is True
    assert ids_equal("123-45-6789", "123-45-6780") is False
    assert ids_equal("", "") is False
    assert ids_equal("n/a", "N/A") is False


def test_load_matching_config_defaults_match_in_code_defaults():
    assert load_matching_config() == DEFAULT_CONFIG


def test_load_matching_config_custom_file(tmp_path):
    path = tmp_path / "thresholds.yaml"
    path.write_text("duplicate_threshold: 0.9\nname_similarity: 0.75\n", encoding="utf-8")
    config = load_matching_config(path)
    assert config.duplicate_threshold == 0.9
    assert config.name_similarity == 0.75
    assert config.amount_similarity == DEFAULT_CONFIG.amount_similarity


def test_load_matching_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("duplicate_treshold: 0.9\n", encoding="utf-8")
    with pytest.raises(ValueError) as excinfo:
        load_matching_config(path)
    assert "duplicate_treshold" in str(excinfo.value)


def test_load_matching_config_rejects_non_numeric_values(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("duplicate_threshold: high\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_matching_config(path)


def test_load_matching_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_matching_config(tmp_path / "missing.yaml")
