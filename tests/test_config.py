import pytest

from vocasrs.config import load_settings, resolve_settings_path, settings_from_mapping
from vocasrs.exceptions import SettingsError
from vocasrs.models import Settings


@pytest.fixture(autouse=True)
def clear_settings_env(monkeypatch):
    monkeypatch.delenv("VOCASRS_SETTINGS", raising=False)


def test_no_path_returns_defaults():
    assert load_settings() == Settings()


def test_load_camel_case_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text(
        "newCardsPerDay: 5\n"
        "reviewCardsPerDay: 40\n"
        "learnSteps: [1, 10]\n"
        "masteredInterval: 21\n"
    )

    settings = load_settings(path)

    assert settings.new_cards_per_day == 5
    assert settings.review_cards_per_day == 40
    assert settings.learn_steps == (1.0, 10.0)
    assert settings.mastered_interval == 21
    assert settings.leech_threshold == Settings().leech_threshold


def test_load_snake_case_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("leech_threshold: 3\nlapse_steps: [15]\n")

    settings = load_settings(path)

    assert settings.leech_threshold == 3
    assert settings.lapse_steps == (15.0,)


def test_env_var_is_used(tmp_path, monkeypatch):
    path = tmp_path / "env.yml"
    path.write_text("newCardsPerDay: 7\n")
    monkeypatch.setenv("VOCASRS_SETTINGS", str(path))

    assert resolve_settings_path() == path
    assert load_settings().new_cards_per_day == 7


def test_explicit_path_wins_over_env(tmp_path, monkeypatch):
    explicit = tmp_path / "explicit.yml"
    monkeypatch.setenv("VOCASRS_SETTINGS", str(tmp_path / "env.yml"))

    assert resolve_settings_path(explicit) == explicit


def test_empty_file_returns_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")

    assert load_settings(path) == Settings()


def test_missing_file(tmp_path):
    with pytest.raises(SettingsError, match="Cannot read settings file"):
        load_settings(tmp_path / "nope.yml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("learnSteps: [1, 10\n")

    with pytest.raises(SettingsError, match="Invalid YAML") as excinfo:
        load_settings(path)
    assert excinfo.value.original_exception is not None


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- 1\n- 2\n")

    with pytest.raises(SettingsError, match="must contain a mapping, got list"):
        load_settings(path)


def test_invalid_values_are_wrapped(tmp_path):
    path = tmp_path / "neg.yml"
    path.write_text("newCardsPerDay: -5\n")

    with pytest.raises(SettingsError, match="Invalid settings"):
        load_settings(path)


def test_unknown_keys_are_rejected():
    with pytest.raises(SettingsError):
        settings_from_mapping({"darkMode": True})
