from pathlib import Path

import pytest
from pydantic import ValidationError

from wirebind.conf.get_settings import CONFIG_YAML_ENV_VAR, get_global_settings, reset_global_settings
from wirebind.conf.settings import WirebindSettings

FIXTURES = Path(__file__).parent / 'fixtures'


def test_default_settings() -> None:
    assert WirebindSettings().TYPE_CHECKS is True


@pytest.mark.parametrize('filepath', ['no_type_checks_settings.yml'])
def test_valid_settings_from_yaml(filepath: str) -> None:
    assert WirebindSettings.from_yaml(filepath=FIXTURES / filepath) == WirebindSettings(TYPE_CHECKS=False)


def test_invalid_settings_from_yaml() -> None:
    with pytest.raises(ValidationError):
        WirebindSettings.from_yaml(filepath=FIXTURES / 'invalid_settings.yml')


def test_missing_settings_file() -> None:
    with pytest.raises(ValueError):
        WirebindSettings.from_yaml(filepath=FIXTURES / 'missing.yml')


def test_settings_are_frozen() -> None:
    settings = WirebindSettings()
    with pytest.raises(ValidationError):
        settings.TYPE_CHECKS = False


def test_global_settings_defaults() -> None:
    settings = get_global_settings()
    assert settings == WirebindSettings()
    assert get_global_settings() is settings


def test_global_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(FIXTURES / 'no_type_checks_settings.yml'))
    assert get_global_settings().TYPE_CHECKS is False

    # a different source after loading is refused
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR)
    with pytest.raises(Exception):
        get_global_settings()

    reset_global_settings()
    assert get_global_settings().TYPE_CHECKS is True
