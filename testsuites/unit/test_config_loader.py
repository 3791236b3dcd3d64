import os

import pytest
import yaml

from testsuites.ui_testing.framework.config_loader import (
    DEFAULT_BASE_URL,
    AppSettings,
    ConfigLoader,
    ConfigurationError,
    get_app_settings,
    load_environment,
)


class DummyConfig:
    def __init__(self, data):
        self.data = data

    def get(self, key, default=None):
        return self.data.get(key, default)


@pytest.fixture(autouse=True)
def _reset_singleton():
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"app": {"base_url": "http://hrm.local", "timeout": 10}}),
        encoding="utf-8",
    )

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("app.base_url") == "http://hrm.local"
    assert loader.get("app.retry_count", 3) == 3

    ConfigLoader.reset()
    monkeypatch.setenv("APP_BASE_URL", "http://env.hrm.local")
    monkeypatch.setenv("APP_TIMEOUT", "25")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("app.base_url") == "http://env.hrm.local"
    assert loader.get("app.timeout", 10) == 25


def test_reload_updates_values(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"timeouts": {"action": 5000}}), encoding="utf-8")

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("timeouts.action") == 5000

    config_path.write_text(yaml.dump({"timeouts": {"action": 15000}}), encoding="utf-8")
    loader.reload()
    assert loader.get("timeouts.action") == 15000


def test_invalid_yaml_raises(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("app: [broken", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader(config_path=config_path)


def test_missing_file_uses_defaults(tmp_path):
    loader = ConfigLoader(config_path=tmp_path / "absent.yaml")
    assert loader.get("timeouts.expect", 30000) == 30000
    assert loader.get_section("app") == {}


def test_load_environment_sets_missing_vars_only(monkeypatch, tmp_path):
    (tmp_path / ".env.qa").write_text(
        "ORANGEHRM_BASE_URL=https://qa.hrm.local\nORANGEHRM_USERNAME=qa_admin\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("ORANGEHRM_BASE_URL", raising=False)
    monkeypatch.setenv("ORANGEHRM_USERNAME", "ci_admin")

    loaded = load_environment("qa", root=tmp_path)

    assert loaded == tmp_path / ".env.qa"
    assert os.environ["ORANGEHRM_BASE_URL"] == "https://qa.hrm.local"
    assert os.environ["ORANGEHRM_USERNAME"] == "ci_admin"


def test_load_environment_uses_env_variable(monkeypatch, tmp_path):
    (tmp_path / ".env.staging").write_text("HEADLESS=true\n", encoding="utf-8")
    monkeypatch.setenv("ENV", "staging")
    monkeypatch.setenv("HEADLESS", "false")

    assert load_environment(root=tmp_path) == tmp_path / ".env.staging"


def test_missing_environment_file(tmp_path):
    assert load_environment("prod", root=tmp_path) is None

    with pytest.raises(ConfigurationError, match=r'"\.env\.prod" not found'):
        load_environment("prod", root=tmp_path, strict=True)


def test_app_settings_precedence(monkeypatch):
    config = DummyConfig({"app.base_url": "http://from-config", "app.username": "cfg_user"})
    monkeypatch.setenv("ORANGEHRM_BASE_URL", "http://from-env")
    monkeypatch.delenv("ORANGEHRM_USERNAME", raising=False)
    monkeypatch.delenv("ORANGEHRM_PASSWORD", raising=False)

    settings = get_app_settings(config)

    assert settings == AppSettings("http://from-env", "cfg_user", "admin123")
    assert settings.login_url == "http://from-env/web/index.php/auth/login"


def test_app_settings_demo_defaults(monkeypatch):
    for name in ("ORANGEHRM_BASE_URL", "ORANGEHRM_USERNAME", "ORANGEHRM_PASSWORD"):
        monkeypatch.delenv(name, raising=False)

    settings = get_app_settings(DummyConfig({}))
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.username == "Admin"
