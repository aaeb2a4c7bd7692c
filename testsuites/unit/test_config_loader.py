from pathlib import Path

import pytest
import yaml

from testsuites.ui_testing.framework.config_loader import ConfigLoader, FrameworkSettings
from testsuites.ui_testing.framework.errors import ConfigurationError


def _write(tmp_path, data):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(data), encoding="utf-8")
    return config_path


def test_env_override_and_defaults(monkeypatch, tmp_path, isolated_config):
    config_path = _write(tmp_path, {"ui": {"base_url": "https://qa.example.com", "default_timeout": 10000}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("ui.base_url") == "https://qa.example.com"
    assert loader.get("ui.retry_count", 3) == 3

    ConfigLoader.reset()
    monkeypatch.setenv("UI_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("UI_DEFAULT_TIMEOUT", "5000")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("ui.base_url") == "https://env.example.com"
    assert loader.get("ui.default_timeout", 30000) == 5000


def test_reload_updates_values(tmp_path, isolated_config):
    config_path = _write(tmp_path, {"ui": {"default_timeout": 5}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("ui.default_timeout") == 5

    config_path.write_text(yaml.dump({"ui": {"default_timeout": 15}}), encoding="utf-8")
    loader.reload()
    assert loader.get("ui.default_timeout") == 15


def test_env_references_in_yaml_are_expanded(monkeypatch, tmp_path, isolated_config):
    monkeypatch.setenv("SAUCEDEMO_URL", "https://staging.saucedemo.com")
    monkeypatch.delenv("SAUCEDEMO_PASSWORD", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "ui:\n"
        "  base_url: ${SAUCEDEMO_URL:-https://www.saucedemo.com}\n"
        "credentials:\n"
        "  password: ${SAUCEDEMO_PASSWORD:-secret_sauce}\n"
        "  users:\n"
        "    - ${SAUCEDEMO_PASSWORD}\n",
        encoding="utf-8",
    )

    loader = ConfigLoader(config_path=config_path)

    assert loader.get("ui.base_url") == "https://staging.saucedemo.com"
    assert loader.get("credentials.password") == "secret_sauce"
    assert loader.get_section("credentials")["users"] == [""]


def test_invalid_yaml_raises_configuration_error(tmp_path, isolated_config):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("ui: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)


def test_non_mapping_root_raises_configuration_error(tmp_path, isolated_config):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)


def test_missing_file_falls_back_to_defaults(tmp_path, isolated_config):
    loader = ConfigLoader(config_path=tmp_path / "absent.yaml")

    assert loader.get("ui.browser", "chromium") == "chromium"
    assert loader.get_section("ui") == {}


def test_framework_settings_from_loader(monkeypatch, tmp_path, isolated_config):
    config_path = _write(tmp_path, {
        "ui": {
            "base_url": "https://www.saucedemo.com/",
            "browser": "firefox",
            "headless": True,
            "default_timeout": 15000,
            "test_id_attribute": "data-test",
        },
        "media": {"screenshot_dir": "artifacts/shots", "full_page": False},
        "performance": {"monitoring": False, "thresholds": {"page_load_time": 4000}},
    })
    monkeypatch.setenv("UI_HEADLESS", "false")

    settings = FrameworkSettings.from_loader(ConfigLoader(config_path=config_path))

    assert settings.base_url == "https://www.saucedemo.com"
    assert settings.browser == "firefox"
    assert settings.headless is False
    assert settings.default_timeout_ms == 15000
    assert settings.test_id_attribute == "data-test"
    assert settings.screenshot_dir == Path("artifacts/shots")
    assert settings.full_page_screenshots is False
    assert settings.performance_monitoring is False
    assert settings.thresholds.page_load_time_ms == 4000
    assert settings.thresholds.memory_usage_bytes == 200 * 1024 * 1024


def test_repository_config_targets_saucedemo(isolated_config, monkeypatch):
    monkeypatch.delenv("SAUCEDEMO_URL", raising=False)

    settings = FrameworkSettings.from_loader(ConfigLoader())

    assert settings.base_url == "https://www.saucedemo.com"
    assert settings.test_id_attribute == "data-test"
