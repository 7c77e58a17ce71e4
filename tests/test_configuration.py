"""Tests for configuration loading, generation and validation."""

from __future__ import annotations

import pytest
import yaml

from checkthesite.checkers import NO_CONFIG, Configured, SiteChecker, registry
from checkthesite.checkers.simple_contains import SimpleContainsChecker, SimpleContainsConfig
from checkthesite.configuration import (
    DEFAULT_CONFIGURATION,
    ConfigError,
    ConfigGenerated,
    ConfigurationService,
    FileService,
    validate_configuration,
)
from checkthesite.configuration.models import Configuration
from checkthesite.scheduling import TimeUnit


def _config_dict(**request_overrides) -> dict:
    data = DEFAULT_CONFIGURATION.model_dump()
    data["request_data"].update(request_overrides)
    return data


def _write_config(tmp_path, data: dict) -> None:
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")


def _write_checker_config(tmp_path, text: str = "contained_string: in stock\n") -> None:
    (tmp_path / "simple-contains-config.yaml").write_text(text, encoding="utf-8")


@pytest.fixture
def service(tmp_path) -> ConfigurationService:
    return ConfigurationService(FileService(tmp_path))


class TestFileService:
    def test_write_and_read(self, tmp_path):
        files = FileService(tmp_path)
        path = files.write_text("a.yaml", "x: 1\n")
        assert path == tmp_path.resolve() / "a.yaml"
        assert files.exists("a.yaml")
        assert files.read_text("a.yaml") == "x: 1\n"

    def test_refuses_to_overwrite(self, tmp_path):
        files = FileService(tmp_path)
        files.write_text("a.yaml", "old")
        with pytest.raises(FileExistsError):
            files.write_text("a.yaml", "new")
        files.write_text("a.yaml", "new", overwrite=True)
        assert files.read_text("a.yaml") == "new"

    def test_missing_file(self, tmp_path):
        files = FileService(tmp_path)
        assert files.exists("nope.yaml") is False
        with pytest.raises(FileNotFoundError):
            files.read_text("nope.yaml")


# ── Generation ───────────────────────────────────────────────────────────────


class TestGeneration:
    def test_missing_config_is_generated(self, tmp_path, service):
        with pytest.raises(ConfigGenerated) as exc:
            service.load()

        assert exc.value.path.name == "config.yaml"
        generated = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
        assert Configuration.model_validate(generated) == DEFAULT_CONFIGURATION

    def test_missing_checker_config_is_generated(self, tmp_path, service):
        _write_config(tmp_path, _config_dict())

        with pytest.raises(ConfigGenerated) as exc:
            service.load()

        assert exc.value.path.name == "simple-contains-config.yaml"
        text = (tmp_path / "simple-contains-config.yaml").read_text(encoding="utf-8")
        assert SimpleContainsChecker().decode_configuration(text).contained_string

    def test_generated_files_load_on_next_start(self, tmp_path, service):
        with pytest.raises(ConfigGenerated):
            service.load()
        with pytest.raises(ConfigGenerated):
            service.load()

        loaded = service.load()
        assert loaded.policy.url == "https://www.python-httpx.org"


# ── Loading ──────────────────────────────────────────────────────────────────


class TestLoad:
    def test_valid_configuration(self, tmp_path, service):
        _write_config(tmp_path, _config_dict(url=" https://example.com/shop ", periodic_scheduling=True))
        _write_checker_config(tmp_path)

        loaded = service.load()

        assert loaded.policy.url == "https://example.com/shop"
        assert loaded.policy.delay_unit is TimeUnit.MINUTES
        assert loaded.policy.randomness_unit is TimeUnit.SECONDS
        assert loaded.policy.periodic_scheduling is True
        assert loaded.policy.delay_range() == (180, 300)
        assert isinstance(loaded.checker.checker, SimpleContainsChecker)
        assert loaded.checker.config == Configured(SimpleContainsConfig(contained_string="in stock"))

    def test_checker_without_configuration(self, tmp_path, service, monkeypatch):
        monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))

        @registry.register_checker("status-only")
        class StatusOnly(SiteChecker):
            def check(self, response, config):
                return response.status_code == 200

        data = _config_dict()
        data["site_checker"] = "status-only"
        _write_config(tmp_path, data)

        loaded = service.load()
        assert loaded.checker.config is NO_CONFIG
        assert not (tmp_path / "simple-contains-config.yaml").exists()

    def test_unknown_checker(self, tmp_path, service):
        data = _config_dict()
        data["site_checker"] = "no.such.module:Checker"
        _write_config(tmp_path, data)

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert "Couldn't import module" in exc.value.errors[0]

    def test_checker_failing_on_construction(self, tmp_path, service, monkeypatch):
        monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))

        @registry.register_checker("needs-token")
        class NeedsToken(SiteChecker):
            def __init__(self):
                raise RuntimeError("token not set")

            def check(self, response, config):
                return False

        data = _config_dict()
        data["site_checker"] = "needs-token"
        _write_config(tmp_path, data)

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert "token not set" in exc.value.errors[0]

    def test_invalid_yaml(self, tmp_path, service):
        (tmp_path / "config.yaml").write_text("request_data: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert exc.value.file_name == "config.yaml"
        assert "Failed parsing" in exc.value.errors[0]

    def test_top_level_not_a_mapping(self, tmp_path, service):
        (tmp_path / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            service.load()

    def test_missing_field(self, tmp_path, service):
        data = _config_dict()
        del data["request_data"]["url"]
        _write_config(tmp_path, data)

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert any(error.startswith("request_data.url") for error in exc.value.errors)

    def test_invalid_checker_config(self, tmp_path, service):
        _write_config(tmp_path, _config_dict())
        _write_checker_config(tmp_path, "ignore_case: false\n")

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert exc.value.file_name == "simple-contains-config.yaml"
        assert any("contained_string" in error for error in exc.value.errors)


# ── Validation ───────────────────────────────────────────────────────────────


class TestValidation:
    def test_default_configuration_is_valid(self):
        assert validate_configuration(DEFAULT_CONFIGURATION) == []

    def test_collects_every_error(self):
        config = Configuration.model_validate(
            _config_dict(url="  ", min_delay=9, max_delay=5, delay_unit="weeks")
        )
        errors = validate_configuration(config)

        assert "Request url is empty" in errors
        assert "Min delay is larger than max delay" in errors
        assert "delay_unit couldn't be parsed" in errors

    def test_blank_delay_unit_reported_once(self):
        config = Configuration.model_validate(_config_dict(delay_unit="  "))
        assert validate_configuration(config) == ["Request delay unit is empty"]

    def test_blank_randomness_unit_reported_once(self):
        config = Configuration.model_validate(_config_dict(randomness_unit=""))
        assert validate_configuration(config) == ["Request randomness unit is empty"]

    def test_negative_min_delay(self):
        config = Configuration.model_validate(_config_dict(min_delay=-1))
        assert "Min delay is negative" in validate_configuration(config)

    def test_coarser_randomness_unit(self):
        config = Configuration.model_validate(
            _config_dict(min_delay=30, max_delay=50, delay_unit="seconds", randomness_unit="minutes")
        )
        assert validate_configuration(config) == ["randomness_unit is less precise than delay_unit"]

    def test_coarser_randomness_unit_rejected_on_load(self, tmp_path, service):
        _write_config(tmp_path, _config_dict(delay_unit="seconds", randomness_unit="minutes"))
        _write_checker_config(tmp_path)

        with pytest.raises(ConfigError) as exc:
            service.load()
        assert exc.value.errors == ["randomness_unit is less precise than delay_unit"]

    def test_units_case_insensitive(self):
        config = Configuration.model_validate(_config_dict(delay_unit="MINUTES", randomness_unit="Seconds"))
        assert validate_configuration(config) == []

    def test_enabled_mail_requires_recipients(self):
        data = _config_dict()
        data["mail_data"].update(enabled=True, email_to=[])
        config = Configuration.model_validate(data)
        assert validate_configuration(config) == ["Mail recipient list is empty"]

    def test_disabled_mail_is_not_validated(self):
        data = _config_dict()
        data["mail_data"].update(enabled=False, host="", email_from="", email_to=[])
        assert validate_configuration(Configuration.model_validate(data)) == []
