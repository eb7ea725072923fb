"""
Configuration tests: defaults, YAML loading, schema validation, env overrides.
"""

import pytest
import yaml

from plotnft.config import (
    ConfigError,
    ConfigValidationError,
    PlotNFTConfig,
    get_config,
    get_config_manager,
    validate_config_data,
)
from plotnft.registry import PlotRegistry


class TestDefaults:

    def test_default_values(self):
        config = PlotNFTConfig()
        assert config.registry.max_tokens.get() == 10000
        assert config.registry.mint_fee.get() == 500
        assert config.registry.contract_owner.get() == "ST1TEST"
        assert config.registry.burn_address.get() == "SP000000000000000000002Q6VF78"
        assert config.observability.log_level.get() == "info"
        assert config.observability.audit_enabled.get() is True

    def test_to_yaml_round_trips_values(self):
        data = yaml.safe_load(PlotNFTConfig().to_yaml())
        assert data["registry"]["max_tokens"] == 10000
        assert data["observability"]["log_format"] == "json"

    def test_manager_is_singleton(self):
        assert get_config_manager() is get_config_manager()
        assert get_config() is get_config_manager().config


class TestOverrides:

    def test_set_and_get_by_path(self):
        manager = get_config_manager()
        manager.set("registry.mint_fee", 1000)
        assert manager.get("registry.mint_fee") == 1000

    def test_set_rejects_invalid_value(self):
        with pytest.raises(ConfigValidationError):
            get_config_manager().set("registry.max_tokens", 0)

    def test_invalid_path(self):
        manager = get_config_manager()
        with pytest.raises(ConfigError):
            manager.set("registry.nope", 1)
        with pytest.raises(ConfigError):
            manager.set("registry", 1)
        with pytest.raises(ConfigError):
            manager.get("nope.value")

    def test_env_takes_precedence(self, monkeypatch):
        manager = get_config_manager()
        manager.set("registry.max_tokens", 20)
        monkeypatch.setenv("PLOTNFT_MAX_TOKENS", "7")
        monkeypatch.setenv("PLOTNFT_AUDIT_ENABLED", "false")
        assert manager.get("registry.max_tokens") == 7
        assert manager.get("observability.audit_enabled") is False

    def test_env_bad_integer(self, monkeypatch):
        monkeypatch.setenv("PLOTNFT_MINT_FEE", "lots")
        errors = get_config_manager().validate()
        assert any(e.startswith("registry.mint_fee") for e in errors)

    def test_env_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("PLOTNFT_LOG_LEVEL", "loud")
        with pytest.raises(ConfigValidationError, match="PLOTNFT_LOG_LEVEL"):
            PlotRegistry()
        errors = get_config_manager().validate()
        assert any(e.startswith("observability.log_level") for e in errors)

    def test_validate_clean(self):
        assert get_config_manager().validate() == []

    def test_reset(self):
        manager = get_config_manager()
        manager.set("registry.contract_owner", "ST5BOSS")
        manager.reset()
        assert manager.get("registry.contract_owner") == "ST1TEST"


class TestFileLoading:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "plotnft.yaml"
        path.write_text(
            "registry:\n"
            "  max_tokens: 3\n"
            "  mint_fee: 0\n"
            "  contract_owner: ST5BOSS\n"
            "observability:\n"
            "  log_format: text\n",
            encoding="utf-8",
        )
        manager = get_config_manager()
        manager.load_from_file(path)

        assert manager.get("registry.max_tokens") == 3
        assert manager.get("registry.mint_fee") == 0
        assert manager.config_paths == [path]

        registry = PlotRegistry()
        assert registry.contract_owner == "ST5BOSS"
        assert registry.max_tokens == 3
        assert registry.mint_fee == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            get_config_manager().load_from_file(tmp_path / "absent.yaml")

    def test_empty_file_is_noop(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        get_config_manager().load_from_file(path)
        assert get_config_manager().config_paths == []

    def test_schema_violation_leaves_config_unchanged(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("registry:\n  max_tokens: 5\n  mint_fee: -1\n", encoding="utf-8")
        manager = get_config_manager()
        with pytest.raises(ConfigValidationError, match="mint_fee"):
            manager.load_from_file(path)
        assert manager.get("registry.max_tokens") == 10000

    def test_unknown_keys_rejected(self):
        errors = validate_config_data({"registry": {"supply": 5}})
        assert errors
        assert "supply" in errors[0]

    def test_valid_data_has_no_errors(self):
        assert validate_config_data({"registry": {"max_tokens": 1}, "observability": {"log_level": "debug"}}) == []
