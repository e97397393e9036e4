"""Tests for configuration validation with Pydantic."""

import pytest
import yaml
from pydantic import ValidationError

from retryplan.domain.config import (
    ConstantConfig,
    ExponentialConfig,
    LILDConfig,
    MIMDConfig,
    PolicyConfig,
)
from retryplan.domain.errors import ConfigurationError
from retryplan.domain.policy import RetryPolicy
from retryplan.domain.strategies import ExponentialStrategy, FibonacciStrategy
from retryplan.infrastructure.config.config_manager import ConfigManager, switch_strategy
from retryplan.infrastructure.strategy_factory import StrategyFactory, build_policy


class TestPolicyConfigValidation:
    """Tests for PolicyConfig validation."""

    def test_defaults(self):
        """Test default values of shared options"""
        config = PolicyConfig()
        assert config.max_attempts == 0
        assert config.jitter_factor is None
        assert config.max_delay is None

    def test_unknown_field_rejected(self):
        """Test that unknown fields are rejected"""
        with pytest.raises(ValidationError, match="retries"):
            PolicyConfig(retries=3)

    def test_negative_max_attempts(self):
        """Test max_attempts must be non-negative"""
        with pytest.raises(ValidationError, match="max_attempts"):
            PolicyConfig(max_attempts=-1)

    def test_jitter_factor_above_half(self):
        """Test jitter_factor above 0.5"""
        with pytest.raises(ValidationError, match="jitter_factor"):
            PolicyConfig(jitter_factor=0.6)

    def test_jitter_factor_bounds_inclusive(self):
        """Test jitter_factor accepts 0 and 0.5"""
        assert PolicyConfig(jitter_factor=0).jitter_factor == 0
        assert PolicyConfig(jitter_factor=0.5).jitter_factor == 0.5

    def test_negative_max_delay(self):
        """Test max_delay must be non-negative"""
        with pytest.raises(ValidationError, match="max_delay"):
            PolicyConfig(max_delay=-1)


class TestStrategyConfigValidation:
    """Tests for strategy-specific configuration models."""

    def test_constant_requires_delay_on_failure(self):
        """Test delay_on_failure is required"""
        with pytest.raises(ValidationError, match="delay_on_failure"):
            ConstantConfig()

    def test_constant_defaults(self):
        """Test delay_on_success defaults to 0"""
        config = ConstantConfig(delay_on_failure=2)
        assert config.delay_on_failure == 2
        assert config.delay_on_success == 0

    def test_constant_negative_delay(self):
        """Test negative delays are rejected"""
        with pytest.raises(ValidationError, match="delay_on_failure"):
            ConstantConfig(delay_on_failure=-2)

    def test_exponential_base_below_one(self):
        """Test exponent_base must be at least 1"""
        with pytest.raises(ValidationError, match="exponent_base"):
            ExponentialConfig(initial_delay=1, exponent_base=0.5)

    def test_lild_success_increment_must_not_grow(self):
        """Test delay_increment_on_success must be <= 0"""
        with pytest.raises(ValidationError, match="delay_increment_on_success"):
            LILDConfig(initial_delay=1, delay_increment_on_failure=1, delay_increment_on_success=1)

    def test_adaptive_min_delay_above_max_delay(self):
        """Test min_delay must not exceed max_delay"""
        with pytest.raises(ValidationError, match="min_delay"):
            MIMDConfig(
                initial_delay=1,
                min_delay=10,
                max_delay=5,
                delay_multiple_on_failure=2,
                delay_multiple_on_success=0.5,
            )


class TestStrategyFactory:
    """Tests for StrategyFactory and build_policy."""

    def test_build_default_strategy(self):
        """Test that the constant strategy is used when none is named"""
        policy = build_policy({"delay_on_failure": 2})
        assert isinstance(policy, RetryPolicy)
        assert policy.failure(10) == 2

    def test_build_named_strategy_case_insensitive(self):
        """Test strategy names are case-insensitive"""
        policy = build_policy({"strategy": "Exponential", "initial_delay": 1})
        assert isinstance(policy.strategy, ExponentialStrategy)

    def test_build_does_not_mutate_options(self):
        """Test the caller's mapping is left alone"""
        options = {"strategy": "constant", "delay_on_failure": 2}
        build_policy(options)
        assert options == {"strategy": "constant", "delay_on_failure": 2}

    def test_unknown_option(self):
        """Test unknown option raises ConfigurationError naming it"""
        with pytest.raises(ConfigurationError, match="delay_on_falure"):
            build_policy({"delay_on_falure": 2})

    def test_missing_required_option(self):
        """Test missing required option raises ConfigurationError"""
        with pytest.raises(ConfigurationError, match="delay_on_failure"):
            build_policy({"max_attempts": 3})

    def test_invalid_value(self):
        """Test out-of-range values raise ConfigurationError"""
        with pytest.raises(ConfigurationError, match="jitter_factor"):
            build_policy({"delay_on_failure": 1, "jitter_factor": 0.9})

    def test_unknown_strategy(self):
        """Test unknown strategy lists the available ones"""
        with pytest.raises(ConfigurationError, match="Available strategies: constant"):
            StrategyFactory.create("random_walk", {})

    def test_configuration_error_chains_validation_error(self):
        """Test the pydantic error is kept as the cause"""
        with pytest.raises(ConfigurationError) as exc_info:
            build_policy({"strategy": "fibonacci", "initial_delay1": 1})
        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert "initial_delay2" in str(exc_info.value)

    def test_available_strategies(self):
        """Test every strategy is registered"""
        assert StrategyFactory.available() == [
            "constant",
            "exponential",
            "fibonacci",
            "lild",
            "limd",
            "mild",
            "mimd",
        ]

    def test_config_model(self):
        """Test config_model returns the strategy's pydantic model"""
        assert StrategyFactory.config_model("lild") is LILDConfig


class TestConfigManager:
    """Tests for ConfigManager with validation."""

    def _write(self, path, data):
        path.write_text(yaml.dump(data), encoding="utf-8")
        return path

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test default options when no config file exists"""
        monkeypatch.chdir(tmp_path)
        manager = ConfigManager()
        assert manager.config_path is None
        assert manager.get_policy_options() == {"strategy": "constant", "delay_on_failure": 1.0}

    def test_finds_config_in_parent(self, tmp_path, monkeypatch):
        """Test config file discovery walks up from the current directory"""
        self._write(tmp_path / ".retryplan.yml", {"policy": {"max_attempts": 4}})
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        manager = ConfigManager()
        assert manager.config_path == tmp_path / ".retryplan.yml"
        assert manager.get_policy_options()["max_attempts"] == 4

    def test_same_strategy_merges_with_defaults(self, tmp_path):
        """Test file options merge over defaults for the same strategy"""
        path = self._write(tmp_path / "retry.yml", {"policy": {"max_attempts": 3}})
        manager = ConfigManager(config_path=path)
        assert manager.get_policy_options() == {
            "strategy": "constant",
            "delay_on_failure": 1.0,
            "max_attempts": 3,
        }

    def test_other_strategy_replaces_defaults(self, tmp_path):
        """Test a different strategy does not inherit constant's options"""
        path = self._write(
            tmp_path / "retry.yml",
            {"policy": {"strategy": "exponential", "initial_delay": 0.5}},
        )
        manager = ConfigManager(config_path=str(path))
        assert manager.get_policy_options() == {"strategy": "exponential", "initial_delay": 0.5}
        policy = manager.create_policy()
        assert isinstance(policy.strategy, ExponentialStrategy)

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        """Test an unparsable file is ignored with a warning"""
        path = tmp_path / "retry.yml"
        path.write_text("policy: [unclosed", encoding="utf-8")
        manager = ConfigManager(config_path=path)
        assert manager.get_policy_options()["strategy"] == "constant"

    def test_non_mapping_file(self, tmp_path):
        """Test a top-level list is rejected"""
        path = tmp_path / "retry.yml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigManager(config_path=path)

    def test_non_mapping_policy_section(self, tmp_path):
        """Test the policy section must be a mapping"""
        path = self._write(tmp_path / "retry.yml", {"policy": 5})
        with pytest.raises(ConfigurationError, match="policy"):
            ConfigManager(config_path=path)

    def test_invalid_option_in_file(self, tmp_path):
        """Test invalid file options fail when building the policy"""
        path = self._write(tmp_path / "retry.yml", {"policy": {"jitter_factor": 2}})
        manager = ConfigManager(config_path=path)
        with pytest.raises(ConfigurationError, match="jitter_factor"):
            manager.create_policy()

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test RETRYPLAN_* environment overrides"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RETRYPLAN_MAX_ATTEMPTS", "4")
        monkeypatch.setenv("RETRYPLAN_MAX_DELAY", "2.5")
        monkeypatch.setenv("RETRYPLAN_JITTER_FACTOR", "0.1")
        options = ConfigManager().get_policy_options()
        assert options["max_attempts"] == 4
        assert options["max_delay"] == 2.5
        assert options["jitter_factor"] == 0.1

    def test_env_strategy_switch_drops_old_parameters(self, tmp_path, monkeypatch):
        """Test RETRYPLAN_STRATEGY keeps only shared options"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RETRYPLAN_STRATEGY", "fibonacci")
        monkeypatch.setenv("RETRYPLAN_MAX_ATTEMPTS", "2")
        manager = ConfigManager()
        assert manager.get_policy_options() == {"strategy": "fibonacci", "max_attempts": 2}
        with pytest.raises(ConfigurationError, match="initial_delay1"):
            manager.create_policy()

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        """Test non-numeric environment override"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RETRYPLAN_MAX_ATTEMPTS", "many")
        with pytest.raises(ConfigurationError, match="RETRYPLAN_MAX_ATTEMPTS"):
            ConfigManager()

    def test_create_policy_overrides(self, tmp_path):
        """Test overrides switch strategy but keep shared options"""
        path = self._write(tmp_path / "retry.yml", {"policy": {"max_attempts": 3}})
        manager = ConfigManager(config_path=path)
        policy = manager.create_policy(
            {"strategy": "fibonacci", "initial_delay1": 1, "initial_delay2": 2}
        )
        assert isinstance(policy.strategy, FibonacciStrategy)
        assert policy.config.max_attempts == 3

    def test_switch_strategy_same_name_keeps_options(self):
        """Test switching to the current strategy is a no-op"""
        options = {"strategy": "constant", "delay_on_failure": 2}
        assert switch_strategy(options, "constant") == options
