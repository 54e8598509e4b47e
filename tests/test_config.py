import json
import os

import pytest

from lexcore.config import BuildConfig, load_config, read_env, validate_config
from lexcore.errors import ConfigError
from lexcore.policy import Action


class TestDefaults:
    def test_defaults(self):
        config = BuildConfig()
        assert config.workers == (os.cpu_count() or 1)
        assert config.shards == 1
        assert config.granularity == "document"
        assert config.strict is False

    def test_policy_follows_strict_flag(self):
        assert BuildConfig().policy.action_for("document_open") is Action.SKIP
        assert BuildConfig(strict=True).policy.action_for("document_open") is Action.ABORT


class TestValidation:
    def test_valid_config_has_no_errors(self):
        assert validate_config({"workers": 0, "shards": 4, "granularity": "batch", "strict": True}) == []

    def test_collects_every_error(self):
        errors = validate_config(
            {"workers": -1, "shards": 0, "granularity": "term", "strict": "yes", "colour": 1}
        )
        assert len(errors) == 5

    def test_bool_is_not_an_integer(self):
        assert validate_config({"workers": True})

    def test_unknown_encoding(self):
        assert validate_config({"encoding": "not-a-codec"})

    def test_log_level(self):
        assert validate_config({"log_level": "debug"}) == []
        assert validate_config({"log_level": "LOUD"})


class TestLoading:
    def test_layers(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"workers": 2, "shards": 3, "granularity": "batch"}))
        config = load_config(
            str(path),
            overrides={"shards": 5, "granularity": None},
            environ={"LEXICON_WORKERS": "6"},
        )
        assert config.workers == 6
        assert config.shards == 5
        assert config.granularity == "batch"

    def test_env_strict(self):
        assert load_config(environ={"LEXICON_STRICT": "true"}).strict is True
        assert load_config(environ={"LEXICON_STRICT": "0"}).strict is False

    def test_bad_env_value(self):
        with pytest.raises(ConfigError):
            read_env({"LEXICON_WORKERS": "many"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(tmp_path / "missing.json"), environ={})
        assert "not found" in exc_info.value.errors[0]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(str(path), environ={})

    def test_invalid_values_raise(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config(overrides={"shards": 0}, environ={})
        assert exc_info.value.errors

    def test_log_level_is_uppercased(self):
        assert load_config(overrides={"log_level": "info"}, environ={}).log_level == "INFO"
