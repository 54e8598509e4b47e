"""Build configuration: defaults → JSON file → environment → CLI options.

Validation follows the same shape as everywhere else in Lexicon: collect
every problem as a human-readable string, then fail once with all of them.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from lexcore.errors import ConfigError
from lexcore.policy import ErrorPolicy
from lexcore.processor import GRANULARITIES

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

ENV_PREFIX = "LEXICON_"
_ENV_FIELDS = {
    "workers": int,
    "shards": int,
    "granularity": str,
    "strict": lambda v: v.strip().lower() in {"1", "true", "yes", "on"},
    "encoding": str,
    "log_level": str,
}


def _default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class BuildConfig:
    # 0 means one thread per document.
    workers: int = field(default_factory=_default_workers)
    shards: int = 1
    granularity: str = "document"
    strict: bool = False
    encoding: str = "utf-8"
    log_level: str = "WARNING"

    @property
    def policy(self) -> ErrorPolicy:
        return ErrorPolicy.strict() if self.strict else ErrorPolicy.lenient()


# ── Validation ──────────────────────────────────────────────────────

def validate_config(config: dict) -> list[str]:
    """Check field names, types and ranges.  Returns list of error strings."""
    errors: list[str] = []

    known = set(BuildConfig.__dataclass_fields__)
    unknown = sorted(set(config) - known)
    if unknown:
        errors.append(f"Unknown config fields: {unknown}. Known fields: {sorted(known)}.")

    if "workers" in config:
        w = config["workers"]
        if isinstance(w, bool) or not isinstance(w, int) or w < 0:
            errors.append("'workers' must be a non-negative integer (0 = one per document).")

    if "shards" in config:
        s = config["shards"]
        if isinstance(s, bool) or not isinstance(s, int) or s < 1:
            errors.append("'shards' must be a positive integer.")

    if "granularity" in config and config["granularity"] not in GRANULARITIES:
        errors.append(
            f"'granularity' must be one of {list(GRANULARITIES)}, got '{config['granularity']}'."
        )

    if "strict" in config and not isinstance(config["strict"], bool):
        errors.append("'strict' must be a boolean.")

    if "encoding" in config:
        enc = config["encoding"]
        if not isinstance(enc, str) or not enc:
            errors.append("'encoding' must be a non-empty string.")
        else:
            try:
                "".encode(enc)
            except LookupError:
                errors.append(f"'encoding' names an unknown codec: '{enc}'.")

    if "log_level" in config:
        lvl = config["log_level"]
        if not isinstance(lvl, str) or lvl.upper() not in VALID_LOG_LEVELS:
            errors.append(f"'log_level' must be one of {sorted(VALID_LOG_LEVELS)}.")

    return errors


# ── Loading ─────────────────────────────────────────────────────────

def read_config_file(config_path: str) -> dict:
    path = Path(config_path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError([f"Invalid JSON in {config_path}: {e}"]) from e
    except FileNotFoundError as e:
        raise ConfigError([f"Config file not found: {config_path}"]) from e
    if not isinstance(data, dict):
        raise ConfigError([f"{config_path} must contain a JSON object."])
    return data


def read_env(environ: dict[str, str] | None = None) -> dict:
    environ = os.environ if environ is None else environ
    values: dict = {}
    errors: list[str] = []
    for name, convert in _ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is None or raw == "":
            continue
        try:
            values[name] = convert(raw)
        except ValueError:
            errors.append(f"{ENV_PREFIX}{name.upper()}={raw!r} is not a valid {name}.")
    if errors:
        raise ConfigError(errors)
    return values


def load_config(
    config_path: str | None = None,
    overrides: dict | None = None,
    environ: dict[str, str] | None = None,
) -> BuildConfig:
    """Layer defaults, the optional JSON file, env vars and overrides.

    ``None`` values in ``overrides`` are ignored so CLI options that were
    not given do not mask lower layers.
    """
    merged: dict = {}
    if config_path:
        merged.update(read_config_file(config_path))
    merged.update(read_env(environ))
    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    errors = validate_config(merged)
    if errors:
        raise ConfigError(errors)

    if "log_level" in merged:
        merged["log_level"] = merged["log_level"].upper()
    return replace(BuildConfig(), **merged)
