"""
Configuration loader (``hortela.config``).

Responsibility
--------------
Reads an optional YAML file and parses it into a frozen ``HortelaConfig``.
Only the command line consumes configuration; the core functions take
explicit arguments.

File format
-----------
::

    checks:                 # optional, default: every registered check
      - credits_debits_balance
      - isolated_transactions_balance
      - balance_statements
    fail_fast: true         # optional, stop after the first failing check
    log_level: WARNING      # optional, DEBUG/INFO/WARNING/ERROR/CRITICAL

Failure modes
-------------
* Missing file -> ``FileNotFoundError`` propagates.
* Malformed YAML -> ``yaml.YAMLError`` propagates.
* Unknown key, wrong type, bad level -> ``InvalidConfigError``.
* Unknown check key -> ``UnknownCheckError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from hortela.exceptions import InvalidConfigError
from hortela.validation.engine import ALL_CHECKS, resolve_checks

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_KNOWN_KEYS = frozenset({"checks", "fail_fast", "log_level"})


@dataclass(frozen=True)
class HortelaConfig:
    """Run settings for ``hortela check``."""

    checks: tuple[str, ...] = tuple(check.key for check in ALL_CHECKS)
    fail_fast: bool = True
    log_level: str = "WARNING"

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def default_config() -> HortelaConfig:
    return HortelaConfig()


def parse_config(data: dict[str, Any] | None) -> HortelaConfig:
    """
    Build a HortelaConfig from a parsed YAML mapping.

    Missing keys fall back to the defaults; present keys are type-checked.
    """
    if data is None:
        return default_config()
    if not isinstance(data, dict):
        raise InvalidConfigError("<root>", f"expected a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise InvalidConfigError(unknown[0], "unknown configuration key")

    defaults = default_config()

    checks = data.get("checks", list(defaults.checks))
    if not isinstance(checks, list) or not all(isinstance(c, str) for c in checks):
        raise InvalidConfigError("checks", "expected a list of check names")
    resolved = tuple(check.key for check in resolve_checks(checks))

    fail_fast = data.get("fail_fast", defaults.fail_fast)
    if not isinstance(fail_fast, bool):
        raise InvalidConfigError("fail_fast", "expected true or false")

    log_level = data.get("log_level", defaults.log_level)
    if not isinstance(log_level, str) or log_level.upper() not in _LOG_LEVELS:
        raise InvalidConfigError("log_level", f"expected one of {', '.join(_LOG_LEVELS)}")

    return HortelaConfig(checks=resolved, fail_fast=fail_fast, log_level=log_level.upper())


def load_config(path: Path | str) -> HortelaConfig:
    """Load and parse a YAML configuration file."""
    with open(path) as f:
        return parse_config(yaml.safe_load(f))
