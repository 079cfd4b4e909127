"""TOML config loading for rat25f.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rat25f.grammar import STATEMENT_RULES, Rule
from rat25f.trace import ParserPolicy, TraceConfig

CONFIG_NAME = "rat25f.toml"


def _driver_trace() -> TraceConfig:
    # The batch driver shows epsilon productions; the library default hides them.
    return TraceConfig(hide_epsilon=False)


@dataclass
class CheckerConfig:
    trace: TraceConfig = field(default_factory=_driver_trace)
    policy: ParserPolicy = field(default_factory=ParserPolicy)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find rat25f.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data[name]
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table")
    return section


def _flag(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"[{name}] {key} must be true or false, got {value!r}")
    return value


def _parse_rules(names: Any) -> frozenset[Rule]:
    if not isinstance(names, list):
        raise ValueError("[trace] rules must be a list of rule names")
    return frozenset(Rule.lookup(str(name)) for name in names)


def load_config(path: Path) -> CheckerConfig:
    """Parse a rat25f.toml file into a CheckerConfig. Raises ValueError on bad values."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = CheckerConfig()
    defaults = config.trace

    if "trace" in data:
        trc = _section(data, "trace")
        rules = _parse_rules(trc["rules"]) if "rules" in trc else STATEMENT_RULES
        config.trace = TraceConfig(
            enabled=_flag(trc, "trace", "enabled", defaults.enabled),
            hide_epsilon=_flag(trc, "trace", "hide_epsilon", defaults.hide_epsilon),
            hide_optional=_flag(trc, "trace", "hide_optional", defaults.hide_optional),
            hide_scaffolding=_flag(
                trc, "trace", "hide_scaffolding", defaults.hide_scaffolding,
            ),
            rules=rules,
        )

    if "policy" in data:
        pol = _section(data, "policy")
        config.policy = ParserPolicy(
            echo_tokens=_flag(pol, "policy", "echo_tokens", True),
            lenient_keywords=_flag(pol, "policy", "lenient_keywords", True),
            string_primary=_flag(pol, "policy", "string_primary", True),
        )

    return config


def resolve_config(explicit: Path | None, near: Path | None = None) -> CheckerConfig:
    """Load an explicit config, else the nearest rat25f.toml, else defaults."""
    if explicit is not None:
        return load_config(explicit)
    try:
        return load_config(find_config(near))
    except FileNotFoundError:
        return CheckerConfig()
