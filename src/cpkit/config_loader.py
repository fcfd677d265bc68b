# src/cpkit/config_loader.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from cpkit.secrets.secret import Secret
from cpkit.secrets.sources import normalise_methods


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class StackStormConfiguration:
    """Where and how to forward requests to a StackStorm instance."""
    host: str
    rule: Optional[str] = None
    api_key: Secret = field(default_factory=Secret, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"host": self.host}
        if self.rule:
            out["rule"] = self.rule
        out["apiKey"] = self.api_key
        return out

    def with_api_key(self, api_key: Secret) -> "StackStormConfiguration":
        return StackStormConfiguration(host=self.host, rule=self.rule, api_key=api_key)


def _require(d: Dict[str, Any], dotted: str, typ: type) -> Any:
    cur: Any = d
    for k in dotted.split("."):
        if not isinstance(cur, dict) or k not in cur:
            raise ConfigError(f"Missing config key: {dotted}")
        cur = cur[k]
    if typ is str and not isinstance(cur, str):
        raise ConfigError(f"'{dotted}' must be a string")
    if typ is dict and not isinstance(cur, dict):
        raise ConfigError(f"'{dotted}' must be a mapping")
    return cur


def _optional_str(section: Dict[str, Any], key: str, dotted: str) -> Optional[str]:
    val = section.get(key)
    if val is None:
        return None
    if not isinstance(val, str):
        raise ConfigError(f"'{dotted}' must be a string")
    return val


def parse_stackstorm(raw: Dict[str, Any]) -> StackStormConfiguration:
    section = _require(raw, "stackstorm", dict)
    host = _require(raw, "stackstorm.host", str).strip()
    if not host:
        raise ConfigError("'stackstorm.host' must not be empty")
    rule = _optional_str(section, "rule", "stackstorm.rule")
    api_key = _optional_str(section, "apiKey", "stackstorm.apiKey")
    return StackStormConfiguration(host=host, rule=rule, api_key=Secret(api_key or ""))


def load_config(path: Path) -> Dict[str, Any]:
    if not path or not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"Config is empty or invalid YAML: {path}")

    raw["stackstorm"] = parse_stackstorm(raw)

    secrets_cfg = raw.get("secrets") or {}
    if not isinstance(secrets_cfg, dict):
        raise ConfigError("'secrets' must be a mapping")
    try:
        methods = normalise_methods(secrets_cfg.get("method", "env"))
    except ValueError as e:
        raise ConfigError(str(e)) from e
    mapping = secrets_cfg.get("mapping") or {}
    if not isinstance(mapping, dict):
        raise ConfigError("'secrets.mapping' must be a mapping")
    raw["secrets"] = {"method": methods, "mapping": mapping}

    return raw


def redacted_view(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Config as plain data; Secret values stay wrapped so the dumpers redact them."""
    out = dict(cfg)
    st2 = out.get("stackstorm")
    if isinstance(st2, StackStormConfiguration):
        out["stackstorm"] = st2.to_dict()
    return out
