from __future__ import annotations
import hmac
import json
from typing import Any, Optional

import yaml

REDACTED = "<secret>"


class Secret:
    """
    String wrapper for credentials in configuration.

    Every serialization path (YAML, JSON, repr/str, pickle) emits either
    nothing (empty secret) or the REDACTED marker. Loading the marker back
    does not restore the original value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Optional[str] = "") -> None:
        if isinstance(value, Secret):
            value = value._value
        self._value = value or ""

    def is_empty(self) -> bool:
        return self._value == ""

    # Serialization hooks

    def to_yaml(self) -> Optional[str]:
        return None if self.is_empty() else REDACTED

    def to_json(self) -> Optional[str]:
        return None if self.is_empty() else REDACTED

    # Comparisons stay internal; the value itself never leaves the object

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret):
            other = other._value
        if not isinstance(other, str):
            return NotImplemented
        return hmac.compare_digest(self._value.encode("utf-8"), other.encode("utf-8"))

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    # equal to plain strings, so it cannot hash consistently; not usable as a key
    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._value)

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        return "Secret('')" if self.is_empty() else f"Secret('{REDACTED}')"

    def __str__(self) -> str:
        return "" if self.is_empty() else REDACTED

    def __reduce__(self):
        return (Secret, (self.to_json() or "",))

    # Immutable: copies share the wrapped value instead of going through __reduce__
    def __copy__(self) -> "Secret":
        return self

    def __deepcopy__(self, memo) -> "Secret":
        return self


class SecretDumper(yaml.SafeDumper):
    """SafeDumper that knows how to redact Secret values."""


def _represent_secret(dumper: yaml.SafeDumper, data: Secret) -> yaml.Node:
    out = data.to_yaml()
    if out is None:
        return dumper.represent_none(None)
    return dumper.represent_str(out)


SecretDumper.add_representer(Secret, _represent_secret)


class SecretEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, Secret):
            return o.to_json()
        return super().default(o)


def dump_yaml(data: Any) -> str:
    return yaml.dump(data, Dumper=SecretDumper, sort_keys=False, default_flow_style=False)


def dump_json(data: Any, **kwargs: Any) -> str:
    return json.dumps(data, cls=SecretEncoder, **kwargs)
