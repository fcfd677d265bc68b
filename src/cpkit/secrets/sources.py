# src/cpkit/secrets/sources.py

from __future__ import annotations
from typing import Protocol, Optional, Dict, Iterable, List, Union
import getpass
import logging
import os

import keyring as _keyring
from keyring.errors import KeyringError

from cpkit.secrets.secret import Secret
from cpkit.utils.membership import contains

log = logging.getLogger(__name__)


class SecretSource(Protocol):
    def get(self, service: str) -> Optional[str]: ...


class EnvSource:
    """Exact variable name first, then <SERVICE>_API_KEY for bare service names."""

    def get(self, service: str) -> Optional[str]:
        names = [service]
        if not service.upper().endswith("_API_KEY"):
            names.append(f"{service.upper()}_API_KEY")
        for name in names:
            val = os.getenv(name)
            if val:
                return val.strip()
        return None


class SystemKeyringSource:
    def get(self, service: str) -> Optional[str]:
        if hasattr(_keyring, "get_credential"):
            try:
                cred = _keyring.get_credential(service, None)  # type: ignore[arg-type]
                if cred and getattr(cred, "password", None):
                    return cred.password.strip()
            except KeyringError as e:
                log.debug("keyring credential lookup for %s failed: %s", service, e)
        accounts = ["API_KEY", "default", service]
        try:
            accounts.append(getpass.getuser())
        except (KeyError, OSError):
            pass  # no login name in some containers
        for account in accounts:
            try:
                val = _keyring.get_password(service, account)
            except KeyringError as e:
                log.debug("keyring lookup %s/%s failed: %s", service, account, e)
                continue
            if val:
                return val.strip()
        return None


_ALLOWED_METHODS = {"env", "keyring"}


def normalise_methods(method: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(method, str):
        methods = [method]
    else:
        methods = list(method)
    norm = []
    for m in methods:
        key = str(m).strip().lower()
        if not contains(_ALLOWED_METHODS, key):
            raise ValueError(f"Unknown secrets method '{m}'. Allowed: {sorted(_ALLOWED_METHODS)}")
        if key not in norm:
            norm.append(key)
    return norm


def build_secret_sources(method: Union[str, Iterable[str]]) -> List[SecretSource]:
    sources: List[SecretSource] = []
    for name in normalise_methods(method):
        if name == "env":
            sources.append(EnvSource())
        elif name == "keyring":
            sources.append(SystemKeyringSource())
    return sources


class SecretsResolver:
    """
    Resolve secrets using one or more methods in order.
    mapping: per-integration map of names -> service/env-key
      e.g. { "stackstorm": { "api_key": "ST2_API_KEY" } }
    Results come back wrapped in Secret; an unresolved secret is an empty Secret.
    """
    def __init__(self, method: Union[str, Iterable[str]], mapping: Dict[str, Dict[str, str]] | None = None):
        self._sources = build_secret_sources(method)
        self._map = mapping or {}

    def secret(self, integration: str, name: str = "api_key") -> Secret:
        service = self._map.get(integration, {}).get(name, integration)
        for src in self._sources:
            val = src.get(service)
            if val:
                log.debug("resolved %s.%s via %s", integration, name, type(src).__name__)
                return Secret(val)
        return Secret("")
