# tests/unit/test_secrets_sources.py

from __future__ import annotations
import sys
from pathlib import Path
import pytest

# Make "src" importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from cpkit.secrets.secret import Secret
from cpkit.secrets.sources import (
    SecretsResolver,
    build_secret_sources,
)


def test_method_string_and_list(monkeypatch):
    # exact env var name via mapping
    monkeypatch.setenv("ST2_API_KEY", "k-env")
    r1 = SecretsResolver(method="env", mapping={"stackstorm": {"api_key": "ST2_API_KEY"}})
    got = r1.secret("stackstorm")
    assert isinstance(got, Secret)
    assert got == "k-env"

    # service name -> derived env var
    monkeypatch.setenv("STACKSTORM_API_KEY", "k-derived")
    r2 = SecretsResolver(method=["env"], mapping={})
    assert r2.secret("stackstorm") == "k-derived"


def test_unresolved_secret_is_empty(monkeypatch):
    monkeypatch.delenv("NOPE_API_KEY", raising=False)
    monkeypatch.delenv("NOPE", raising=False)
    assert SecretsResolver(method="env").secret("nope").is_empty()


def test_unknown_method_raises():
    with pytest.raises(ValueError):
        build_secret_sources("nope")


def test_duplicate_methods_collapse():
    assert len(build_secret_sources(["env", "ENV", "keyring"])) == 2


def test_keyring_then_env(monkeypatch):
    monkeypatch.setenv("STACKSTORM_API_KEY", "k-from-env")

    # Fake keyring that returns a value first
    class FakeKeyring:
        def get_credential(self, service, _):
            class Cred:
                password = "k-from-keyring"
            return Cred()
        def get_password(self, *args, **kwargs):
            return None

    import cpkit.secrets.sources as src
    monkeypatch.setattr(src, "_keyring", FakeKeyring(), raising=True)

    r = SecretsResolver(method=["keyring", "env"])
    assert r.secret("stackstorm") == "k-from-keyring"

    # Now make keyring miss -> env wins
    class KR2:
        def get_credential(self, *_): return None
        def get_password(self, *_): return None
    monkeypatch.setattr(src, "_keyring", KR2(), raising=True)

    r2 = SecretsResolver(method=["keyring", "env"])
    assert r2.secret("stackstorm") == "k-from-env"


def test_keyring_errors_are_skipped(monkeypatch):
    from keyring.errors import KeyringError
    import cpkit.secrets.sources as src

    class Broken:
        def get_credential(self, *_): raise KeyringError("locked")
        def get_password(self, *_): raise KeyringError("locked")
    monkeypatch.setattr(src, "_keyring", Broken(), raising=True)
    assert SecretsResolver(method="keyring").secret("stackstorm").is_empty()


def test_env_source_mapped_name_is_not_suffixed(monkeypatch):
    from cpkit.secrets.sources import EnvSource

    monkeypatch.delenv("ST2_API_KEY", raising=False)
    monkeypatch.setenv("ST2_API_KEY_API_KEY", "wrong")
    assert EnvSource().get("ST2_API_KEY") is None

    monkeypatch.setenv("ST2_API_KEY", " k ")
    assert EnvSource().get("ST2_API_KEY") == "k"
