# tests/unit/test_bootstrap.py

from __future__ import annotations
import sys
from pathlib import Path

# Ensure "src" is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from cpkit.bootstrap import build_app


def _write(tmp_path: Path, body: str) -> Path:
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir(parents=True)
    cfg = cfg_dir / "default.yaml"
    cfg.write_text(body, encoding="utf-8")
    return cfg


def test_build_app_fills_api_key_from_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ST2_API_KEY", "k-env")
    cfg = _write(
        tmp_path,
        """
stackstorm:
  host: https://st2.local
secrets:
  method: env
  mapping:
    stackstorm:
      api_key: ST2_API_KEY
""",
    )

    ctx = build_app(cfg)

    assert ctx["stackstorm"].api_key == "k-env"
    assert ctx["cfg"]["stackstorm"] is ctx["stackstorm"]
    assert ctx["paths"]["config_dir"] == cfg.resolve().parent


def test_build_app_keeps_file_key(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ST2_API_KEY", "k-env")
    cfg = _write(
        tmp_path,
        """
stackstorm:
  host: st2
  apiKey: k-file
secrets:
  mapping: { stackstorm: { api_key: ST2_API_KEY } }
""",
    )
    assert build_app(cfg)["stackstorm"].api_key == "k-file"


def test_build_app_warns_when_unresolved(tmp_path: Path, monkeypatch, caplog):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CPKIT_TEST_MISSING", raising=False)
    cfg = _write(
        tmp_path,
        """
stackstorm: { host: st2 }
secrets: { method: env, mapping: { stackstorm: { api_key: CPKIT_TEST_MISSING } } }
""",
    )
    monkeypatch.delenv("CPKIT_TEST_MISSING_API_KEY", raising=False)
    with caplog.at_level("WARNING", logger="cpkit.bootstrap"):
        ctx = build_app(cfg)
    assert ctx["stackstorm"].api_key.is_empty()
    assert "No API key" in caplog.text


def test_build_app_reads_dotenv_from_working_dir(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    # registers the variable so whatever load_dotenv sets is undone afterwards
    monkeypatch.setenv("CPKIT_TEST_DOTENV_KEY", "")
    monkeypatch.delenv("CPKIT_TEST_DOTENV_KEY")
    (tmp_path / ".env").write_text("CPKIT_TEST_DOTENV_KEY=k-dotenv\n", encoding="utf-8")
    cfg = _write(
        tmp_path,
        """
stackstorm: { host: st2 }
secrets: { method: env, mapping: { stackstorm: { api_key: CPKIT_TEST_DOTENV_KEY } } }
""",
    )
    assert build_app(cfg)["stackstorm"].api_key == "k-dotenv"
