from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import logging

from dotenv import find_dotenv, load_dotenv

from .config_loader import load_config
from .secrets.sources import SecretsResolver

log = logging.getLogger(__name__)


def build_app(config_path: Path) -> Dict[str, Any]:
    """
    Composition root: load .env (searched from the working directory) and YAML,
    then fill a missing StackStorm API key from the configured secret sources.
    Returns: dict with cfg, stackstorm, paths.
    """
    load_dotenv(find_dotenv(usecwd=True))
    cfg = load_config(config_path)
    config_dir = config_path.resolve().parent

    st2 = cfg["stackstorm"]
    if st2.api_key.is_empty():
        secrets_cfg = cfg["secrets"]
        resolver = SecretsResolver(method=secrets_cfg["method"], mapping=secrets_cfg["mapping"])
        api_key = resolver.secret("stackstorm", "api_key")
        if api_key.is_empty():
            log.warning("No API key for StackStorm at %s; requests will be unauthenticated", st2.host)
        else:
            st2 = st2.with_api_key(api_key)
            cfg["stackstorm"] = st2

    return {
        "cfg": cfg,
        "stackstorm": st2,
        "paths": {"config_dir": config_dir},
    }
