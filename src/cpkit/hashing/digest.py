from __future__ import annotations
import enum
import hashlib
import secrets
from typing import Any, Callable, Dict, Union

from cpkit.core.errors import EntropyUnavailable, UnsupportedAlgorithm

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF

TOKEN_BYTES = 16


class Algorithm(str, enum.Enum):
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"
    FNV64A = "fnv64a"


AlgorithmLike = Union[Algorithm, str]

_CRYPTO: Dict[Algorithm, Callable[[bytes], Any]] = {
    Algorithm.MD5: hashlib.md5,
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def resolve_algorithm(selector: AlgorithmLike) -> Algorithm:
    if isinstance(selector, Algorithm):
        return selector
    if isinstance(selector, str):
        try:
            return Algorithm(selector.strip().lower())
        except ValueError:
            pass
    allowed = [a.value for a in Algorithm]
    raise UnsupportedAlgorithm(f"Unsupported algorithm {selector!r}. Allowed: {allowed}")


def hash_fnv(text: str) -> str:
    """
    64-bit FNV-1a of the UTF-8 bytes, as 16 lowercase hex characters.

    Not a cryptographic hash: only use it to shorten identifiers built from
    trusted input, never for secrets or attacker-controlled data.
    """
    h = _FNV64_OFFSET
    for b in text.encode("utf-8"):
        h ^= b
        h = (h * _FNV64_PRIME) & _MASK64
    return f"{h:016x}"


def digest(text: str, algorithm: AlgorithmLike) -> str:
    """
    Hex digest of `text` (UTF-8) with the selected algorithm.
    md5/sha1/sha256/sha512 give 32/40/64/128 hex chars; fnv64a gives 16.
    """
    algo = resolve_algorithm(algorithm)
    if algo is Algorithm.FNV64A:
        return hash_fnv(text)
    return _CRYPTO[algo](text.encode("utf-8")).hexdigest()


def random_token() -> str:
    """32 lowercase hex chars drawn from the OS CSPRNG."""
    try:
        raw = secrets.token_bytes(TOKEN_BYTES)
    except (OSError, NotImplementedError) as e:
        raise EntropyUnavailable(f"Secure random source unavailable: {e}") from e
    return raw.hex()
