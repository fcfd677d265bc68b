from __future__ import annotations
import errno
import logging
import socket
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

log = logging.getLogger(__name__)

OP_DIAL = "dial"
OP_READ = "read"
OP_WRITE = "write"
OP_OTHER = "other"
OPS = (OP_DIAL, OP_READ, OP_WRITE, OP_OTHER)


@dataclass(frozen=True)
class NetworkFailure:
    """
    Transport-level failure as seen by the classifier.
    timeout: the operation timed out
    op: 'dial' | 'read' | 'write' | 'other' (None if unknown)
    code: OS errno name, e.g. 'ECONNREFUSED' (None if unknown)
    """
    timeout: bool = False
    op: Optional[str] = None
    code: Optional[str] = None


Rule = Tuple[str, Callable[[NetworkFailure], bool], bool]

# Ordered; first matching rule decides. Writes are not assumed idempotent,
# so they fall through to the default.
_RULES: Tuple[Rule, ...] = (
    ("timeout", lambda f: bool(f.timeout), True),
    ("dial", lambda f: f.op == OP_DIAL, False),
    ("read", lambda f: f.op == OP_READ, True),
    ("connection-refused", lambda f: f.code == "ECONNREFUSED", True),
)


def is_retryable(failure: NetworkFailure) -> bool:
    for name, matches, verdict in _RULES:
        if matches(failure):
            log.debug("retry rule %s matched %r -> %s", name, failure, verdict)
            return verdict
    log.debug("no retry rule matched %r -> False", failure)
    return False


def _errno_name(exc: BaseException) -> Optional[str]:
    num = getattr(exc, "errno", None)
    if isinstance(num, int):
        name = errno.errorcode.get(num)
        if name:
            return name
    if isinstance(exc, ConnectionRefusedError):
        return "ECONNREFUSED"
    return None


def failure_from_exception(exc: BaseException, op: Optional[str] = None) -> NetworkFailure:
    """
    Build a NetworkFailure from a Python exception.
    TimeoutError (socket.timeout) or a truthy `timeout` attribute set the flag;
    an `op` attribute on the exception is used when `op` is not given.
    """
    timeout = isinstance(exc, (TimeoutError, socket.timeout)) or getattr(exc, "timeout", False) is True
    if op is None:
        attr = getattr(exc, "op", None)
        op = attr.lower() if isinstance(attr, str) else None
    return NetworkFailure(timeout=timeout, op=op, code=_errno_name(exc))


def is_retryable_error(exc: BaseException, op: Optional[str] = None) -> bool:
    return is_retryable(failure_from_exception(exc, op=op))
