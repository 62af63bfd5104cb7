"""
Row ids: "<prefix>_<ns timestamp>_<random>", e.g. msg_01760000000000000000_k3j9x0qa.
The timestamp part is strictly increasing within a process, so ids created
later sort after ids created earlier (used as tie-breaker for equal created_at).
"""
import secrets
import string
import threading
import time

_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LEN = 9

_lock = threading.Lock()
_last_ns = 0


def _next_timestamp() -> int:
    global _last_ns
    with _lock:
        now = time.time_ns()
        if now <= _last_ns:
            now = _last_ns + 1
        _last_ns = now
        return now


def new_id(prefix: str) -> str:
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LEN))
    return f"{prefix}_{_next_timestamp():020d}_{suffix}"
