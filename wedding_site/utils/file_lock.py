import json
import logging
import os
import sys
import tempfile
import threading
from pathlib import Path
from contextlib import contextmanager, suppress

logger = logging.getLogger(__name__)

# Cross-platform file locking
if sys.platform == "win32":
    import msvcrt

    def _lock_shared(f):
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)

    def _lock_exclusive(f):
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)

    def _unlock(f):
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
else:
    import fcntl

    def _lock_shared(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)

    def _lock_exclusive(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)

    def _unlock(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


# One lock per file for threads of this process; flock covers other processes.
_thread_locks = {}
_thread_locks_guard = threading.Lock()


def _thread_lock(filepath):
    key = str(filepath)
    with _thread_locks_guard:
        lock = _thread_locks.get(key)
        if lock is None:
            lock = _thread_locks[key] = threading.Lock()
        return lock


def _reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text, **kwargs):
    """json.loads that refuses NaN/Infinity so stored files stay strict JSON."""
    return json.loads(text, parse_constant=_reject_constant, **kwargs)


def _load_array(content, filepath):
    """Decode a stored array from raw bytes; anything unreadable counts as no entries."""
    content = content.strip()
    if not content:
        return []
    try:
        # bytes in, so bad UTF-8 surfaces here as UnicodeDecodeError
        data = parse_json(content)
    except ValueError:
        logger.warning("Discarding unreadable JSON in %s", filepath)
        return []
    if not isinstance(data, list):
        logger.warning("Discarding non-array JSON in %s", filepath)
        return []
    return data


def _lock_path(filepath):
    return filepath.with_name(filepath.name + ".lock")


def _read_bytes(filepath):
    try:
        return filepath.read_bytes()
    except FileNotFoundError:
        return b""


def _replace_contents(filepath, payload):
    """Write payload to a sibling temp file, then swap it in over filepath."""
    fd, tmp_name = tempfile.mkstemp(dir=filepath.parent, prefix=filepath.name + ".", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, filepath)
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


@contextmanager
def locked_json_write(filepath):
    """Read-modify-write a JSON array file under an exclusive lock.

    Usage:
        with locked_json_write('data.json') as data:
            data.append(new_item)
        # File is written on context exit

    Parent directories are created on first use; the file itself only
    appears once a write succeeds. Nothing is written if the block raises.
    """
    filepath = Path(filepath)
    with _thread_lock(filepath):
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(_lock_path(filepath), "a+b") as lock:
            _lock_exclusive(lock)
            try:
                data = _load_array(_read_bytes(filepath), filepath)
                yield data
                payload = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
                _replace_contents(filepath, payload.encode("utf-8"))
            finally:
                _unlock(lock)


def read_text(filepath):
    """Read a file's raw text under a shared lock. Returns None if it is missing."""
    filepath = Path(filepath)
    with _thread_lock(filepath):
        if not filepath.exists():
            return None
        with open(_lock_path(filepath), "a+b") as lock:
            _lock_shared(lock)
            try:
                return filepath.read_bytes().decode("utf-8")
            except FileNotFoundError:
                return None
            finally:
                _unlock(lock)
