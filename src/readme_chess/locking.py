"""
Single-flight guard for the workspace.

Invocations are expected to be serialized by whatever triggers them (one
workflow run per issue). The lock makes a second concurrent run wait for the
first instead of interleaving file writes with it.
"""
from __future__ import annotations

import fcntl
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

log = logging.getLogger("locking")


@contextmanager
def single_flight(lock_path: str | os.PathLike) -> Iterator[None]:
    path = Path(lock_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a+") as fh:
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            log.info("Another run holds %s; waiting for it to finish", path)
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
