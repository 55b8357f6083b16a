"""Start the local dev server and discover the port it listens on.

The child reports its port either on an inherited pipe or by writing a port
file. Both channels and the child's exit are raced; the first to produce a
result wins and the others are cancelled.
"""

from __future__ import annotations

import logging
import os
import queue
import secrets
import select
import signal
import subprocess
import sys
import tempfile
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from caravan.constants.devserver import (
    DEV_SERVER_MODULE,
    ENTRYPOINT_ENV,
    PIPE_POLL_SECONDS,
    PORT_FD_ENV,
    PORT_FILE_ENV,
    PORT_FILE_POLL_SECONDS,
    PORT_FILE_PREFIX,
    PROCESS_POLL_SECONDS,
)
from caravan.exceptions import DevServerStartError

logger = logging.getLogger(__name__)

Signal: TypeAlias = Callable[[threading.Event], object | None]


@dataclass(frozen=True)
class PortInfo:
    port: int


@dataclass(frozen=True)
class ProcessExit:
    returncode: int | None
    signal_name: str | None


@dataclass(frozen=True)
class DevServer:
    """A running dev server child process."""

    port: int
    pid: int
    process: subprocess.Popen[bytes]


def first_completed(signals: Sequence[Signal]) -> object:
    """Run every signal on its own thread and return the first non-``None`` result.

    Each signal receives a shared cancel event and must return promptly once it
    is set. The event is set as soon as a winner is known, and all threads are
    joined before returning. An exception raised by a signal before any result
    arrives is re-raised.
    """
    cancel = threading.Event()
    outcomes: queue.Queue[tuple[object | None, Exception | None]] = queue.Queue()

    def run(signal_fn: Signal) -> None:
        try:
            outcomes.put((signal_fn(cancel), None))
        except Exception as exc:
            outcomes.put((None, exc))

    threads = [threading.Thread(target=run, args=(signal_fn,), daemon=True) for signal_fn in signals]
    for thread in threads:
        thread.start()

    try:
        for _ in threads:
            value, error = outcomes.get()
            if error is not None:
                raise error
            if value is not None:
                return value
        raise RuntimeError("Every signal finished without a result")
    finally:
        cancel.set()
        for thread in threads:
            thread.join()


def port_from_pipe(fd: int) -> Signal:
    """Signal that resolves with the first port number written to ``fd``."""

    def wait(cancel: threading.Event) -> PortInfo | None:
        while not cancel.is_set():
            ready, _, _ = select.select([fd], [], [], PIPE_POLL_SECONDS)
            if not ready:
                continue
            data = os.read(fd, 64)
            if not data:
                return None
            return PortInfo(port=int(data.decode("ascii").strip()))
        return None

    return wait


def port_from_file(path: Path) -> Signal:
    """Signal that polls for ``path`` and resolves with the port it contains."""

    def wait(cancel: threading.Event) -> PortInfo | None:
        while not cancel.wait(PORT_FILE_POLL_SECONDS):
            try:
                text = path.read_text(encoding="ascii").strip()
            except FileNotFoundError:
                continue
            if not text:
                continue
            try:
                path.unlink()
            except OSError:
                logger.error("Could not delete port file: %s", path)
            return PortInfo(port=int(text))
        return None

    return wait


def process_exit(process: subprocess.Popen[bytes]) -> Signal:
    """Signal that resolves when ``process`` exits."""

    def wait(cancel: threading.Event) -> ProcessExit | None:
        while not cancel.is_set():
            returncode = process.poll()
            if returncode is not None:
                return ProcessExit(returncode=returncode, signal_name=_signal_name(returncode))
            cancel.wait(PROCESS_POLL_SECONDS)
        return None

    return wait


def start_dev_server(entrypoint: str, work_path: Path, *, env: Mapping[str, str] | None = None) -> DevServer:
    """Spawn the dev server for ``entrypoint`` and wait until it reports a port."""
    port_file = Path(tempfile.gettempdir()) / f"{PORT_FILE_PREFIX}{secrets.token_hex(8)}"
    read_fd, write_fd = os.pipe()
    child_env = {
        **os.environ,
        **(env or {}),
        ENTRYPOINT_ENV: str(work_path / entrypoint),
        PORT_FILE_ENV: str(port_file),
        PORT_FD_ENV: str(write_fd),
    }

    try:
        process = subprocess.Popen(
            [sys.executable, "-m", DEV_SERVER_MODULE],
            cwd=work_path,
            env=child_env,
            pass_fds=(write_fd,),
        )
    finally:
        os.close(write_fd)

    try:
        result = first_completed([port_from_pipe(read_fd), port_from_file(port_file), process_exit(process)])
    finally:
        os.close(read_fd)

    if isinstance(result, ProcessExit):
        raise DevServerStartError(entrypoint, result.returncode, result.signal_name)
    assert isinstance(result, PortInfo)
    logger.info("Dev server for %s listening on port %d (pid %d)", entrypoint, result.port, process.pid)
    return DevServer(port=result.port, pid=process.pid, process=process)


def _signal_name(returncode: int) -> str | None:
    if returncode >= 0:
        return None
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return None
