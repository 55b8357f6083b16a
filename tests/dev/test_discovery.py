"""Tests for dev server port discovery."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from pathlib import Path

import pytest
import requests

from caravan.constants.devserver import PORT_FD_ENV, PORT_FILE_ENV
from caravan.dev import first_completed, start_dev_server
from caravan.dev.discovery import PortInfo, ProcessExit, port_from_file, port_from_pipe, process_exit
from caravan.dev.server import report_port
from caravan.exceptions import DevServerStartError


def _wait_for_cancel(cancel: threading.Event) -> object | None:
    cancel.wait()
    return None


def test_first_completed_returns_winner_and_cancels_others() -> None:
    cancelled = threading.Event()

    def slow(cancel: threading.Event) -> object | None:
        cancel.wait()
        cancelled.set()
        return None

    def fast(cancel: threading.Event) -> object | None:
        return "winner"

    assert first_completed([slow, fast]) == "winner"
    assert cancelled.is_set()


def test_first_completed_skips_empty_results() -> None:
    assert first_completed([lambda cancel: None, lambda cancel: 7]) == 7


def test_first_completed_reraises_signal_errors() -> None:
    def broken(cancel: threading.Event) -> object | None:
        raise OSError("pipe closed")

    with pytest.raises(OSError, match="pipe closed"):
        first_completed([broken, _wait_for_cancel])


def test_first_completed_without_any_result() -> None:
    with pytest.raises(RuntimeError, match="without a result"):
        first_completed([lambda cancel: None])


def test_port_from_pipe_reads_reported_port() -> None:
    read_fd, write_fd = os.pipe()
    try:
        report_port(4567, {PORT_FD_ENV: str(write_fd)})
        assert port_from_pipe(read_fd)(threading.Event()) == PortInfo(port=4567)
    finally:
        os.close(read_fd)


def test_port_from_file_reads_and_deletes_file(tmp_path: Path) -> None:
    port_file = tmp_path / "port"
    report_port(8123, {PORT_FILE_ENV: str(port_file)})

    assert port_from_file(port_file)(threading.Event()) == PortInfo(port=8123)
    assert not port_file.exists()


def test_process_exit_reports_return_code() -> None:
    process = subprocess.Popen([sys.executable, "-c", "raise SystemExit(4)"])

    assert process_exit(process)(threading.Event()) == ProcessExit(returncode=4, signal_name=None)


def test_start_dev_server_serves_handler(tmp_path: Path) -> None:
    (tmp_path / "api").mkdir()
    (tmp_path / "api" / "hello.py").write_text(
        "from werkzeug.wrappers import Response\n\n"
        "def handler(request):\n"
        "    return Response(f'hello from {request.path}')\n",
        encoding="utf-8",
    )

    server = start_dev_server("api/hello.py", tmp_path)
    try:
        response = requests.get(f"http://127.0.0.1:{server.port}/api/hello", timeout=5)
        assert response.status_code == 200
        assert response.text == "hello from /api/hello"
    finally:
        server.process.terminate()
        server.process.wait(timeout=5)


def test_start_dev_server_reports_child_exit(tmp_path: Path) -> None:
    (tmp_path / "api").mkdir()
    (tmp_path / "api" / "broken.py").write_text("raise RuntimeError('cannot import')\n", encoding="utf-8")

    with pytest.raises(DevServerStartError, match='Failed to start dev server for "api/broken.py"'):
        start_dev_server("api/broken.py", tmp_path)
