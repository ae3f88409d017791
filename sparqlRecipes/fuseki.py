from __future__ import annotations

"""Helpers for launching the in-memory Fuseki server the consumer writes to."""

from pathlib import Path
import contextlib
import socket
import subprocess
import time
from typing import Iterator

import requests

from sparqlRecipes.config import Settings
from sparqlRecipes.errors import SparqlRecipesError
from sparqlRecipes.utils.log_json import JsonLogger

_logger = JsonLogger("fuseki")


class FusekiLaunchError(SparqlRecipesError):
    """Raised when the Fuseki process cannot be started."""


def fuseki_server_path(settings: Settings) -> Path:
    """Return the path of the ``fuseki-server`` launch script."""

    return (Path(settings.fuseki_home) / "fuseki-server").resolve()


def build_fuseki_cmd(port: int, mgt_port: int, dataset: str = "/test") -> list[str]:
    """Build the Fuseki command line; it must run from the Fuseki directory.

    The dataset lives in memory and accepts SPARQL updates so the message
    consumer can write to it.
    """

    return [
        "./fuseki-server",
        "--update",
        "--mem",
        f"--port={port}",
        f"--mgtPort={mgt_port}",
        dataset,
    ]


def _port_in_use(port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(0.5)
            return sock.connect_ex(("localhost", port)) == 0
    except OSError:  # pragma: no cover - sockets unavailable
        return False


def _session() -> requests.Session:
    session = requests.Session()
    session.trust_env = False
    return session


def _terminate(proc: subprocess.Popen, timeout_s: float = 5) -> None:
    """Terminate ``proc`` and kill it if it has not exited after ``timeout_s``."""

    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=timeout_s)
    except subprocess.TimeoutExpired:
        _logger.warning("fuseki.kill", process=proc.pid, timeout_s=timeout_s)
        proc.kill()
        proc.wait()


def wait_until_ready(url: str, timeout_s: float = 30, proc: subprocess.Popen | None = None) -> None:
    """Poll ``url`` until Fuseki answers 200 or ``timeout_s`` elapses."""

    deadline = time.time() + timeout_s
    delay = 0.1
    with _session() as session:
        while time.time() < deadline:
            if proc is not None and proc.poll() is not None:
                raise FusekiLaunchError("Fuseki process exited prematurely")
            try:
                with session.get(url, timeout=2) as resp:
                    if resp.status_code == 200:
                        return
            except requests.RequestException:
                pass
            time.sleep(delay)
            delay = min(delay * 1.5, 1.0)
    raise FusekiLaunchError("Fuseki server did not become ready in time")


def start_fuseki(settings: Settings, wait: bool = True) -> subprocess.Popen:
    """Start Fuseki on the configured ports serving an in-memory dataset.

    If ``wait`` is True the function blocks until the server answers or
    ``settings.startup_wait_s`` elapses. A ``FusekiLaunchError`` is raised
    on failure, when the launch script is missing or when either port is
    already taken.
    """

    server = fuseki_server_path(settings)
    if not server.is_file():
        raise FusekiLaunchError(f"Fuseki launch script not found: {server}")
    for port in (settings.fuseki_port, settings.fuseki_mgt_port):
        if _port_in_use(port):
            raise FusekiLaunchError(f"Port {port} already in use")

    cmd = build_fuseki_cmd(settings.fuseki_port, settings.fuseki_mgt_port, settings.fuseki_dataset)
    _logger.info("fuseki.start", url=settings.fuseki_base_url, cmd=" ".join(cmd), cwd=str(server.parent))
    proc = subprocess.Popen(cmd, shell=False, cwd=server.parent)

    if not wait:
        return proc

    try:
        wait_until_ready(settings.fuseki_base_url, timeout_s=settings.startup_wait_s, proc=proc)
    except FusekiLaunchError:
        _terminate(proc)
        _logger.error("fuseki.start_failed", url=settings.fuseki_base_url)
        raise
    _logger.info("fuseki.ready", url=settings.fuseki_base_url)
    return proc


def stop_fuseki(proc: subprocess.Popen, settings: Settings, timeout_s: float = 5) -> None:
    """Ask Fuseki to shut down through its management port, then kill it."""

    try:
        with _session() as session:
            session.post(
                settings.management_url,
                params={"cmd": "shutdown"},
                timeout=settings.http_timeout_s,
            ).close()
    except requests.RequestException as exc:
        _logger.warning("fuseki.shutdown_request_failed", url=settings.management_url, error=str(exc))
    _terminate(proc, timeout_s)
    _logger.info("fuseki.stopped", url=settings.fuseki_base_url)


@contextlib.contextmanager
def running_fuseki(settings: Settings) -> Iterator[subprocess.Popen]:
    """Context manager to start and stop Fuseki."""

    proc = start_fuseki(settings, wait=True)
    try:
        yield proc
    finally:
        stop_fuseki(proc, settings)


__all__ = [
    "FusekiLaunchError",
    "build_fuseki_cmd",
    "fuseki_server_path",
    "running_fuseki",
    "start_fuseki",
    "stop_fuseki",
    "wait_until_ready",
]
