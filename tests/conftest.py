from __future__ import annotations

import os

import pytest

try:
    from pytest_socket import disable_socket, enable_socket, socket_allow_hosts
except Exception:  # pragma: no cover - pytest_socket optional in some environments
    disable_socket = enable_socket = None  # type: ignore[assignment]
    socket_allow_hosts = None  # type: ignore[assignment]


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "network: test talks to live local services")
    config.addinivalue_line(
        "markers", "integration: needs Fedora, the message consumer and a Fuseki install"
    )


@pytest.fixture(autouse=True)
def _disable_network(request: pytest.FixtureRequest):
    """Block sockets except for tests marked ``network`` or ``integration``."""

    if os.getenv("PYTEST_ALLOW_NETWORK", "0") == "1" or not (
        disable_socket and enable_socket
    ):
        yield
        return

    allow_marker = request.node.get_closest_marker("network") or request.node.get_closest_marker(
        "integration"
    )
    if allow_marker:
        # Left enabled afterwards: module fixtures stop Fuseki after the last test.
        if socket_allow_hosts:
            socket_allow_hosts(["127.0.0.1", "::1"])
        enable_socket()
        yield
    else:
        disable_socket()
        try:
            yield
        finally:
            enable_socket()
