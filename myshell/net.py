"""TCP client and listener helpers that try every address a name resolves to."""

from __future__ import annotations

import socket

LISTENQ = 1024


def _resolve(host: str | None, port: str, flags: int) -> list[tuple]:
    """Resolve ``host``/``port`` to stream-socket addresses; raises socket.gaierror."""
    return socket.getaddrinfo(
        host,
        port,
        socket.AF_UNSPEC,
        socket.SOCK_STREAM,
        0,
        flags | socket.AI_NUMERICSERV | socket.AI_ADDRCONFIG,
    )


def open_client(hostname: str, port: str | int) -> socket.socket:
    """Connect to ``hostname`` on a numeric ``port`` and return the connected socket.

    Every resolved address is tried in turn. Raises socket.gaierror when the
    name cannot be resolved and OSError when no address accepts the connection.
    """
    last_error: OSError | None = None
    for family, socktype, proto, _canon, address in _resolve(hostname, str(port), 0):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no address to connect to for {hostname}:{port}")


def open_listener(port: str | int) -> socket.socket:
    """Open a listening socket on a numeric ``port`` on any local address.

    The address is made reusable before binding. Raises socket.gaierror when
    the port cannot be resolved and OSError when no address can be bound.
    """
    last_error: OSError | None = None
    for family, socktype, proto, _canon, address in _resolve(None, str(port), socket.AI_PASSIVE):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        try:
            sock.listen(LISTENQ)
        except OSError:
            sock.close()
            raise
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no address to listen on for port {port}")