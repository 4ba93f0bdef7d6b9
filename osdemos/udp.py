"""Datagram helpers plus a tiny echo-style client and server built on them."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

__all__ = [
    "BUFFER_SIZE",
    "udp_open",
    "fill_sock_addr",
    "udp_write",
    "udp_read",
    "run_client",
    "serve",
    "client_main",
    "server_main",
]

BUFFER_SIZE = 1000

Address = tuple[str, int]


def udp_open(port: int) -> socket.socket:
    """Create a UDP socket bound to ``port`` on every local interface."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind(("0.0.0.0", port))
    except OSError:
        sock.close()
        raise
    return sock


def fill_sock_addr(hostname: str | None, port: int) -> Address:
    """Resolve ``hostname`` to an IPv4 address paired with ``port``.

    With no hostname the cleared address ``("0.0.0.0", 0)`` is returned.
    Resolution failures raise :class:`OSError`.
    """
    if hostname is None:
        return ("0.0.0.0", 0)
    return (socket.gethostbyname(hostname), port)


def udp_write(sock: socket.socket, addr: Address, data: bytes | str, size: int) -> int:
    """Send exactly ``size`` bytes: ``data`` cut or padded with NULs."""
    payload = data.encode() if isinstance(data, str) else bytes(data)
    payload = payload[:size].ljust(size, b"\0")
    return sock.sendto(payload, addr)


def udp_read(sock: socket.socket, size: int) -> tuple[bytes, Address]:
    """Receive one datagram of at most ``size`` bytes and its sender."""
    data, addr = sock.recvfrom(size)
    return data, addr


def _cstring(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def run_client(sock: socket.socket, server_addr: Address, out: TextIO | None = None) -> str:
    """Send a greeting to the server and return the text of its reply."""
    stream = _stream(out)
    message = "hello world"
    stream.write(f"client:: send message [{message}]\n")
    udp_write(sock, server_addr, message, BUFFER_SIZE)
    stream.write("client:: wait for reply...\n")
    data, _ = udp_read(sock, BUFFER_SIZE)
    reply = _cstring(data)
    stream.write(f"client:: got reply [size:{len(data)} contents:({reply})\n")
    return reply


def serve(
    sock: socket.socket, out: TextIO | None = None, max_messages: int | None = None
) -> int:
    """Answer each datagram with a farewell; stop after ``max_messages`` if given.

    Returns the number of datagrams read.
    """
    stream = _stream(out)
    count = 0
    while max_messages is None or count < max_messages:
        stream.write("server:: waiting...\n")
        data, addr = udp_read(sock, BUFFER_SIZE)
        stream.write(
            f"server:: read message [size:{len(data)} contents:({_cstring(data)})]\n"
        )
        if data:
            udp_write(sock, addr, "goodbye world", BUFFER_SIZE)
            stream.write("server:: reply\n")
        count += 1
    return count


def client_main(argv: list[str] | None = None) -> int:
    """Command line for the client."""
    parser = argparse.ArgumentParser(prog="udp-client", description="Send one datagram.")
    parser.add_argument("--port", type=int, default=20000, help="local port")
    parser.add_argument("--server-host", default="localhost")
    parser.add_argument("--server-port", type=int, default=10000)
    args = parser.parse_args(argv)

    with udp_open(args.port) as sock:
        addr = fill_sock_addr(args.server_host, args.server_port)
        try:
            run_client(sock, addr)
        except OSError as exc:
            sys.stdout.write("client:: failed to send\n")
            raise SystemExit(1) from exc
    return 0


def server_main(argv: list[str] | None = None) -> int:
    """Command line for the server; runs until interrupted."""
    parser = argparse.ArgumentParser(prog="udp-server", description="Answer datagrams.")
    parser.add_argument("--port", type=int, default=10000, help="port to listen on")
    args = parser.parse_args(argv)

    with udp_open(args.port) as sock:
        serve(sock)
    return 0