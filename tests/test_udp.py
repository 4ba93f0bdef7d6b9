import io
import socket
import threading

import pytest

from osdemos.udp import (
    BUFFER_SIZE,
    fill_sock_addr,
    run_client,
    serve,
    udp_open,
    udp_read,
    udp_write,
)


@pytest.fixture
def sockets():
    opened = []

    def make():
        sock = udp_open(0)
        sock.settimeout(5)
        opened.append(sock)
        return sock

    yield make
    for sock in opened:
        sock.close()


def _port(sock):
    return sock.getsockname()[1]


def test_fill_sock_addr_numeric():
    assert fill_sock_addr("127.0.0.1", 4321) == ("127.0.0.1", 4321)


def test_fill_sock_addr_none_clears():
    assert fill_sock_addr(None, 4321) == ("0.0.0.0", 0)


def test_fill_sock_addr_unknown_host():
    with pytest.raises(OSError):
        fill_sock_addr("no-such-host.invalid", 1)


def test_udp_open_port_in_use(sockets):
    first = sockets()
    with pytest.raises(OSError):
        udp_open(_port(first))


def test_write_pads_to_size(sockets):
    a, b = sockets(), sockets()
    sent = udp_write(a, ("127.0.0.1", _port(b)), b"abc", 10)
    assert sent == 10
    data, addr = udp_read(b, 100)
    assert data == b"abc" + b"\0" * 7
    assert addr[1] == _port(a)


def test_write_truncates_to_size(sockets):
    a, b = sockets(), sockets()
    udp_write(a, ("127.0.0.1", _port(b)), "hello world", 5)
    data, _ = udp_read(b, 100)
    assert data == b"hello"


def test_client_server_exchange(sockets):
    server, client = sockets(), sockets()
    server_out = io.StringIO()
    results = []
    thread = threading.Thread(
        target=lambda: results.append(serve(server, server_out, max_messages=1))
    )
    thread.start()
    client_out = io.StringIO()
    reply = run_client(client, ("127.0.0.1", _port(server)), client_out)
    thread.join(5)

    assert reply == "goodbye world"
    assert results == [1]
    assert "client:: send message [hello world]" in client_out.getvalue()
    assert (
        f"client:: got reply [size:{BUFFER_SIZE} contents:(goodbye world)"
        in client_out.getvalue()
    )
    assert (
        f"server:: read message [size:{BUFFER_SIZE} contents:(hello world)]"
        in server_out.getvalue()
    )
    assert server_out.getvalue().endswith("server:: reply\n")


def test_serve_stops_at_zero_messages(sockets):
    server = sockets()
    out = io.StringIO()
    assert serve(server, out, max_messages=0) == 0
    assert out.getvalue() == ""


def test_udp_read_times_out(sockets):
    sock = sockets()
    sock.settimeout(0.05)
    with pytest.raises(socket.timeout):
        udp_read(sock, BUFFER_SIZE)