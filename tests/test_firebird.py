import socket
import threading
from pathlib import Path

import pytest

from nspirekit.cargo.firebird import send_file


def test_send_file_wire_format():
    received = []
    with socket.create_server(("127.0.0.1", 0)) as server:
        port = server.getsockname()[1]

        def accept():
            conn, _ = server.accept()
            with conn:
                chunks = []
                while True:
                    data = conn.recv(4096)
                    if not data:
                        break
                    chunks.append(data)
                received.append(b"".join(chunks))

        worker = threading.Thread(target=accept)
        worker.start()
        result = send_file(port, "/ndless", "/build/app.tns")
        worker.join(5)
    assert result is None
    assert received == [b"ln st /ndless\nln s /build/app.tns\n"]


def test_newline_in_destination_rejected():
    with pytest.raises(ValueError, match="destination directory"):
        send_file(1, Path("/bad\ndir"), Path("app.tns"))


def test_newline_in_binary_rejected():
    with pytest.raises(ValueError, match="sent binary"):
        send_file(1, Path("/ndless"), Path("app\n.tns"))