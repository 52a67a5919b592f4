"""Sending built programs to a running Firebird emulator."""

from __future__ import annotations

import logging
import os
import socket

log = logging.getLogger(__name__)


def send_file(port, dest_dir, file) -> None:
    """Ask the emulator on ``localhost:port`` to copy ``file`` into ``dest_dir``."""
    log.info("Sending file %s", file)
    dest_bytes = os.fsencode(dest_dir)
    file_bytes = os.fsencode(file)
    if b"\n" in dest_bytes:
        raise ValueError(
            f"The destination directory, {dest_dir}, must not contain a newline"
        )
    if b"\n" in file_bytes:
        raise ValueError(f"The sent binary, {file}, must not contain a newline")
    with socket.create_connection(("127.0.0.1", port)) as stream:
        stream.sendall(b"ln st " + dest_bytes + b"\nln s " + file_bytes + b"\n")