"""Installing toolchain components."""

from __future__ import annotations

import logging
import os
import subprocess

log = logging.getLogger(__name__)


def rustup_component(name) -> None:
    """Install a toolchain component with rustup, raising on failure."""
    name = os.fspath(name)
    status = subprocess.run(["rustup", "component", "add", name], check=False)
    if status.returncode == 0:
        log.debug("Successfully installed %s via Rustup", name)
        return
    if status.returncode > 0:
        raise RuntimeError(f"Failed to run rustup: error code {status.returncode}")
    raise RuntimeError("Failed to run rustup")