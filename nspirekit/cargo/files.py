"""Placing support files where the toolchain can find them."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

TARGET_FILENAME = "armv5te-nspire-eabi.json"


def _reuse_or_write(path: Path, wanted: bytes, *, create_parent: bool) -> bool | None:
    """Return False if ``path`` already holds ``wanted``, True once written, None on failure."""
    try:
        current = path.read_bytes()
    except OSError:
        pass
    else:
        if current == wanted:
            return False
        log.debug("Updating %s...", path.name)
    try:
        if create_parent:
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(wanted)
    except OSError:
        return None
    return True


def get_file(filename, wanted_contents) -> tuple[bool, Path]:
    """Ensure a file holding ``wanted_contents`` exists.

    The file is kept in ``~/.ndless``, falling back to the temporary
    directory. Returns whether the file was (re)written and its path.
    """
    wanted = bytes(wanted_contents)
    try:
        home: Path | None = Path.home()
    except (RuntimeError, KeyError):
        home = None
    if home is not None:
        path = home / ".ndless" / filename
        written = _reuse_or_write(path, wanted, create_parent=True)
        if written is not None:
            return written, path
        log.debug("Couldn't create %s in home directory. Read-only filesystem?", filename)
    else:
        log.debug("Couldn't find home directory")

    path = Path(tempfile.gettempdir()) / filename
    if _matches := _reuse_or_write(path, wanted, create_parent=False):
        return _matches, path
    if _matches is False:
        return False, path
    raise OSError(f"Couldn't create {filename} in temp directory. Read-only filesystem?")


def get_target(existing, default_contents) -> tuple[bool, Path]:
    """Return the target specification to build for.

    An explicitly given target is used as is; otherwise the built-in
    specification is written out with :func:`get_file`.
    """
    if existing is not None:
        return False, Path(existing)
    if default_contents is None:
        raise FileNotFoundError(
            f"No built-in target specification {TARGET_FILENAME} is available; "
            "pass --target"
        )
    return get_file(TARGET_FILENAME, default_contents)