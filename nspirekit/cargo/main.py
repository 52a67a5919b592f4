"""Building TI-Nspire programs with cargo and sending them to Firebird."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from nspirekit.cargo import cli, files
from nspirekit.cargo.firebird import send_file
from nspirekit.cargo.install import rustup_component

log = logging.getLogger(__name__)


@dataclass
class ZehnOptions:
    """Per-package settings for genzehn, read from ``[package.metadata.zehn]``."""

    compress: bool = False
    flags: str = ""
    name: str | None = None
    notice: str | None = None

    @classmethod
    def from_metadata(cls, metadata) -> ZehnOptions:
        """Read options from package metadata, using defaults if they are absent or malformed."""
        zehn = metadata.get("zehn") if isinstance(metadata, dict) else None
        if not isinstance(zehn, dict):
            return cls()
        compress = zehn.get("compress", False)
        flags = zehn.get("flags", "")
        name = zehn.get("name")
        notice = zehn.get("notice")
        if (
            not isinstance(compress, bool)
            or not isinstance(flags, str)
            or not (name is None or isinstance(name, str))
            or not (notice is None or isinstance(notice, str))
        ):
            return cls()
        return cls(compress=compress, flags=flags, name=name, notice=notice)


def update_path(environ=None) -> None:
    """Prepend the ndless SDK tool directories to PATH when NDLESS_HOME is set."""
    env = os.environ if environ is None else environ
    ndless_home = env.get("NDLESS_HOME")
    path = env.get("PATH")
    if ndless_home is None or path is None:
        return
    log.debug("Updating path with NDLESS_HOME...")
    home = Path(ndless_home)
    entries = [
        str(home / "ndless-sdk" / "toolchain" / "install" / "bin"),
        str(home / "ndless-sdk" / "bin"),
        *path.split(os.pathsep),
    ]
    bad = [entry for entry in entries if os.pathsep in entry]
    if bad:
        log.warning(
            "failed to create new PATH variable: path %r contains separator %r",
            bad[0], os.pathsep,
        )
        return
    env["PATH"] = os.pathsep.join(entries)


def cargo_command() -> list[str]:
    """Return the command that starts cargo, honouring $CARGO."""
    return [os.environ.get("CARGO", "cargo")]


def clean(manifest) -> int:
    """Run ``cargo clean`` and return its exit code."""
    cmd = [*cargo_command(), "clean"]
    if manifest is not None:
        cmd += ["--manifest-path", os.fspath(manifest)]
    return subprocess.run(cmd, check=False).returncode


def build_command(manifest, target, additional_args) -> list[str]:
    """Return the ``cargo build`` command line for the given target."""
    cmd = [*cargo_command(), "build"]
    if manifest is not None:
        cmd += ["--manifest-path", os.fspath(manifest)]
    cmd += [
        "--message-format=json-render-diagnostics",
        "-Z",
        "build-std=core,alloc",
        "--target",
        os.fspath(target),
        *(os.fspath(arg) for arg in additional_args),
    ]
    return cmd


def _builtin_target() -> bytes | None:
    try:
        return Path(__file__).with_name(files.TARGET_FILENAME).read_bytes()
    except OSError:
        return None


def _load_packages(manifest) -> dict[str, dict]:
    cmd = [*cargo_command(), "metadata", "--format-version", "1", "--no-deps"]
    if manifest is not None:
        cmd += ["--manifest-path", os.fspath(manifest)]
    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise RuntimeError(f"cargo metadata failed: {(result.stderr or '').strip()}")
    data = json.loads(result.stdout)
    return {package["id"]: package for package in data["packages"]}


def _artifacts(lines):
    for line in lines:
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(message, dict) and message.get("reason") == "compiler-artifact":
            yield message


def _run_tool(cmd: list[str], tool: str) -> int:
    try:
        return subprocess.run(cmd, check=False).returncode
    except OSError as err:
        raise RuntimeError(f"Failed to run {tool}: {err}") from err


def _package_artifact(artifact: dict, packages: dict[str, dict]) -> Path | None:
    executable = artifact.get("executable")
    if not executable:
        return None
    binary = Path(executable)
    package = packages[artifact["package_id"]]
    config = ZehnOptions.from_metadata(package.get("metadata"))
    name = package["name"]
    target_folder = binary.parent
    zehn_file = target_folder / f"{name}.zehn"
    major = str(package["version"]).split(".")[0]

    genzehn = [
        "genzehn",
        "--input", str(binary),
        "--output", str(zehn_file),
        "--version", major,
        "--name", config.name if config.name is not None else name,
        *config.flags.split(" "),
    ]
    authors = package.get("authors") or []
    if authors:
        genzehn += ["--author", ", ".join(authors)]
    if config.compress:
        genzehn.append("--compress")
    if config.notice is not None:
        genzehn += ["--notice", config.notice]
    if _run_tool(genzehn, "genzehn") != 0:
        raise RuntimeError("Failed to run genzehn")

    tns_file = target_folder / f"{name}.tns"
    try:
        make_prg_status = _run_tool(["make-prg", str(zehn_file), str(tns_file)], "make-prg")
    finally:
        zehn_file.unlink(missing_ok=True)
    if make_prg_status != 0:
        raise RuntimeError("Failed to run make-prg")
    return tns_file


def build(settings) -> tuple[bool, list[Path]]:
    """Build the package and convert its executables to .tns files.

    Returns whether any artifact failed, and the .tns files produced.
    """
    rustup_component("rust-src")
    updated, target = files.get_target(settings.target, _builtin_target())
    if updated and clean(settings.manifest_path) != 0:
        raise RuntimeError("cargo clean failed")
    packages = _load_packages(settings.manifest_path)

    process = subprocess.Popen(
        build_command(
            settings.manifest_path,
            target,
            [*settings.additional, *settings.color.args()],
        ),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        text=True,
    )
    some_failure = False
    binaries: list[Path] = []
    try:
        for artifact in _artifacts(process.stdout):
            try:
                tns = _package_artifact(artifact, packages)
            except RuntimeError as err:
                some_failure = True
                log.error("%s", err)
                continue
            if tns is not None:
                binaries.append(tns)
    finally:
        process.stdout.close()
        process.wait()
    return some_failure, binaries


def inner_main(argv=None) -> bool:
    """Run the requested command; return True if anything failed."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "ndless":
        args.pop(0)
    options = cli.parse_args(args)
    update_path()
    if isinstance(options, cli.BuildOptions):
        return build(options)[0]

    some_failure, binaries = build(options.build_settings)
    for binary in binaries:
        try:
            send_file(options.port, options.dest_dir, binary)
        except (OSError, ValueError) as err:
            some_failure = True
            context = f"Failed to send file {binary.name}" if binary.name else "Failed to send file"
            log.error("%s: %s", context, err)
    return some_failure


def main(argv=None) -> int:
    """Entry point of the cargo-ndless command."""
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
    try:
        failed = inner_main(argv)
    except (OSError, RuntimeError, ValueError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())