"""Command-line options for building and running TI-Nspire programs."""

from __future__ import annotations

import argparse
import enum
import sys
from dataclasses import dataclass, field
from pathlib import Path


class Color(enum.Enum):
    """Coloring mode forwarded to cargo."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    def args(self) -> list[str]:
        """Return the cargo arguments selecting this coloring mode."""
        return ["--color", self.value]

    def __str__(self) -> str:
        return self.value


@dataclass
class BuildOptions:
    """Settings for compiling the current package."""

    manifest_path: Path | None = None
    color: Color = Color.AUTO
    target: str | None = None
    additional: list[str] = field(default_factory=list)


@dataclass
class RunOptions:
    """Settings for compiling and sending the package to Firebird Emu."""

    dest_dir: Path = Path("/ndless")
    port: int = 3334
    build_settings: BuildOptions = field(default_factory=BuildOptions)


_BUILD_VALUE_OPTIONS = frozenset({"--manifest-path", "--color", "--target"})
_VALUE_OPTIONS = {
    "build": _BUILD_VALUE_OPTIONS,
    "run": _BUILD_VALUE_OPTIONS | {"-d", "--dest-dir", "-p", "--port"},
}
_FLAG_OPTIONS = frozenset({"-h", "--help"})


def _color(text: str) -> Color:
    try:
        return Color(text.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid color {text!r}: expected auto, always or never"
        ) from None


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port {text!r}") from None
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port {value} is out of range")
    return value


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--manifest-path", dest="manifest_path", type=Path, metavar="PATH",
        help="Path to Cargo.toml",
    )
    parser.add_argument(
        "--color", type=_color, default=Color.AUTO,
        help="Coloring: auto, always, never",
    )
    parser.add_argument(
        "--target",
        help="A target.json to compile for other than the built-in ndless toolchain",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the parser for the build and run commands."""
    parser = argparse.ArgumentParser(prog="cargo-ndless")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    build = commands.add_parser("build", help="Compile the current package")
    _add_build_arguments(build)
    run = commands.add_parser(
        "run", help="Compile the current package and send it to Firebird Emu"
    )
    run.add_argument(
        "-d", "--dest-dir", dest="dest_dir", type=Path, default=Path("/ndless"),
        help="Directory to send the tns files to firebird",
    )
    run.add_argument(
        "-p", "--port", type=_port, default=3334, help="Port to connect to firebird"
    )
    _add_build_arguments(run)
    return parser


def _split_known(command: str, args: list[str]) -> tuple[list[str], list[str]]:
    """Separate the options this tool knows from those passed on to cargo."""
    takes_value = _VALUE_OPTIONS[command]
    known: list[str] = []
    extra: list[str] = []
    rest = iter(args)
    for arg in rest:
        if arg == "--":
            extra.extend(rest)
            break
        if arg in _FLAG_OPTIONS:
            known.append(arg)
        elif arg in takes_value:
            known.append(arg)
            value = next(rest, None)
            if value is not None:
                known.append(value)
        elif arg.startswith("--") and arg.split("=", 1)[0] in takes_value:
            known.append(arg)
        elif not arg.startswith("--") and len(arg) > 2 and arg[:2] in takes_value:
            known.append(arg)
        else:
            extra.append(arg)
    return known, extra


def parse_args(argv=None) -> BuildOptions | RunOptions:
    """Parse command-line arguments (without the program name)."""
    args = list(sys.argv[1:] if argv is None else argv)
    extra: list[str] = []
    if args and args[0] in _VALUE_OPTIONS:
        known, extra = _split_known(args[0], args[1:])
        args = [args[0], *known]
    namespace = build_parser().parse_args(args)
    build = BuildOptions(
        manifest_path=namespace.manifest_path,
        color=namespace.color,
        target=namespace.target,
        additional=extra,
    )
    if namespace.command == "run":
        return RunOptions(
            dest_dir=namespace.dest_dir, port=namespace.port, build_settings=build
        )
    return build