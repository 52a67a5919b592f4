import io
import json
import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from nspirekit.cargo.cli import BuildOptions, Color
from nspirekit.cargo.main import (
    ZehnOptions,
    build,
    build_command,
    cargo_command,
    clean,
    inner_main,
    main,
    update_path,
)


@pytest.fixture(autouse=True)
def plain_env(monkeypatch):
    monkeypatch.delenv("CARGO", raising=False)
    monkeypatch.delenv("NDLESS_HOME", raising=False)


def test_zehn_options_from_metadata():
    opts = ZehnOptions.from_metadata(
        {"zehn": {"compress": True, "flags": "--a b", "name": "Game", "other": 1}}
    )
    assert opts == ZehnOptions(compress=True, flags="--a b", name="Game", notice=None)


@pytest.mark.parametrize(
    "metadata",
    [None, {}, {"zehn": "x"}, {"zehn": {"compress": "yes"}}, {"zehn": {"flags": None}}],
)
def test_zehn_options_default_on_bad_metadata(metadata):
    assert ZehnOptions.from_metadata(metadata) == ZehnOptions()


def test_update_path_prepends_sdk_dirs():
    home = Path("/opt/nd")
    env = {"NDLESS_HOME": str(home), "PATH": os.pathsep.join(["/usr/bin", "/bin"])}
    update_path(env)
    assert env["PATH"].split(os.pathsep) == [
        str(home / "ndless-sdk" / "toolchain" / "install" / "bin"),
        str(home / "ndless-sdk" / "bin"),
        "/usr/bin",
        "/bin",
    ]


def test_update_path_needs_both_variables():
    env = {"NDLESS_HOME": "/opt/nd"}
    update_path(env)
    assert env == {"NDLESS_HOME": "/opt/nd"}


def test_cargo_command_honours_env(monkeypatch):
    assert cargo_command() == ["cargo"]
    monkeypatch.setenv("CARGO", "/opt/cargo")
    assert cargo_command() == ["/opt/cargo"]


def test_clean_passes_manifest():
    with mock.patch(
        "subprocess.run", side_effect=lambda cmd, **k: subprocess.CompletedProcess(cmd, 0)
    ) as run:
        assert clean(Path("Cargo.toml")) == 0
    assert run.call_args.args[0] == ["cargo", "clean", "--manifest-path", "Cargo.toml"]


def test_build_command_layout():
    cmd = build_command(Path("Cargo.toml"), "t.json", ["--release", *Color.NEVER.args()])
    assert cmd == [
        "cargo", "build", "--manifest-path", "Cargo.toml",
        "--message-format=json-render-diagnostics", "-Z", "build-std=core,alloc",
        "--target", "t.json", "--release", "--color", "never",
    ]


class _Toolchain:
    def __init__(self, tmp_path, genzehn_code=0):
        self.calls = []
        self.genzehn_code = genzehn_code
        self.binary = tmp_path / "target" / "app"
        self.binary.parent.mkdir()
        self.metadata = {
            "packages": [
                {
                    "id": "app 2.3.1",
                    "name": "app",
                    "version": "2.3.1",
                    "authors": ["Ann <ann@example.com>"],
                    "metadata": {
                        "zehn": {"compress": True, "flags": "--big yes", "notice": "hi"}
                    },
                }
            ]
        }
        messages = [
            "plain text line",
            json.dumps({"reason": "compiler-artifact", "package_id": "app 2.3.1",
                        "executable": str(self.binary)}),
            json.dumps({"reason": "compiler-artifact", "package_id": "app 2.3.1",
                        "executable": None}),
            json.dumps({"reason": "build-finished", "success": True}),
        ]
        self.output = "\n".join(messages) + "\n"

    def run(self, cmd, **kwargs):
        cmd = [str(part) for part in cmd]
        self.calls.append(cmd)
        if cmd[0] == "cargo" and cmd[1] == "metadata":
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(self.metadata), stderr="")
        if cmd[0] == "genzehn":
            Path(cmd[4]).write_bytes(b"zehn")
            return subprocess.CompletedProcess(cmd, self.genzehn_code)
        if cmd[0] == "make-prg":
            Path(cmd[2]).write_bytes(b"tns")
        return subprocess.CompletedProcess(cmd, 0)

    def popen(self, cmd, **kwargs):
        toolchain = self
        toolchain.calls.append(list(cmd))

        class _Process:
            stdout = io.StringIO(toolchain.output)

            def wait(self):
                return 0

        return _Process()

    def patches(self):
        return (
            mock.patch("subprocess.run", side_effect=self.run),
            mock.patch("subprocess.Popen", side_effect=self.popen),
        )


def _settings(tmp_path):
    target = tmp_path / "target.json"
    target.write_text("{}")
    return BuildOptions(target=str(target))


def test_build_produces_tns(tmp_path):
    tools = _Toolchain(tmp_path)
    run_patch, popen_patch = tools.patches()
    with run_patch, popen_patch:
        failed, binaries = build(_settings(tmp_path))
    zehn = tools.binary.parent / "app.zehn"
    assert failed is False
    assert binaries == [tools.binary.parent / "app.tns"]
    assert not zehn.exists()
    genzehn = next(call for call in tools.calls if call[0] == "genzehn")
    assert genzehn == [
        "genzehn", "--input", str(tools.binary), "--output", str(zehn),
        "--version", "2", "--name", "app", "--big", "yes",
        "--author", "Ann <ann@example.com>", "--compress", "--notice", "hi",
    ]
    assert tools.calls[0] == ["rustup", "component", "add", "rust-src"]


def test_build_reports_genzehn_failure(tmp_path):
    tools = _Toolchain(tmp_path, genzehn_code=1)
    run_patch, popen_patch = tools.patches()
    with run_patch, popen_patch:
        failed, binaries = build(_settings(tmp_path))
    assert failed is True
    assert binaries == []
    assert not any(call[0] == "make-prg" for call in tools.calls)


def test_inner_main_strips_ndless(tmp_path):
    tools = _Toolchain(tmp_path)
    settings = _settings(tmp_path)
    run_patch, popen_patch = tools.patches()
    with run_patch, popen_patch:
        assert inner_main(["ndless", "build", "--target", settings.target]) is False
    assert (tools.binary.parent / "app.tns").read_bytes() == b"tns"


def test_main_exit_code_on_failure(tmp_path):
    tools = _Toolchain(tmp_path, genzehn_code=2)
    settings = _settings(tmp_path)
    run_patch, popen_patch = tools.patches()
    with run_patch, popen_patch:
        assert main(["build", "--target", settings.target]) == 1


def test_main_exit_code_on_rustup_error(tmp_path):
    with mock.patch(
        "subprocess.run", side_effect=lambda cmd, **k: subprocess.CompletedProcess(cmd, 5)
    ):
        assert main(["build", "--target", str(tmp_path / "t.json")]) == 1