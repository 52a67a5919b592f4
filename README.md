# nspirekit

Tools for building TI-Nspire programs with Cargo and sending them to the
Firebird emulator, together with a small cooperative async runtime and
helpers for walking glyph outlines. It has no dependencies beyond the
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## The `cargo-ndless` command

`cargo-ndless` compiles a Cargo package for the Nspire, then turns every
executable it produces into a `.tns` file with `genzehn` and `make-prg`.
Because it is named `cargo-ndless`, Cargo also runs it as `cargo ndless`;
a leading `ndless` argument is dropped.

```
cargo-ndless build --target path/to/armv5te-nspire-eabi.json
cargo-ndless run --target path/to/armv5te-nspire-eabi.json --port 3334 --dest-dir /ndless
```

`build` compiles the package. `run` compiles it and then asks a Firebird
emulator listening on `127.0.0.1:PORT` to copy each `.tns` file into the
destination directory.

Options shared by both subcommands:

- `--manifest-path PATH`: the `Cargo.toml` to build.
- `--color auto|always|never`: colouring passed on to Cargo (default `auto`).
- `--target FILE`: the target specification to compile for.
- Any other arguments, and everything after `--`, are passed to
  `cargo build` unchanged.

`run` also takes `-p/--port` (default `3334`) and `-d/--dest-dir` (default
`/ndless`). Paths sent to Firebird must not contain a newline.

Each build:

1. runs `rustup component add rust-src`;
2. if `NDLESS_HOME` is set, puts `$NDLESS_HOME/ndless-sdk/toolchain/install/bin`
   and `$NDLESS_HOME/ndless-sdk/bin` at the front of `PATH`;
3. reads the package list with `cargo metadata --no-deps`;
4. runs `cargo build --message-format=json-render-diagnostics -Z build-std=core,alloc --target ...`
   (the `CARGO` environment variable chooses the cargo executable);
5. for each executable artifact, runs `genzehn` and then `make-prg`, leaving
   `<package>.tns` beside the binary and removing the intermediate `.zehn`.

Options for `genzehn` are read from `[package.metadata.zehn]` in `Cargo.toml`;
if that table is missing or has values of the wrong type, defaults are used:

```toml
[package.metadata.zehn]
name = "My Program"          # defaults to the package name
notice = "A short description"
flags = "--uses-lcd-blit false"
compress = true
```

The package's major version is passed as `--version`, and its authors, if
any, as `--author`.

The command exits with status 1 when any binary failed to convert or send,
or when the build could not start; failures are logged.

### What the command does not do

No target specification is shipped with the package. Unless a file named
`armv5te-nspire-eabi.json` is placed beside `nspirekit/cargo/main.py`,
`--target` must be given; otherwise the build stops with an error asking for
it. When that file is present, its contents are written to
`~/.ndless/armv5te-nspire-eabi.json` (or to the temporary directory if the
home directory cannot be written), and `cargo clean` is run whenever that
copy had to be created or updated.

The command does not install the Nspire SDK, `genzehn`, `make-prg` or
Firebird; they must already be on `PATH` (or under `NDLESS_HOME`).

## Library

The subpackage `__init__` files import nothing; import from the modules.

### `nspirekit.cargo`

- `cli`: `parse_args(argv)` returns `BuildOptions` or `RunOptions`;
  `build_parser()`; `Color` with `args()`.
- `files`: `get_file(filename, wanted_contents)` and
  `get_target(existing, default_contents)`, each returning
  `(written, path)`.
- `firebird`: `send_file(port, dest_dir, file)`.
- `install`: `rustup_component(name)`, raising `RuntimeError` on failure.
- `main`: `ZehnOptions.from_metadata(metadata)`, `update_path(environ)`,
  `cargo_command()`, `clean(manifest)`, `build_command(manifest, target, additional_args)`,
  `build(settings)`, `inner_main(argv)` and `main(argv)`.

### `nspirekit.aio`

A single-threaded runtime for awaitables built from this package. Time is
measured in ticks of a wrapping 32-bit counter at 32768 ticks per second;
waits longer than 2**31 ticks (about 18 hours) are not supported.

- `task`: `block_on(listeners, task)` runs a coroutine to completion with an
  `AsyncListeners`, whose `timer()` returns its `TimerListener` and whose
  `yield_now()` lets other work run. When nothing is ready, it sleeps until
  the next timer is due.
- `timer`: `TimerListener` offers `sleep`, `sleep_ms`, `sleep_ticks`,
  `sleep_until` (a `Timer` whose result is how late it fired, in seconds),
  `timeout`, `timeout_ms`, `timeout_ticks`, `timeout_until` (raising
  `TimeoutExpired`), and `every`, `every_ms`, `every_hz`, `every_ticks`
  (an `Interval` iterated with `async for`). `Clock`, `seconds_to_ticks` and
  `ticks_to_seconds` are also here.
- `mpsc`: `channel(buffer)` returns a bounded `Sender`/`Receiver` pair.
  `Sender.send` raises `ChannelFull` when the channel is at capacity; the
  receiver's `async for` ends once every sender is closed and the queue is
  empty.
- `combinators`: `select(*args)` gives `(index, value)` of the first to
  finish, `first(*args)` the same but returns `None`, and `join(*args)` a
  tuple of all results.
- `yield_now`: `YieldListener` and `Yield`.
- `keypad`: `KeypadListener` compares successive readings of a key source
  (a callable returning the keys held now) and gives each `stream()` a
  `KeyStream` of `KeyEvent(key, state, tick_at)` with `KeyState.PRESSED` or
  `KeyState.RELEASED`. By default it polls 30 times per second through a
  `TimerListener`; see `with_hz`, `with_ms`, `with_ticks` and
  `manually_polled`. Each stream buffers up to 100 events by default and
  drops further ones until read. `list_keys()` returns the keys held down.

```python
from nspirekit.aio.task import AsyncListeners, block_on
from nspirekit.aio.timer import TimeoutExpired

listeners = AsyncListeners()


async def demo():
    timer = listeners.timer()
    ticks = 0
    async for _late in timer.every_ms(50):
        ticks += 1
        if ticks == 3:
            break
    try:
        await timer.timeout_ms(10, timer.sleep_ms(1000))
    except TimeoutExpired:
        return ticks


print(block_on(listeners, demo()))  # 3
```

The runtime does not read a real keypad and cannot drive `asyncio`
awaitables; keys come only from the key source you supply.

### `nspirekit.freetype`

- `outline`: `Outline(points, tags, contours)` holds `Vector` points, one tag
  per point and the end index of each contour. `contours_iter()` yields a
  `CurveIterator` per contour, producing `Line`, `Bezier2` and `Bezier3`
  segments; the last segment returns to the contour's `start()`, and the
  on-curve point implied between two off-curve quadratic points is filled in.
- `error`: `ErrorKind` maps FreeType error codes to kinds
  (`ErrorKind.from_code`, unknown codes giving `UNKNOWN`) with `message()`;
  `FreeTypeError` takes a kind or a code.

```python
from nspirekit.freetype.outline import Line, Outline, Vector

outline = Outline([Vector(0, 0), Vector(10, 0), Vector(0, 10)], [1, 1, 1], [2])
curves = [list(contour) for contour in outline.contours_iter()]
assert curves == [[Line(Vector(10, 0)), Line(Vector(0, 10)), Line(Vector(0, 0))]]
```

This subpackage does not load fonts or render glyphs.