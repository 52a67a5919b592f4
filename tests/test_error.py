import pytest

from nspirekit.freetype.error import ErrorKind, FreeTypeError

_LOCAL = {ErrorKind.UNEXPECTED_PIXEL_MODE, ErrorKind.INVALID_PATH, ErrorKind.UNKNOWN}


@pytest.mark.parametrize("kind", [k for k in ErrorKind if k not in _LOCAL])
def test_library_codes_round_trip(kind):
    assert ErrorKind.from_code(kind.value) is kind


@pytest.mark.parametrize("kind", sorted(_LOCAL, key=lambda k: k.value))
def test_package_kinds_do_not_come_from_codes(kind):
    assert ErrorKind.from_code(kind.value) is ErrorKind.UNKNOWN


@pytest.mark.parametrize("code", [-1, 0x0D, 10_000])
def test_unlisted_codes_are_unknown(code):
    assert ErrorKind.from_code(code) is ErrorKind.UNKNOWN


def test_every_kind_has_a_message():
    messages = set()
    for kind in ErrorKind:
        text = ErrorKind.message(kind)
        assert text != ""
        messages.add(text)
    assert len(messages) == len(ErrorKind)


@pytest.mark.parametrize(
    "kind, text",
    [
        (ErrorKind.CANNOT_OPEN_RESOURCE, "Cannot open resource"),
        (ErrorKind.CMAP_TABLE_MISSING, "C map table missing"),
        (ErrorKind.INVALID_PPEM, "Invalid p pem"),
        (ErrorKind.ENDF_IN_EXEC_STREAM, "ENDF in exec stream"),
        (ErrorKind.INVALID_PATH, "Invalid path"),
    ],
)
def test_messages(kind, text):
    assert kind.message() == text


def test_exception_from_code():
    err = FreeTypeError(ErrorKind.INVALID_ARGUMENT.value)
    assert err.kind is ErrorKind.INVALID_ARGUMENT
    assert str(err) == "Invalid argument"


def test_exception_from_kind_can_be_raised_and_caught():
    err = FreeTypeError(ErrorKind.UNEXPECTED_PIXEL_MODE)
    assert err.kind is ErrorKind.UNEXPECTED_PIXEL_MODE
    assert str(err) == "Unexpected pixel mode"
    with pytest.raises(FreeTypeError) as info:
        raise err
    assert info.value is err


def test_exception_from_unknown_code():
    err = FreeTypeError(10_000)
    assert err.kind is ErrorKind.UNKNOWN
    assert str(err) == "Unknown"