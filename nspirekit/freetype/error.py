"""Font library error kinds and the exception that carries them."""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """An error reported by the font library, keyed by its numeric code."""

    OK = 0x00
    CANNOT_OPEN_RESOURCE = 0x01
    UNKNOWN_FILE_FORMAT = 0x02
    INVALID_FILE_FORMAT = 0x03
    INVALID_VERSION = 0x04
    LOWER_MODULE_VERSION = 0x05
    INVALID_ARGUMENT = 0x06
    UNIMPLEMENTED_FEATURE = 0x07
    INVALID_TABLE = 0x08
    INVALID_OFFSET = 0x09
    ARRAY_TOO_LARGE = 0x0A
    MISSING_MODULE = 0x0B
    MISSING_PROPERTY = 0x0C
    INVALID_GLYPH_INDEX = 0x10
    INVALID_CHARACTER_CODE = 0x11
    INVALID_GLYPH_FORMAT = 0x12
    CANNOT_RENDER_GLYPH = 0x13
    INVALID_OUTLINE = 0x14
    INVALID_COMPOSITE = 0x15
    TOO_MANY_HINTS = 0x16
    INVALID_PIXEL_SIZE = 0x17
    INVALID_HANDLE = 0x20
    INVALID_LIBRARY_HANDLE = 0x21
    INVALID_DRIVER_HANDLE = 0x22
    INVALID_FACE_HANDLE = 0x23
    INVALID_SIZE_HANDLE = 0x24
    INVALID_SLOT_HANDLE = 0x25
    INVALID_CHAR_MAP_HANDLE = 0x26
    INVALID_CACHE_HANDLE = 0x27
    INVALID_STREAM_HANDLE = 0x28
    TOO_MANY_DRIVERS = 0x30
    TOO_MANY_EXTENSIONS = 0x31
    OUT_OF_MEMORY = 0x40
    UNLISTED_OBJECT = 0x41
    CANNOT_OPEN_STREAM = 0x51
    INVALID_STREAM_SEEK = 0x52
    INVALID_STREAM_SKIP = 0x53
    INVALID_STREAM_READ = 0x54
    INVALID_STREAM_OPERATION = 0x55
    INVALID_FRAME_OPERATION = 0x56
    NESTED_FRAME_ACCESS = 0x57
    INVALID_FRAME_READ = 0x58
    RASTER_UNINITIALIZED = 0x60
    RASTER_CORRUPTED = 0x61
    RASTER_OVERFLOW = 0x62
    RASTER_NEGATIVE_HEIGHT = 0x63
    TOO_MANY_CACHES = 0x70
    INVALID_OPCODE = 0x80
    TOO_FEW_ARGUMENTS = 0x81
    STACK_OVERFLOW = 0x82
    CODE_OVERFLOW = 0x83
    BAD_ARGUMENT = 0x84
    DIVIDE_BY_ZERO = 0x85
    INVALID_REFERENCE = 0x86
    DEBUG_OP_CODE = 0x87
    ENDF_IN_EXEC_STREAM = 0x88
    NESTED_DEFS = 0x89
    INVALID_CODE_RANGE = 0x8A
    EXECUTION_TOO_LONG = 0x8B
    TOO_MANY_FUNCTION_DEFS = 0x8C
    TOO_MANY_INSTRUCTION_DEFS = 0x8D
    TABLE_MISSING = 0x8E
    HORIZ_HEADER_MISSING = 0x8F
    LOCATIONS_MISSING = 0x90
    NAME_TABLE_MISSING = 0x91
    CMAP_TABLE_MISSING = 0x92
    HMTX_TABLE_MISSING = 0x93
    POST_TABLE_MISSING = 0x94
    INVALID_HORIZ_METRICS = 0x95
    INVALID_CHAR_MAP_FORMAT = 0x96
    INVALID_PPEM = 0x97
    INVALID_VERT_METRICS = 0x98
    COULD_NOT_FIND_CONTEXT = 0x99
    INVALID_POST_TABLE_FORMAT = 0x9A
    INVALID_POST_TABLE = 0x9B
    SYNTAX = 0xA0
    STACK_UNDERFLOW = 0xA1
    IGNORE = 0xA2
    NO_UNICODE_GLYPH_NAME = 0xA3
    MISSING_STARTFONT_FIELD = 0xB0
    MISSING_FONT_FIELD = 0xB1
    MISSING_SIZE_FIELD = 0xB2
    MISSING_FONTBOUNDINGBOX_FIELD = 0xB3
    MISSING_CHARS_FIELD = 0xB4
    MISSING_STARTCHAR_FIELD = 0xB5
    MISSING_ENCODING_FIELD = 0xB6
    MISSING_BBX_FIELD = 0xB7
    BBX_TOO_BIG = 0xB8
    CORRUPTED_FONT_HEADER = 0xB9
    CORRUPTED_FONT_GLYPHS = 0xBA
    MAX = 0xBB
    # Errors raised by this package itself rather than by the library.
    UNEXPECTED_PIXEL_MODE = 0xBC
    INVALID_PATH = 0xBD
    UNKNOWN = 0xBE

    @classmethod
    def from_code(cls, code: int) -> ErrorKind:
        """Map a library error code to its kind; unknown codes give UNKNOWN."""
        try:
            kind = cls(code)
        except ValueError:
            return cls.UNKNOWN
        if kind in _LOCAL_KINDS:
            return cls.UNKNOWN
        return kind

    def message(self) -> str:
        """Return the human-readable description of this error."""
        return _MESSAGES[self]


_LOCAL_KINDS = frozenset(
    {ErrorKind.UNEXPECTED_PIXEL_MODE, ErrorKind.INVALID_PATH, ErrorKind.UNKNOWN}
)

_MESSAGES = {
    ErrorKind.OK: "Ok",
    ErrorKind.CANNOT_OPEN_RESOURCE: "Cannot open resource",
    ErrorKind.UNKNOWN_FILE_FORMAT: "Unknown file format",
    ErrorKind.INVALID_FILE_FORMAT: "Invalid file format",
    ErrorKind.INVALID_VERSION: "Invalid version",
    ErrorKind.LOWER_MODULE_VERSION: "Lower module version",
    ErrorKind.INVALID_ARGUMENT: "Invalid argument",
    ErrorKind.UNIMPLEMENTED_FEATURE: "Unimplemented feature",
    ErrorKind.INVALID_TABLE: "Invalid table",
    ErrorKind.INVALID_OFFSET: "Invalid offset",
    ErrorKind.ARRAY_TOO_LARGE: "Array too large",
    ErrorKind.MISSING_MODULE: "Missing module",
    ErrorKind.MISSING_PROPERTY: "Missing property",
    ErrorKind.INVALID_GLYPH_INDEX: "Invalid glyph index",
    ErrorKind.INVALID_CHARACTER_CODE: "Invalid character code",
    ErrorKind.INVALID_GLYPH_FORMAT: "Invalid glyph format",
    ErrorKind.CANNOT_RENDER_GLYPH: "Cannot render glyph",
    ErrorKind.INVALID_OUTLINE: "Invalid outline",
    ErrorKind.INVALID_COMPOSITE: "Invalid composite",
    ErrorKind.TOO_MANY_HINTS: "Too many hints",
    ErrorKind.INVALID_PIXEL_SIZE: "Invalid pixel size",
    ErrorKind.INVALID_HANDLE: "Invalid handle",
    ErrorKind.INVALID_LIBRARY_HANDLE: "Invalid library handle",
    ErrorKind.INVALID_DRIVER_HANDLE: "Invalid driver handle",
    ErrorKind.INVALID_FACE_HANDLE: "Invalid face handle",
    ErrorKind.INVALID_SIZE_HANDLE: "Invalid size handle",
    ErrorKind.INVALID_SLOT_HANDLE: "Invalid slot handle",
    ErrorKind.INVALID_CHAR_MAP_HANDLE: "Invalid char map handle",
    ErrorKind.INVALID_CACHE_HANDLE: "Invalid cache handle",
    ErrorKind.INVALID_STREAM_HANDLE: "Invalid stream handle",
    ErrorKind.TOO_MANY_DRIVERS: "Too many drivers",
    ErrorKind.TOO_MANY_EXTENSIONS: "Too many extensions",
    ErrorKind.OUT_OF_MEMORY: "Out of memory",
    ErrorKind.UNLISTED_OBJECT: "Unlisted object",
    ErrorKind.CANNOT_OPEN_STREAM: "Cannot open stream",
    ErrorKind.INVALID_STREAM_SEEK: "Invalid stream seek",
    ErrorKind.INVALID_STREAM_SKIP: "Invalid stream skip",
    ErrorKind.INVALID_STREAM_READ: "Invalid stream read",
    ErrorKind.INVALID_STREAM_OPERATION: "Invalid stream operation",
    ErrorKind.INVALID_FRAME_OPERATION: "Invalid frame operation",
    ErrorKind.NESTED_FRAME_ACCESS: "Nested frame access",
    ErrorKind.INVALID_FRAME_READ: "Invalid frame read",
    ErrorKind.RASTER_UNINITIALIZED: "Raster uninitialized",
    ErrorKind.RASTER_CORRUPTED: "Raster corrupted",
    ErrorKind.RASTER_OVERFLOW: "Raster overflow",
    ErrorKind.RASTER_NEGATIVE_HEIGHT: "Raster negative height",
    ErrorKind.TOO_MANY_CACHES: "Too many caches",
    ErrorKind.INVALID_OPCODE: "Invalid opcode",
    ErrorKind.TOO_FEW_ARGUMENTS: "Too few arguments",
    ErrorKind.STACK_OVERFLOW: "Stack overflow",
    ErrorKind.CODE_OVERFLOW: "Code overflow",
    ErrorKind.BAD_ARGUMENT: "Bad argument",
    ErrorKind.DIVIDE_BY_ZERO: "Divide by zero",
    ErrorKind.INVALID_REFERENCE: "Invalid reference",
    ErrorKind.DEBUG_OP_CODE: "Debug op code",
    ErrorKind.ENDF_IN_EXEC_STREAM: "ENDF in exec stream",
    ErrorKind.NESTED_DEFS: "Nested DEFS",
    ErrorKind.INVALID_CODE_RANGE: "Invalid code range",
    ErrorKind.EXECUTION_TOO_LONG: "Execution too long",
    ErrorKind.TOO_MANY_FUNCTION_DEFS: "Too many function defs",
    ErrorKind.TOO_MANY_INSTRUCTION_DEFS: "Too many instruction defs",
    ErrorKind.TABLE_MISSING: "Table missing",
    ErrorKind.HORIZ_HEADER_MISSING: "Horiz header missing",
    ErrorKind.LOCATIONS_MISSING: "Locations missing",
    ErrorKind.NAME_TABLE_MISSING: "Name table missing",
    ErrorKind.CMAP_TABLE_MISSING: "C map table missing",
    ErrorKind.HMTX_TABLE_MISSING: "Hmtx table missing",
    ErrorKind.POST_TABLE_MISSING: "Post table missing",
    ErrorKind.INVALID_HORIZ_METRICS: "Invalid horiz metrics",
    ErrorKind.INVALID_CHAR_MAP_FORMAT: "Invalid char map format",
    ErrorKind.INVALID_PPEM: "Invalid p pem",
    ErrorKind.INVALID_VERT_METRICS: "Invalid vert metrics",
    ErrorKind.COULD_NOT_FIND_CONTEXT: "Could not find context",
    ErrorKind.INVALID_POST_TABLE_FORMAT: "Invalid post table format",
    ErrorKind.INVALID_POST_TABLE: "Invalid post table",
    ErrorKind.SYNTAX: "Syntax",
    ErrorKind.STACK_UNDERFLOW: "Stack underflow",
    ErrorKind.IGNORE: "Ignore",
    ErrorKind.NO_UNICODE_GLYPH_NAME: "No unicode glyph name",
    ErrorKind.MISSING_STARTFONT_FIELD: "Missing startfont field",
    ErrorKind.MISSING_FONT_FIELD: "Missing font field",
    ErrorKind.MISSING_SIZE_FIELD: "Missing size field",
    ErrorKind.MISSING_FONTBOUNDINGBOX_FIELD: "Missing fontboundingbox field",
    ErrorKind.MISSING_CHARS_FIELD: "Missing chars field",
    ErrorKind.MISSING_STARTCHAR_FIELD: "Missing startchar field",
    ErrorKind.MISSING_ENCODING_FIELD: "Missing encoding field",
    ErrorKind.MISSING_BBX_FIELD: "Missing bbx field",
    ErrorKind.BBX_TOO_BIG: "Bbx too big",
    ErrorKind.CORRUPTED_FONT_HEADER: "Corrupted font header",
    ErrorKind.CORRUPTED_FONT_GLYPHS: "Corrupted font glyphs",
    ErrorKind.MAX: "Max",
    ErrorKind.UNEXPECTED_PIXEL_MODE: "Unexpected pixel mode",
    ErrorKind.INVALID_PATH: "Invalid path",
    ErrorKind.UNKNOWN: "Unknown",
}


class FreeTypeError(Exception):
    """An error from the font library, given as an :class:`ErrorKind` or a code."""

    def __init__(self, kind) -> None:
        if not isinstance(kind, ErrorKind):
            kind = ErrorKind.from_code(kind)
        super().__init__(kind.message())
        self.kind = kind

    def __str__(self) -> str:
        return self.kind.message()