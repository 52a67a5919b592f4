"""Glyph outline traversal and FreeType error codes."""