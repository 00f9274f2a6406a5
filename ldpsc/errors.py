"""
Error types raised while turning prototypes into interceptor source

Parse errors carry the offset into the input buffer where parsing stopped,
plus the 1-based line and column derived from it. Every parse error aborts
the whole transformation.
"""

from typing import Optional


def offset_to_line_col(source: str, offset: int):
    """Convert a buffer offset into a 1-based (line, column) pair."""
    offset = max(0, min(offset, len(source)))
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1


class ParseError(ValueError):
    """Base class for everything the declaration parser can reject"""

    kind = 'parse error'

    def __init__(self, message: str, offset: int = 0, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        if source is not None:
            self.line, self.column = offset_to_line_col(source, offset)
        else:
            self.line, self.column = None, None

    def __str__(self):
        if self.line is None:
            return f"{self.kind} at offset {self.offset}: {self.message}"
        return f"{self.kind} at line {self.line}, column {self.column}: {self.message}"


class LexicalError(ParseError):
    """A character does not belong to any class expected at this position"""

    kind = 'lexical error'


class TypeParseError(ParseError):
    """Unrecognized qualifier/specifier token or unsupported type shape"""

    kind = 'type error'


class DeclarationSyntaxError(ParseError):
    """Missing delimiter, function body, or otherwise malformed prototype"""

    kind = 'syntax error'


class IncompleteInputError(DeclarationSyntaxError):
    """The buffer ended in the middle of a token or declaration"""

    kind = 'unexpected end of input'


class BuildError(RuntimeError):
    """No C compiler could turn the generated source into a shared library"""
