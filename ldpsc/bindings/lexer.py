"""
Lexer for C identifiers

Recognizes identifiers per the C17 grammar (section 6.4.2), including
universal character names (section 6.4.3).

Design: every production is a plain function ``production(source, pos)``
that returns the offset just past the recognized text. A production that
cannot match raises:
- LexicalError: the character at this position is not in the expected class
- IncompleteInputError: the buffer ended before the production completed
"""

from ..errors import LexicalError, IncompleteInputError
from .c_token import NONDIGIT_CHARS, DIGIT_CHARS, HEX_DIGIT_CHARS, describe_char


def _expect_more(source: str, pos: int, what: str):
    """Raise IncompleteInputError if the buffer is exhausted at pos"""
    if pos >= len(source):
        raise IncompleteInputError(f"expected {what}, got end of input", pos, source)


def _one_of(source: str, pos: int, chars, what: str) -> int:
    """Match exactly one character drawn from chars"""
    _expect_more(source, pos, what)
    if source[pos] not in chars:
        raise LexicalError(
            f"expected {what}, got {describe_char(source[pos])}", pos, source)
    return pos + 1


def nondigit(source: str, pos: int = 0) -> int:
    """Parse a `nondigit`: one ASCII letter or underscore"""
    return _one_of(source, pos, NONDIGIT_CHARS, 'letter or underscore')


def digit(source: str, pos: int = 0) -> int:
    """Parse a `digit`: one decimal digit"""
    return _one_of(source, pos, DIGIT_CHARS, 'digit')


def hexadecimal_digit(source: str, pos: int = 0) -> int:
    """Parse a `hexadecimal-digit`"""
    return _one_of(source, pos, HEX_DIGIT_CHARS, 'hexadecimal digit')


def hex_quad(source: str, pos: int = 0) -> int:
    """Parse a `hex-quad`: exactly four hexadecimal digits"""
    for _ in range(4):
        pos = hexadecimal_digit(source, pos)
    return pos


def universal_character_name(source: str, pos: int = 0) -> int:
    """Parse a `universal-character-name`

    Either ``\\u`` followed by one hex-quad, or ``\\U`` followed by two.

    Args:
        source: Input buffer
        pos: Offset of the leading backslash

    Returns:
        Offset just past the last hexadecimal digit

    Raises:
        LexicalError: Not a backslash-u/U escape, or a non-hex digit inside
        IncompleteInputError: Buffer ends before the escape is complete
    """
    _expect_more(source, pos, 'universal character name')
    if source[pos] != '\\':
        raise LexicalError(
            f"expected universal character name, got {describe_char(source[pos])}",
            pos, source)
    _expect_more(source, pos + 1, "'u' or 'U' after backslash")
    marker = source[pos + 1]
    if marker == 'u':
        quads = 1
    elif marker == 'U':
        quads = 2
    else:
        raise LexicalError(
            f"expected 'u' or 'U' after backslash, got {describe_char(marker)}",
            pos + 1, source)

    end = pos + 2
    for _ in range(quads):
        end = hex_quad(source, end)
    return end


def identifier_nondigit(source: str, pos: int = 0) -> int:
    """Parse an `identifier-nondigit`: a nondigit or a universal character name"""
    _expect_more(source, pos, 'identifier')
    if source[pos] == '\\':
        return universal_character_name(source, pos)
    if source[pos] not in NONDIGIT_CHARS:
        raise LexicalError(
            f"expected identifier, got {describe_char(source[pos])}", pos, source)
    return pos + 1


def identifier(source: str, pos: int = 0) -> int:
    """Parse an `identifier`

    One identifier-nondigit followed by any run of identifier-nondigits and
    digits. Consumption is maximal: the first character outside both classes
    (a stray or truncated backslash escape included) ends the token, and so
    does the end of the buffer.

    Returns:
        Offset of the first character not part of the identifier
    """
    end = identifier_nondigit(source, pos)
    length = len(source)
    while end < length:
        ch = source[end]
        if ch in NONDIGIT_CHARS or ch in DIGIT_CHARS:
            end += 1
        elif ch == '\\':
            try:
                end = universal_character_name(source, end)
            except (LexicalError, IncompleteInputError):
                break
        else:
            break
    return end


def scan_identifier(source: str, pos: int = 0):
    """Parse an identifier and return ``(text, end)``"""
    end = identifier(source, pos)
    return source[pos:end], end
