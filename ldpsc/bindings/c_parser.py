"""
C prototype parser

Recursive-descent parser for a restricted subset of C declarations:

    declaration := type identifier '(' [param (',' param)*] ')' ';'
    param       := type identifier
    type        := (qualifier multispace)* specifier '*'*

Design:
- The whole input is buffered up front, so there is no "need more input"
  outcome at the top level: running out of input between declarations is
  the normal end, running out anywhere else is a syntax error
- Production order is fixed: qualifiers, then specifier, then pointer stars;
  return type, then name, then parameter list
- Any failure aborts the whole parse; callers never see a partial list
"""

from typing import List, Tuple, Union

from ..errors import (
    ParseError, LexicalError, TypeParseError, DeclarationSyntaxError,
    IncompleteInputError,
)
from ..logger import logger
from .c_ast import Qualifier, CType, Param, FuncDecl
from .c_token import (
    QUALIFIER_KEYWORDS, SPECIFIER_KEYWORDS, RESERVED_WORDS, WHITESPACE,
    NONDIGIT_CHARS, TOK_STAR, TOK_LPAREN, TOK_RPAREN, TOK_COMMA,
    TOK_SEMICOLON, TOK_LBRACE, describe_char,
)
from .lexer import identifier


def decode_source(content: Union[str, bytes, bytearray]) -> str:
    """Return the input buffer as text, decoding bytes as UTF-8.

    Raises:
        LexicalError: If the bytes are not valid UTF-8
    """
    if isinstance(content, str):
        return content
    try:
        return bytes(content).decode('utf-8')
    except UnicodeDecodeError as e:
        raise LexicalError(f"input is not valid UTF-8 ({e.reason})", e.start) from e


class Parser:
    """Parser state: the immutable source buffer and the current offset"""

    def __init__(self, source: str, pos: int = 0):
        self.source = source
        self.pos = pos
        self.length = len(source)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= self.length

    def peek(self) -> str:
        """Current character, or '' at end of input"""
        if self.pos >= self.length:
            return ''
        return self.source[self.pos]

    def skip_whitespace(self):
        while self.pos < self.length and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def fail(self, exc_type, message: str, pos: int = None):
        """Raise a parse error of the given kind at pos (default: current)"""
        if pos is None:
            pos = self.pos
        logger.debug("Parse failure", kind=exc_type.kind, offset=pos, reason=message)
        raise exc_type(message, pos, self.source)

    def peek_word(self) -> Tuple[str, int]:
        """Identifier-like word at the current offset without consuming it.

        Returns:
            (word, end) or ('', pos) if no word starts here
        """
        if self.peek() not in NONDIGIT_CHARS:
            return '', self.pos
        end = identifier(self.source, self.pos)
        return self.source[self.pos:end], end

    def expect(self, token: str):
        """Consume one punctuation character or fail"""
        ch = self.peek()
        if ch == token:
            self.pos += 1
            return
        if ch == '':
            self.fail(IncompleteInputError, f"expected '{token}', got end of input")
        self.fail(DeclarationSyntaxError, f"expected '{token}', got {describe_char(ch)}")

    # -------------------------------------------------------------------------
    # Productions
    # -------------------------------------------------------------------------

    def parse_type(self) -> CType:
        """Parse qualifiers, one specifier keyword, then pointer stars.

        Returns:
            CType for the parsed type; self.pos is left after the last star

        Raises:
            TypeParseError: No specifier from the fixed set, or a multi-word
                specifier such as ``unsigned long``
            IncompleteInputError: Input ends before a specifier is found
        """
        # 1. Qualifiers, each terminated by whitespace
        qualifiers = []
        while True:
            word, end = self.peek_word()
            if word not in QUALIFIER_KEYWORDS:
                break
            if end >= self.length:
                self.fail(IncompleteInputError,
                          f"expected type specifier after '{word}', got end of input", end)
            if self.source[end] not in WHITESPACE:
                break
            qualifiers.append(Qualifier(word))
            self.pos = end
            self.skip_whitespace()

        # 2. Exactly one specifier, whole token
        self.skip_whitespace()
        if self.at_end():
            self.fail(IncompleteInputError, "expected type specifier, got end of input")
        start = self.pos
        word, end = self.peek_word()
        if word not in SPECIFIER_KEYWORDS:
            if word in QUALIFIER_KEYWORDS:
                self.fail(TypeParseError, f"qualifier '{word}' must be followed by whitespace")
            if word:
                self.fail(TypeParseError, f"unknown type specifier '{word}'")
            self.fail(TypeParseError,
                      f"expected type specifier, got {describe_char(self.peek())}")
        self.pos = end
        self.skip_whitespace()

        following, _ = self.peek_word()
        if following in SPECIFIER_KEYWORDS:
            self.fail(TypeParseError,
                      f"multi-word type specifier '{word} {following}' is not supported",
                      start)

        # 3. Pointer stars, contiguous
        pointer = 0
        while self.peek() == TOK_STAR:
            pointer += 1
            self.pos += 1

        return CType(specifier=word, qualifiers=tuple(qualifiers), pointer=pointer)

    def parse_name(self, what: str) -> str:
        """Parse an identifier used as a function or parameter name"""
        if self.at_end():
            self.fail(IncompleteInputError, f"expected {what}, got end of input")
        start = self.pos
        try:
            end = identifier(self.source, start)
        except LexicalError as e:
            self.fail(LexicalError, f"expected {what}, got {describe_char(self.peek())}",
                      e.offset)
        name = self.source[start:end]
        if name in RESERVED_WORDS:
            self.fail(DeclarationSyntaxError,
                      f"keyword '{name}' cannot be used as a {what}", start)
        self.pos = end
        return name

    def parse_param(self) -> Param:
        if self.source.startswith('...', self.pos):
            self.fail(DeclarationSyntaxError, "variadic parameters are not supported")
        param_type = self.parse_type()
        self.skip_whitespace()
        name = self.parse_name('parameter name')
        return Param(param_type, name)

    def parse_function(self) -> FuncDecl:
        """Parse one prototype terminated by ';'.

        Returns:
            FuncDecl; self.pos is left just after the ';'
        """
        return_type = self.parse_type()
        self.skip_whitespace()
        name = self.parse_name('function name')
        self.skip_whitespace()
        self.expect(TOK_LPAREN)
        self.skip_whitespace()

        params = []
        if self.peek() != TOK_RPAREN:
            while True:
                params.append(self.parse_param())
                self.skip_whitespace()
                if self.peek() != TOK_COMMA:
                    break
                self.pos += 1
                self.skip_whitespace()

        self.expect(TOK_RPAREN)
        self.skip_whitespace()
        if self.peek() == TOK_LBRACE:
            self.fail(DeclarationSyntaxError,
                      f"function body not allowed for '{name}', expected ';'")
        self.expect(TOK_SEMICOLON)

        return FuncDecl(return_type=return_type, name=name, params=tuple(params))

    def parse_declarations(self) -> List[FuncDecl]:
        """Parse prototypes until only whitespace remains."""
        decls = []
        while True:
            self.skip_whitespace()
            if self.at_end():
                break
            decl = self.parse_function()
            logger.debug("Parsed declaration", name=decl.name, params=len(decl.params))
            decls.append(decl)
        return decls


# =============================================================================
# Functional entry points
# =============================================================================

def parse_type(source: str, pos: int = 0) -> Tuple[CType, int]:
    """Parse a type at pos; returns (CType, end offset)"""
    parser = Parser(source, pos)
    result = parser.parse_type()
    return result, parser.pos


def parse_function(source: str, pos: int = 0) -> Tuple[FuncDecl, int]:
    """Parse one prototype at pos; returns (FuncDecl, end offset)"""
    parser = Parser(source, pos)
    parser.skip_whitespace()
    result = parser.parse_function()
    return result, parser.pos


def parse_declarations(content: Union[str, bytes, bytearray]) -> List[FuncDecl]:
    """Parse a whole buffer of prototypes.

    Args:
        content: Text or UTF-8 bytes holding zero or more prototypes

    Returns:
        Declarations in source order

    Raises:
        ParseError: On the first malformed declaration; nothing is returned
    """
    source = decode_source(content)
    decls = Parser(source).parse_declarations()
    logger.debug("Parsed declaration stream", count=len(decls))
    return decls


__all__ = [
    'Parser', 'ParseError', 'decode_source',
    'parse_type', 'parse_function', 'parse_declarations',
]
