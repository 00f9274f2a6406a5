"""
Token tables for the C prototype parser

Keyword sets and punctuation recognized by the restricted declaration grammar.
"""

# Type qualifiers, in the order the C standard lists them
QUALIFIER_KEYWORDS = ('const', 'restrict', 'volatile', '_Atomic')

# Single-token type specifiers accepted by the grammar
SPECIFIER_KEYWORDS = (
    'void', 'char', 'short', 'int', 'long', 'float', 'double',
    'signed', 'unsigned', '_Bool', '_Complex', 'size_t',
)

RESERVED_WORDS = frozenset(QUALIFIER_KEYWORDS) | frozenset(SPECIFIER_KEYWORDS)

# Punctuation
TOK_STAR = '*'
TOK_LPAREN = '('
TOK_RPAREN = ')'
TOK_COMMA = ','
TOK_SEMICOLON = ';'
TOK_LBRACE = '{'

# C "multispace": characters skipped between tokens
WHITESPACE = ' \t\r\n'

NONDIGIT_CHARS = frozenset('_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ')
DIGIT_CHARS = frozenset('0123456789')
HEX_DIGIT_CHARS = frozenset('0123456789abcdefABCDEF')


def describe_char(ch: str) -> str:
    """Printable description of a character for error messages"""
    if ch == '':
        return 'end of input'
    if ch in WHITESPACE:
        return repr(ch)
    return f"'{ch}'"
