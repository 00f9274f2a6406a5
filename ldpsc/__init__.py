"""
ldpsc - LD_PRELOAD stub creator

Turns a list of C function prototypes into C source for interceptor
functions: each one resolves the real symbol with dlsym(RTLD_NEXT, ...),
forwards the call, logs arguments and result, and returns the result.

Usage:
    from ldpsc import transform, Config

    source = transform(b"size_t read(int fd, char *buf, size_t count);",
                       Config(log_path="/tmp/calls.log"))
"""

__version__ = '0.1.0'

from .config import Config, STDERR_SENTINEL
from .errors import (
    ParseError, LexicalError, TypeParseError, DeclarationSyntaxError,
    IncompleteInputError, BuildError,
)
from .bindings import Qualifier, CType, Param, FuncDecl, parse_declarations
from .builder import InterceptorBuilder
from .transform import transform, assemble

__all__ = [
    'Config', 'STDERR_SENTINEL',
    'ParseError', 'LexicalError', 'TypeParseError', 'DeclarationSyntaxError',
    'IncompleteInputError', 'BuildError',
    'Qualifier', 'CType', 'Param', 'FuncDecl', 'parse_declarations',
    'InterceptorBuilder', 'transform', 'assemble',
]
