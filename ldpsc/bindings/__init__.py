"""
C prototype bindings: lexer, declaration model and parser
"""

from .c_ast import Qualifier, CType, Param, FuncDecl
from .c_parser import Parser, parse_type, parse_function, parse_declarations

__all__ = [
    'Qualifier', 'CType', 'Param', 'FuncDecl',
    'Parser', 'parse_type', 'parse_function', 'parse_declarations',
]
