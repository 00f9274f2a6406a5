"""
Transform a buffer of C prototypes into a preloadable C translation unit

    #define _GNU_SOURCE
    #include <dlfcn.h>
    #include <stdio.h>

    <interceptor 1>

    <interceptor 2>
    ...

The whole input is parsed before any text is produced, so a malformed
declaration anywhere yields an error and no output at all.
"""

from typing import List, Optional, Union

from .bindings.c_ast import FuncDecl
from .bindings.c_parser import parse_declarations
from .builder.interceptor_builder import InterceptorBuilder
from .config import Config
from .logger import logger

PREAMBLE = (
    "#define _GNU_SOURCE\n"
    "#include <dlfcn.h>\n"
    "#include <stdio.h>\n"
)


def assemble(decls: List[FuncDecl], config: Optional[Config] = None) -> str:
    """Render the translation unit for already-parsed declarations."""
    builder = InterceptorBuilder(config)
    parts = [PREAMBLE]
    for definition in builder.build_all(decls):
        parts.append('\n')
        parts.append(definition)
    return ''.join(parts)


def transform(content: Union[str, bytes, bytearray],
              config: Optional[Config] = None) -> str:
    """Parse prototypes and generate the interceptor source.

    Args:
        content: Prototype text (str or UTF-8 bytes)
        config: Generator settings; defaults log to stderr

    Returns:
        Complete C source text

    Raises:
        ParseError: If any declaration is malformed
    """
    decls = parse_declarations(content)
    text = assemble(decls, config)
    logger.info("Generated interceptors", count=len(decls))
    return text
