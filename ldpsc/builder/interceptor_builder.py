"""
Interceptor Builder - renders parsed prototypes as C interceptor functions.

Each interceptor has the exact signature of the prototype it replaces and:
1. resolves the real implementation with dlsym(RTLD_NEXT, name)
2. forwards the call with all parameters in order
3. writes one fprintf log line with the arguments (and result)
4. returns the real result

With a log file configured, the generated code opens the file in append
mode around every single log line and closes it right after. Interceptors
run inside arbitrary, possibly forking, processes, so no FILE handle is
ever kept between calls.
"""

from typing import Iterable, List, Optional

from ..bindings.c_ast import FuncDecl
from ..config import Config
from ..logger import logger

INDENT = '    '


def c_string_literal(text: str) -> str:
    """Quote text as a C string literal.

    Printable ASCII is kept as is; every other UTF-8 byte becomes a
    three-digit octal escape so a following digit can't extend it.
    ``?`` is escaped to rule out trigraphs.
    """
    parts = []
    for byte in text.encode('utf-8'):
        ch = chr(byte)
        if ch in '\\"?':
            parts.append('\\' + ch)
        elif 0x20 <= byte < 0x7f:
            parts.append(ch)
        else:
            parts.append(f'\\{byte:03o}')
    return '"' + ''.join(parts) + '"'


def unique_local(base: str, taken: set) -> str:
    """Pick a local variable name that does not shadow any name in taken"""
    name = base
    while name in taken:
        name += '_'
    taken.add(name)
    return name


class InterceptorBuilder:
    """Generate interceptor definitions for FuncDecl nodes"""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def log_format(self, decl: FuncDecl) -> str:
        """C string literal passed to fprintf for decl.

        e.g. ``"read(%d, \\"%s\\", %zd) = %zd\\n"``
        """
        tokens = ', '.join(p.type.format_specifier() for p in decl.params)
        text = f"{decl.name}({tokens})"
        if not decl.return_type.is_void():
            text += f" = {decl.return_type.format_specifier()}"
        return f'"{text}\\n"'

    def log_arguments(self, decl: FuncDecl, result: Optional[str]) -> List[str]:
        """Expressions passed after the format: parameters, then the result"""
        args = [p.type.format_argument(p.name) for p in decl.params]
        if result is not None:
            args.append(decl.return_type.format_argument(result))
        return args

    def build(self, decl: FuncDecl) -> str:
        """Render one interceptor definition, terminated by a newline.

        Args:
            decl: Parsed prototype

        Returns:
            C source text of the function definition
        """
        keep_result = not decl.return_type.is_void()

        taken = set(decl.param_names)
        original = unique_local(f"original_{decl.name}", taken)
        output = unique_local('output', taken)
        result = unique_local('result', taken) if keep_result else None

        body = [f'{decl.signature(original)} = dlsym(RTLD_NEXT, "{decl.name}");']

        call = f"{original}({', '.join(decl.param_names)})"
        if keep_result:
            body.append(f"{decl.return_type.declare(result)} = {call};")
        else:
            body.append(f"{call};")

        fprintf_args = [output, self.log_format(decl)] + self.log_arguments(decl, result)
        fprintf = f"fprintf({', '.join(fprintf_args)});"

        if self.config.logs_to_stderr:
            body.append(f"FILE *{output} = stderr;")
            body.append(fprintf)
        else:
            path = c_string_literal(self.config.log_path)
            body.append(f'FILE *{output} = fopen({path}, "a");')
            body.append(f"if ({output} != NULL) {{")
            body.append(INDENT + fprintf)
            body.append(INDENT + f"fclose({output});")
            body.append("}")

        if keep_result:
            body.append(f"return {result};")

        lines = [decl.signature() + ' {']
        lines.extend(INDENT + line for line in body)
        lines.append('}')

        logger.debug("Built interceptor", name=decl.name, keeps_result=keep_result)
        return '\n'.join(lines) + '\n'

    def build_all(self, decls: Iterable[FuncDecl]) -> List[str]:
        """Render definitions for decls, preserving order"""
        return [self.build(decl) for decl in decls]


def build_interceptor(decl: FuncDecl, config: Optional[Config] = None) -> str:
    """Convenience wrapper around InterceptorBuilder.build"""
    return InterceptorBuilder(config).build(decl)
