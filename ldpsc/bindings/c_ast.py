"""
Declaration model for the C prototype parser

Types here are immutable: the parser builds them once and the interceptor
builder only reads them. Every node renders back to C source with ``str()``,
so a rendered signature re-parses to an equal node.

- Qualifier: const / restrict / volatile / _Atomic
- CType: qualifiers + one specifier keyword + pointer depth
- Param: (CType, name)
- FuncDecl: return CType + name + params
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Qualifier(Enum):
    """C type qualifier; the value is the keyword as written in source"""
    CONST = 'const'
    RESTRICT = 'restrict'
    VOLATILE = 'volatile'
    ATOMIC = '_Atomic'

    def __str__(self):
        return self.value


# printf conversions used when logging intercepted values
FMT_STRING = '\\"%s\\"'
FMT_INT = '%d'
FMT_SIZE = '%zd'
FMT_UNKNOWN = '{Unknown Type: %d}'
FMT_POINTER = '%p'


@dataclass(frozen=True)
class CType:
    """A qualified, possibly pointer, C type

    Note: only single-keyword specifiers are modeled; ``unsigned long`` and
    friends are rejected by the parser.
    """
    specifier: str
    qualifiers: Tuple[Qualifier, ...] = ()
    pointer: int = 0

    def __str__(self):
        parts = [str(q) for q in self.qualifiers]
        parts.append(self.specifier)
        text = ' '.join(parts)
        if self.pointer > 0:
            text += ' ' + '*' * self.pointer
        return text

    def is_void(self) -> bool:
        """True only for plain ``void``; ``void *`` is a value type"""
        return self.specifier == 'void' and self.pointer == 0

    def format_specifier(self) -> str:
        """printf conversion used to log a value of this type"""
        if self.specifier == 'char' and self.pointer == 1:
            return FMT_STRING
        if self.pointer == 0:
            if self.specifier == 'int':
                return FMT_INT
            if self.specifier == 'size_t':
                return FMT_SIZE
            return FMT_UNKNOWN
        return FMT_POINTER

    def format_argument(self, expr: str) -> str:
        """C expression passed to printf for a value of this type"""
        if self.format_specifier() == FMT_UNKNOWN:
            return f"(int){expr}"
        return expr

    def declare(self, name: str) -> str:
        """Render a declarator: ``int fd``, ``char *buf``"""
        if self.pointer > 0:
            return f"{self}{name}"
        return f"{self} {name}"


@dataclass(frozen=True)
class Param:
    """Function parameter"""
    type: CType
    name: str

    def __str__(self):
        return self.type.declare(self.name)


@dataclass(frozen=True)
class FuncDecl:
    """Function prototype (no body, no variadic marker)"""
    return_type: CType
    name: str
    params: Tuple[Param, ...] = field(default_factory=tuple)

    @property
    def param_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.params)

    def signature(self, pointer_name: Optional[str] = None) -> str:
        """Render the function header, optionally as a function pointer.

        Args:
            pointer_name: If given, render ``ret (*pointer_name)(params)``
                instead of ``ret name(params)``

        Returns:
            Signature text without a trailing ``;``
        """
        declarator = f"(*{pointer_name})" if pointer_name else self.name
        params = ', '.join(str(p) for p in self.params)
        return self.return_type.declare(f"{declarator}({params})")

    def __str__(self):
        return self.signature() + ';'
