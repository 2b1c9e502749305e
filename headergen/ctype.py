"""C type tree produced by the translator, and its rendering to C syntax.

A translated type is a :class:`CTypeNamed`: a :data:`CType` paired with
the declarator name it is declared under. Rendering the pair places the
name where C wants it::

    CTypeNamed("count", Native("uint32_t"))                -> "uint32_t count"
    CTypeNamed("data", Pointer(Native("uint8_t"), CONST))  -> "const uint8_t* data"
    CTypeNamed("", FunctionDeclarator("cb", [...], Void()))  -> "void (*cb)(int32_t x)"

Function declarators carry their declarator text themselves, because C
puts the identifier inside the parentheses. The text may be a bare name
or a whole function head (``make_cb(int32_t seed)``), which is how a
function returning a function pointer is rendered.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union


class PtrKind(enum.Enum):
    CONST = "const"
    MUTABLE = "mut"


@dataclass(frozen=True)
class Void:
    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True)
class Native:
    """A primitive or fixed-width C type: ``int32_t``, ``unsigned long``."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Mapping:
    """A user-defined type, trusted to be declared in some header."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer:
    inner: CType
    kind: PtrKind = PtrKind.MUTABLE

    def __str__(self) -> str:
        inner = str(self.inner)
        if self.kind is PtrKind.MUTABLE:
            return f"{inner}*"
        # Pointer to a const pointer: the qualifier binds to the inner "*".
        if isinstance(self.inner, Pointer):
            return f"{inner} const*"
        return f"const {inner}*"


@dataclass(frozen=True)
class FunctionDeclarator:
    """A function pointer with its declarator text folded in.

    :param inner: What goes inside ``(*...)``: a name, or a function head.
    :param args: Parameters, each with its own declarator name.
    :param return_type: The function pointer's return type.
    """

    inner: str
    args: tuple[CTypeNamed, ...] = field(default_factory=tuple)
    return_type: CType = field(default_factory=Void)

    def __str__(self) -> str:
        params = ", ".join(str(a) for a in self.args) if self.args else "void"
        return f"{self.return_type} (*{self.inner})({params})"


CType = Union[Void, Native, Mapping, Pointer, FunctionDeclarator]


@dataclass(frozen=True)
class CTypeNamed:
    """A C type with its associated declarator name (may be empty)."""

    name: str
    ctype: CType

    def __str__(self) -> str:
        if isinstance(self.ctype, FunctionDeclarator) or not self.name:
            return str(self.ctype)
        return f"{self.ctype} {self.name}"


def dependencies(ctype: CType) -> set[str]:
    """Names of user-defined types referenced anywhere in ``ctype``."""
    if isinstance(ctype, Mapping):
        return {ctype.name}
    if isinstance(ctype, Pointer):
        return dependencies(ctype.inner)
    if isinstance(ctype, FunctionDeclarator):
        deps = dependencies(ctype.return_type)
        for arg in ctype.args:
            deps |= dependencies(arg.ctype)
        return deps
    return set()
