"""Intermediate representation of FFI source declarations.

These dataclasses are what a front-end hands to the header generator: the
declarations of a library's FFI surface (type aliases, enums, structs and
functions), grouped into modules, together with their attributes and type
expressions.

Every node renders back to source text with ``str()``. The translator uses
that for diagnostics and to recover parameter names from binding patterns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

# =============================================================================
# Locations and attributes
# =============================================================================


@dataclass
class Span:
    """Location of a declaration in its source file.

    :param file: Path of the source file.
    :param line: 1-based line number.
    :param column: 1-based column number, if known.
    """

    file: str
    line: int
    column: int | None = None

    def __str__(self) -> str:
        if self.column is None:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


AttrKind = Literal["word", "list", "name_value"]


@dataclass
class Attribute:
    """An attribute attached to a declaration, variant or field.

    Mirrors the three meta-item shapes of the source language:

    - ``word``: ``#[no_mangle]``
    - ``list``: ``#[repr(C)]``, nested meta-items in ``items``
    - ``name_value``: ``#[doc = "..."]``, literal in ``value``
    """

    name: str
    kind: AttrKind = "word"
    items: list[Attribute] = field(default_factory=list)
    value: str | None = None

    @classmethod
    def word(cls, name: str) -> Attribute:
        return cls(name)

    @classmethod
    def nested(cls, name: str, items: list[Attribute]) -> Attribute:
        return cls(name, "list", items=items)

    @classmethod
    def doc(cls, text: str) -> Attribute:
        """Doc-comment attribute. ``text`` excludes the trailing newline."""
        return cls("doc", "name_value", value=text)

    def meta(self) -> str:
        """Render the meta-item without the ``#[...]`` wrapper."""
        if self.kind == "list":
            return f"{self.name}({', '.join(i.meta() for i in self.items)})"
        if self.kind == "name_value":
            return f'{self.name} = "{self.value}"'
        return self.name

    def __str__(self) -> str:
        return f"#[{self.meta()}]"


# =============================================================================
# Type expressions
# =============================================================================


@dataclass
class PathType:
    """A named type, optionally module-qualified: ``u32``, ``libc::c_int``."""

    segments: list[str]
    generic_args: list[TypeExpr] = field(default_factory=list)

    def __str__(self) -> str:
        base = "::".join(self.segments)
        if self.generic_args:
            return f"{base}<{', '.join(str(a) for a in self.generic_args)}>"
        return base


@dataclass
class PtrType:
    """A raw pointer: ``*const T`` or ``*mut T``."""

    inner: TypeExpr
    mutable: bool = False

    def __str__(self) -> str:
        return f"*{'mut' if self.mutable else 'const'} {self.inner}"


@dataclass
class ArrayType:
    """A fixed-size array: ``[T; N]``."""

    element: TypeExpr
    length: int | str

    def __str__(self) -> str:
        return f"[{self.element}; {self.length}]"


@dataclass
class Param:
    """A function parameter.

    :param pattern: Source text of the binding pattern (``x``, ``mut x``,
        ``_``). Empty for anonymous parameters of function-pointer types.
    :param type: The parameter's type expression.
    """

    pattern: str
    type: TypeExpr

    def __str__(self) -> str:
        if not self.pattern:
            return str(self.type)
        return f"{self.pattern}: {self.type}"


@dataclass
class BareFnType:
    """A function-pointer type: ``extern "C" fn(x: i32) -> i32``."""

    params: list[Param] = field(default_factory=list)
    output: TypeExpr | None = None
    lifetimes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        prefix = f"for<{', '.join(self.lifetimes)}> " if self.lifetimes else ""
        sig = f"{prefix}fn({', '.join(str(p) for p in self.params)})"
        if self.output is not None:
            sig += f" -> {self.output}"
        return sig


@dataclass
class TupleType:
    """A tuple type. The empty tuple ``()`` is the unit type."""

    elements: list[TypeExpr] = field(default_factory=list)

    @property
    def is_unit(self) -> bool:
        return not self.elements

    def __str__(self) -> str:
        if len(self.elements) == 1:
            return f"({self.elements[0]},)"
        return f"({', '.join(str(e) for e in self.elements)})"


@dataclass
class NeverType:
    """The diverging type ``!``."""

    def __str__(self) -> str:
        return "!"


@dataclass
class RefType:
    """A reference: ``&'a T`` or ``&mut T``."""

    inner: TypeExpr
    mutable: bool = False
    lifetime: str | None = None

    def __str__(self) -> str:
        parts = ["&"]
        if self.lifetime:
            parts.append(f"{self.lifetime} ")
        if self.mutable:
            parts.append("mut ")
        parts.append(str(self.inner))
        return "".join(parts)


@dataclass
class SliceType:
    """A dynamically sized slice: ``[T]``."""

    element: TypeExpr

    def __str__(self) -> str:
        return f"[{self.element}]"


TypeExpr = Union[PathType, PtrType, ArrayType, BareFnType, TupleType, NeverType, RefType, SliceType]


# =============================================================================
# Declarations
# =============================================================================


@dataclass
class TypeAlias:
    """``type Name = Underlying;``"""

    name: str
    type: TypeExpr
    attrs: list[Attribute] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    public: bool = True
    span: Span | None = None

    def __str__(self) -> str:
        return f"type {self.name}{_generics(self.generics)} = {self.type}"


@dataclass
class Field:
    """A struct or variant field. ``name`` is None for positional fields."""

    name: str | None
    type: TypeExpr
    attrs: list[Attribute] = field(default_factory=list)
    span: Span | None = None

    def __str__(self) -> str:
        if self.name is None:
            return str(self.type)
        return f"{self.name}: {self.type}"


@dataclass
class Variant:
    """An enum variant.

    :param fields: Payload fields; empty for unit variants.
    :param discriminant: Source text of an explicit discriminant, if any.
    """

    name: str
    fields: list[Field] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)
    discriminant: str | None = None
    span: Span | None = None

    @property
    def is_unit(self) -> bool:
        return not self.fields

    def __str__(self) -> str:
        text = self.name
        if self.fields:
            if all(f.name is None for f in self.fields):
                text += f"({', '.join(str(f) for f in self.fields)})"
            else:
                text += f" {{ {', '.join(str(f) for f in self.fields)} }}"
        if self.discriminant is not None:
            text += f" = {self.discriminant}"
        return text


@dataclass
class Enum:
    """``enum Name { A, B = 2, ... }``"""

    name: str
    variants: list[Variant] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    public: bool = True
    span: Span | None = None

    def __str__(self) -> str:
        return f"enum {self.name}{_generics(self.generics)}"


StructKind = Literal["named", "tuple", "unit"]


@dataclass
class Struct:
    """A struct with named fields, positional fields, or none at all."""

    name: str
    fields: list[Field] = field(default_factory=list)
    kind: StructKind = "named"
    attrs: list[Attribute] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    public: bool = True
    span: Span | None = None

    def __str__(self) -> str:
        return f"struct {self.name}{_generics(self.generics)}"


@dataclass
class Function:
    """A free function.

    :param output: Return type, or None when the function returns unit
        implicitly.
    :param abi: Calling convention string: ``"C"``, ``"system"``, ...
        ``"Rust"`` for functions without an ``extern`` qualifier.
    """

    name: str
    params: list[Param] = field(default_factory=list)
    output: TypeExpr | None = None
    abi: str = "Rust"
    attrs: list[Attribute] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    public: bool = True
    span: Span | None = None

    def __str__(self) -> str:
        prefix = "" if self.abi == "Rust" else f'extern "{self.abi}" '
        sig = f"{prefix}fn {self.name}{_generics(self.generics)}({', '.join(str(p) for p in self.params)})"
        if self.output is not None:
            sig += f" -> {self.output}"
        return sig


Declaration = Union[TypeAlias, Enum, Struct, Function]


@dataclass
class Module:
    """A module: declarations and nested modules in source order."""

    name: str
    items: list[Declaration | Module] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Module({self.name}, {len(self.items)} items)"


def _generics(params: list[str]) -> str:
    return f"<{', '.join(params)}>" if params else ""
