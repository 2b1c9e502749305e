"""Render exported declarations as C and accumulate them per header.

Each emitter checks whether its declaration is exported, renders it,
records the user-defined types it references, and appends the text to the
declaration's home header in a :class:`HeaderState`. A declaration that
is not exported is skipped; one that is exported but cannot be expressed
in C raises :class:`~headergen.errors.BindgenError`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from headergen import attrs
from headergen.ctype import CType, CTypeNamed, dependencies
from headergen.errors import BindgenError, Level
from headergen.ir import (
    Declaration,
    Enum,
    Function,
    NeverType,
    Struct,
    TypeAlias,
    TypeExpr,
)
from headergen.routing import header_path
from headergen.translate import NEVER_RETURNS, param_name, translate

logger = logging.getLogger(__name__)

# Calling conventions a C caller can use.
C_ABIS = frozenset({"C", "cdecl", "stdcall", "fastcall", "system"})

# Indentation of enum variants and struct fields.
INDENT = "\t"


class Outcome(enum.Enum):
    EMITTED = "emitted"
    SKIPPED = "skipped"


@dataclass
class HeaderState:
    """Everything accumulated over one run, keyed by header path.

    :param lib_name: Library name, used to route the root module.
    :param decls: Home header of every exported type name.
    :param deps: Type names referenced from each header.
    :param outputs: Accumulated declaration text of each header.
    """

    lib_name: str = "backend"
    decls: dict[str, str] = field(default_factory=dict)
    deps: dict[str, set[str]] = field(default_factory=dict)
    outputs: dict[str, str] = field(default_factory=dict)
    finalised: bool = False

    def header(self, module: Sequence[str]) -> str:
        return header_path(module, self.lib_name)

    def add_dependencies(self, header: str, ctype: CType) -> None:
        names = dependencies(ctype)
        if names:
            self.deps.setdefault(header, set()).update(names)

    def append(self, header: str, text: str) -> None:
        self.outputs[header] = self.outputs.get(header, "") + text

    def declare(self, name: str, header: str) -> None:
        self.decls[name] = header
        logger.debug("declared %s in %s", name, header)


def emit(state: HeaderState, item: Declaration, module: Sequence[str]) -> Outcome:
    """Dispatch a declaration to the emitter for its kind."""
    if isinstance(item, TypeAlias):
        return emit_type_alias(state, item, module)
    if isinstance(item, Enum):
        return emit_enum(state, item, module)
    if isinstance(item, Struct):
        return emit_struct(state, item, module)
    if isinstance(item, Function):
        return emit_function(state, item, module)
    raise BindgenError(f"cannot emit {type(item).__name__} declarations", Level.BUG)


def emit_type_alias(state: HeaderState, item: Declaration, module: Sequence[str]) -> Outcome:
    """Convert ``type A = B;`` into ``typedef B A;``.

    Generic aliases have no concrete C equivalent and are skipped.
    """
    if not isinstance(item, TypeAlias):
        raise BindgenError("`emit_type_alias` called on wrong declaration", Level.BUG, item.span)
    if item.generics:
        logger.debug("skipping generic type alias %s", item.name)
        return Outcome.SKIPPED

    header = state.header(module)
    new_type = _translate(item.type, item.name, item)
    state.add_dependencies(header, new_type.ctype)

    state.append(header, f"{attrs.docs(item.attrs)}typedef {new_type};\n\n")
    state.declare(item.name, header)
    return Outcome.EMITTED


def emit_enum(state: HeaderState, item: Declaration, module: Sequence[str]) -> Outcome:
    """Convert a ``#[repr(C)]`` enum with unit variants into a C enum.

    Variants are prefixed with the enum name and kept in source order,
    which fixes their discriminant values.
    """
    if not isinstance(item, Enum):
        raise BindgenError("`emit_enum` called on wrong declaration", Level.BUG, item.span)

    repr_c, docs = attrs.scan(item.attrs, attrs.check_repr_c, attrs.doc_fragment)
    if not repr_c:
        logger.debug("skipping enum %s: not #[repr(C)]", item.name)
        return Outcome.SKIPPED
    if item.generics:
        raise BindgenError("can not handle parameterized `#[repr(C)]` enums", span=item.span)

    lines = [docs, f"typedef enum {item.name} {{\n"]
    for variant in item.variants:
        if not variant.is_unit:
            raise BindgenError(
                "can not handle `#[repr(C)]` enums with non-unit variants",
                span=variant.span or item.span,
            )
        lines.append(attrs.docs(variant.attrs, INDENT))
        value = f" = {variant.discriminant}" if variant.discriminant is not None else ""
        lines.append(f"{INDENT}{item.name}_{variant.name}{value},\n")
    lines.append(f"}} {item.name};\n\n")

    header = state.header(module)
    state.append(header, "".join(lines))
    state.declare(item.name, header)
    return Outcome.EMITTED


def emit_struct(state: HeaderState, item: Declaration, module: Sequence[str]) -> Outcome:
    """Convert a ``#[repr(C)]`` struct into a C struct.

    A struct with a single positional field becomes an opaque
    ``typedef struct Name Name;``; its field is never exposed.
    """
    if not isinstance(item, Struct):
        raise BindgenError("`emit_struct` called on wrong declaration", Level.BUG, item.span)

    repr_c, docs = attrs.scan(item.attrs, attrs.check_repr_c, attrs.doc_fragment)
    if not repr_c:
        logger.debug("skipping struct %s: not #[repr(C)]", item.name)
        return Outcome.SKIPPED
    if item.generics:
        raise BindgenError("can not handle parameterized `#[repr(C)]` structs", span=item.span)

    header = state.header(module)
    lines = [docs, f"typedef struct {item.name}"]
    if item.kind == "named":
        lines.append(" {\n")
        for f in item.fields:
            if f.name is None:
                raise BindgenError("named struct has a positional field", Level.BUG, f.span or item.span)
            lines.append(attrs.docs(f.attrs, INDENT))
            ty = _translate(f.type, f.name, item)
            state.add_dependencies(header, ty.ctype)
            lines.append(f"{INDENT}{ty};\n")
        lines.append("}")
    elif item.kind == "tuple" and len(item.fields) == 1:
        pass
    else:
        raise BindgenError(
            "can not handle unit or tuple `#[repr(C)]` structs with >1 members",
            span=item.span,
        )
    lines.append(f" {item.name};\n\n")

    state.append(header, "".join(lines))
    state.declare(item.name, header)
    return Outcome.EMITTED


def emit_function(state: HeaderState, item: Declaration, module: Sequence[str]) -> Outcome:
    """Convert a ``#[no_mangle]`` function with a C ABI into a C prototype."""
    if not isinstance(item, Function):
        raise BindgenError("`emit_function` called on wrong declaration", Level.BUG, item.span)

    no_mangle, docs = attrs.scan(item.attrs, attrs.check_no_mangle, attrs.doc_fragment)
    if not no_mangle:
        logger.debug("skipping function %s: not #[no_mangle]", item.name)
        return Outcome.SKIPPED
    if item.abi not in C_ABIS:
        logger.debug("skipping function %s: %s ABI", item.name, item.abi)
        return Outcome.SKIPPED
    if item.generics:
        raise BindgenError("can not handle parameterized extern functions", span=item.span)

    header = state.header(module)

    args = []
    for param in item.params:
        try:
            name = param_name(param, item.name)
        except BindgenError as exc:
            exc.span = exc.span or item.span
            raise
        c_ty = _translate(param.type, name, item)
        state.add_dependencies(header, c_ty.ctype)
        args.append(str(c_ty))

    # The name and parameters go inside the return type's declarator, which
    # matters when the return type is itself a function pointer.
    head = f"{item.name}({', '.join(args) if args else 'void'})"

    if item.output is None:
        declaration = f"void {head}"
    elif isinstance(item.output, NeverType):
        raise BindgenError(NEVER_RETURNS, span=item.span)
    else:
        ret = _translate(item.output, head, item)
        state.add_dependencies(header, ret.ctype)
        declaration = str(ret)

    state.append(header, f"{docs}{declaration};\n\n")
    return Outcome.EMITTED


def _translate(ty: TypeExpr, assoc: str, item: Declaration) -> CTypeNamed:
    """Translate, attaching the declaration's span to any error."""
    try:
        return translate(ty, assoc)
    except BindgenError as exc:
        if exc.span is None:
            exc.span = item.span
        raise
