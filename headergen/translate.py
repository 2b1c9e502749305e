"""Translate source type expressions into C types.

Entry point is :func:`translate`, which pairs the translated type with the
name it will be declared under. Function-pointer types need that name to
render correctly, so they can only be translated through it;
:func:`translate_anon` rejects them.
"""

from __future__ import annotations

import re

from headergen.ctype import (
    CType,
    CTypeNamed,
    FunctionDeclarator,
    Mapping,
    Native,
    Pointer,
    PtrKind,
    Void,
)
from headergen.errors import BindgenError, Level
from headergen.ir import (
    ArrayType,
    BareFnType,
    NeverType,
    Param,
    PathType,
    PtrType,
    TupleType,
    TypeExpr,
)

# Primitive types of the source language.
PRIMITIVE_TYPE_MAP: dict[str, str] = {
    "f32": "float",
    "f64": "double",
    "i8": "int8_t",
    "i16": "int16_t",
    "i32": "int32_t",
    "i64": "int64_t",
    "isize": "intptr_t",
    "u8": "uint8_t",
    "u16": "uint16_t",
    "u32": "uint32_t",
    "u64": "uint64_t",
    "usize": "uintptr_t",
    "bool": "bool",
}

# C ABI mirror types, as exported by both `libc` and `std::os::raw`.
# `c_void` is handled separately since it maps to void, not a named type.
C_ABI_TYPE_MAP: dict[str, str] = {
    "c_char": "char",
    "c_schar": "signed char",
    "c_uchar": "unsigned char",
    "c_short": "short",
    "c_ushort": "unsigned short",
    "c_int": "int",
    "c_uint": "unsigned int",
    "c_long": "long",
    "c_ulong": "unsigned long",
    "c_longlong": "long long",
    "c_ulonglong": "unsigned long long",
    "c_float": "float",
    "c_double": "double",
}

C_ABI_MODULES = ("libc", "std::os::raw")

NEVER_RETURNS = "values that never return cannot cross into C"

_IDENT_RE = re.compile(r"^(?:mut\s+)?([A-Za-z_][A-Za-z0-9_]*)$")


def translate(ty: TypeExpr, assoc: str) -> CTypeNamed:
    """Turn a type with an associated declarator name into a C type.

    :param ty: Source type expression.
    :param assoc: Declarator placed next to the type. For function
        pointers this ends up inside ``(*...)`` and may be a whole
        function head.
    :raises BindgenError: If the type cannot be expressed in C.
    """
    if isinstance(ty, BareFnType):
        return CTypeNamed("", fn_ptr_to_c(ty, assoc))
    return CTypeNamed(assoc, translate_anon(ty))


def translate_anon(ty: TypeExpr) -> CType:
    """Turn a type into a C type with no declarator attached."""
    if isinstance(ty, BareFnType):
        raise BindgenError(
            f"C function pointers must have a name or function declaration associated with them: `{ty}`"
        )
    if isinstance(ty, ArrayType):
        # [T; N] decays to a pointer; the length is dropped.
        return Pointer(translate_anon(ty.element), PtrKind.CONST)
    if isinstance(ty, PtrType):
        return Pointer(translate_anon(ty.inner), PtrKind.MUTABLE if ty.mutable else PtrKind.CONST)
    if isinstance(ty, PathType):
        return path_to_c(ty)
    if isinstance(ty, TupleType) and ty.is_unit:
        return Void()
    if isinstance(ty, NeverType):
        raise BindgenError(NEVER_RETURNS)
    raise BindgenError(f"can not handle the type `{ty}`")


def fn_ptr_to_c(fn_ty: BareFnType, inner: str) -> FunctionDeclarator:
    """Turn a function-pointer type into a C function declarator.

    ``fn(arg1: Ty1, ...) -> RetTy`` becomes ``RetTy (*inner)(Ty1 arg1, ...)``.
    """
    if fn_ty.lifetimes:
        raise BindgenError(f"can not handle lifetimes: `{fn_ty}`")

    args = tuple(translate(p.type, fn_ptr_param_name(p, str(fn_ty))) for p in fn_ty.params)
    return FunctionDeclarator(inner, args, return_type(fn_ty.output))


def return_type(output: TypeExpr | None) -> CType:
    """Translate a function return type. ``None`` means unit."""
    if output is None:
        return Void()
    if isinstance(output, NeverType):
        raise BindgenError(NEVER_RETURNS)
    return translate_anon(output)


def path_to_c(path: PathType) -> CType:
    """Convert a named type, possibly module-qualified, to a C type.

    Types behind modules are almost certainly custom types, which cannot
    work, except those of the C ABI mirror modules.
    """
    if not path.segments:
        raise BindgenError("invalid type", Level.BUG)
    if path.generic_args:
        raise BindgenError(f"can not handle the type `{path}`")

    if len(path.segments) > 1:
        module = "::".join(path.segments[:-1])
        if module in C_ABI_MODULES:
            return c_abi_ty_to_c(path.segments[-1])
        raise BindgenError(
            f"can not handle types in other modules (except `libc` and `std::os::raw`): `{path}`"
        )
    return primitive_ty_to_c(path.segments[0])


def c_abi_ty_to_c(name: str) -> CType:
    """Convert one of the C ABI mirror types; anything else maps over as-is."""
    if name == "c_void":
        return Void()
    if name in C_ABI_TYPE_MAP:
        return Native(C_ABI_TYPE_MAP[name])
    return Mapping(name)


def primitive_ty_to_c(name: str) -> CType:
    """Convert a single-segment type name.

    User-defined types are trusted to exist and to have a known layout.
    """
    if name == "()":
        return Void()
    if name in PRIMITIVE_TYPE_MAP:
        return Native(PRIMITIVE_TYPE_MAP[name])
    return c_abi_ty_to_c(name)


def fn_ptr_param_name(param: Param, fn_ty: str) -> str:
    """Declarator name of a function-pointer parameter; anonymous is allowed."""
    if param.pattern.strip() in ("", "_"):
        return ""
    return param_name(param, fn_ty)


def param_name(param: Param, fn_name: str) -> str:
    """Declarator name of a function parameter.

    Only by-value bindings to a plain identifier can be named in C.
    """
    match = _IDENT_RE.match(param.pattern.strip())
    if match is None:
        raise BindgenError(
            f"only supports by-value arguments: incorrect argument `{param.pattern}` "
            f"in function definition `{fn_name}`"
        )
    return match.group(1)
