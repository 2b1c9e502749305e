"""Load a module tree of FFI declarations from JSON.

This is the reading side of the ``headergen.ir`` model, for front-ends
that dump declarations as JSON instead of building the dataclasses
directly. A minimal document::

    {
      "name": "ffi",
      "items": [
        {"kind": "struct", "name": "Point", "attrs": [{"name": "repr", "items": ["C"]}],
         "fields": [{"name": "x", "type": "i32"}, {"name": "y", "type": "i32"}]},
        {"kind": "function", "name": "origin", "abi": "C", "attrs": ["no_mangle"],
         "output": "Point"},
        {"kind": "module", "name": "ipc", "items": []}
      ]
    }

Types are a ``"::"``-separated path string or a dict with a ``kind`` of
``path``, ``ptr``, ``array``, ``fn``, ``tuple``, ``never``, ``ref`` or
``slice``. Attributes are a bare name (word attribute) or a dict.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from headergen.ir import (
    ArrayType,
    Attribute,
    BareFnType,
    Declaration,
    Enum,
    Field,
    Function,
    Module,
    NeverType,
    Param,
    PathType,
    PtrType,
    RefType,
    SliceType,
    Span,
    Struct,
    TupleType,
    TypeAlias,
    TypeExpr,
    Variant,
)


def _require(d: dict[str, Any], key: str, what: str) -> Any:
    if key not in d:
        raise ValueError(f"{what} is missing required key {key!r}: {d!r}")
    return d[key]


def _type_from(data: Any) -> TypeExpr:
    """Build a TypeExpr from its JSON form."""
    if isinstance(data, str):
        if data == "()":
            return TupleType()
        if data == "!":
            return NeverType()
        return PathType(data.split("::"))
    if not isinstance(data, dict):
        raise ValueError(f"type must be a string or an object: {data!r}")

    kind = _require(data, "kind", "type")
    if kind == "path":
        return PathType(
            list(_require(data, "segments", "path type")),
            [_type_from(a) for a in data.get("generic_args", [])],
        )
    elif kind == "ptr":
        return PtrType(_type_from(_require(data, "inner", "pointer type")), bool(data.get("mutable", False)))
    elif kind == "array":
        return ArrayType(_type_from(_require(data, "element", "array type")), _require(data, "length", "array type"))
    elif kind == "fn":
        output = data.get("output")
        return BareFnType(
            [_param_from(p) for p in data.get("params", [])],
            _type_from(output) if output is not None else None,
            list(data.get("lifetimes", [])),
        )
    elif kind == "tuple":
        return TupleType([_type_from(e) for e in data.get("elements", [])])
    elif kind == "never":
        return NeverType()
    elif kind == "ref":
        return RefType(
            _type_from(_require(data, "inner", "reference type")),
            bool(data.get("mutable", False)),
            data.get("lifetime"),
        )
    elif kind == "slice":
        return SliceType(_type_from(_require(data, "element", "slice type")))
    raise ValueError(f"unknown type kind {kind!r}")


def _attr_from(data: Any) -> Attribute:
    """Build an Attribute from a bare name or a dict."""
    if isinstance(data, str):
        return Attribute.word(data)
    if not isinstance(data, dict):
        raise ValueError(f"attribute must be a string or an object: {data!r}")
    name = _require(data, "name", "attribute")
    if "items" in data:
        return Attribute.nested(name, [_attr_from(i) for i in data["items"]])
    if "value" in data:
        return Attribute(name, "name_value", value=data["value"])
    return Attribute.word(name)


def _attrs_from(data: dict[str, Any]) -> list[Attribute]:
    attrs = [_attr_from(a) for a in data.get("attrs", [])]
    # "docs" is shorthand for one doc attribute per line.
    attrs.extend(Attribute.doc(line) for line in data.get("docs", []))
    return attrs


def _span_from(data: dict[str, Any]) -> Span | None:
    span = data.get("span")
    if span is None:
        return None
    return Span(_require(span, "file", "span"), _require(span, "line", "span"), span.get("column"))


def _param_from(data: dict[str, Any]) -> Param:
    return Param(data.get("pattern", data.get("name", "")), _type_from(_require(data, "type", "parameter")))


def _field_from(data: dict[str, Any]) -> Field:
    return Field(data.get("name"), _type_from(_require(data, "type", "field")), _attrs_from(data), _span_from(data))


def _variant_from(data: dict[str, Any]) -> Variant:
    discriminant = data.get("discriminant")
    return Variant(
        _require(data, "name", "variant"),
        [_field_from(f) for f in data.get("fields", [])],
        _attrs_from(data),
        str(discriminant) if discriminant is not None else None,
        _span_from(data),
    )


def _decl_from(data: dict[str, Any]) -> Declaration | Module:
    """Build a declaration or nested module from its JSON form."""
    if not isinstance(data, dict):
        raise ValueError(f"item must be an object: {data!r}")
    kind = _require(data, "kind", "item")
    if kind == "module":
        return module_from_dict(data)

    name = _require(data, "name", f"{kind} item")
    common: dict[str, Any] = {
        "attrs": _attrs_from(data),
        "generics": list(data.get("generics", [])),
        "public": bool(data.get("public", True)),
        "span": _span_from(data),
    }
    if kind == "type":
        return TypeAlias(name, _type_from(_require(data, "type", "type alias")), **common)
    elif kind == "enum":
        return Enum(name, [_variant_from(v) for v in data.get("variants", [])], **common)
    elif kind == "struct":
        fields = [_field_from(f) for f in data.get("fields", [])]
        default_kind = "tuple" if fields and all(f.name is None for f in fields) else "named"
        return Struct(name, fields, data.get("struct_kind", default_kind), **common)
    elif kind == "function":
        output = data.get("output")
        return Function(
            name,
            [_param_from(p) for p in data.get("params", [])],
            _type_from(output) if output is not None else None,
            data.get("abi", "Rust"),
            **common,
        )
    raise ValueError(f"unknown item kind {kind!r}")


def module_from_dict(data: dict[str, Any]) -> Module:
    """Build a Module, and everything below it, from a JSON-decoded dict."""
    if not isinstance(data, dict):
        raise ValueError(f"module must be an object: {data!r}")
    return Module(_require(data, "name", "module"), [_decl_from(i) for i in data.get("items", [])])


def module_from_json(text: str) -> Module:
    """Parse a JSON document into a Module."""
    return module_from_dict(json.loads(text))


def load_module(path: str | Path) -> Module:
    """Read and parse a JSON declaration file."""
    return module_from_json(Path(path).read_text(encoding="utf-8"))
