"""headergen - C header generation from FFI declarations."""

from headergen.driver import Bindgen, write_outputs
from headergen.emit import HeaderState, Outcome
from headergen.errors import BindgenError, CyclicDependencyError, Level
from headergen.ir import (
    ArrayType,
    # Attributes
    Attribute,
    BareFnType,
    # Declarations
    Declaration,
    Enum,
    Field,
    Function,
    # Container
    Module,
    NeverType,
    Param,
    # Type expressions
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
from headergen.langs import (
    Lang,
    get_default_lang,
    get_lang,
    get_lang_info,
    is_lang_available,
    list_langs,
    register_lang,
)
from headergen.loader import load_module, module_from_dict, module_from_json
from headergen.translate import translate

__all__ = [
    # Types
    "PathType",
    "PtrType",
    "ArrayType",
    "Param",
    "BareFnType",
    "TupleType",
    "NeverType",
    "RefType",
    "SliceType",
    "TypeExpr",
    # Declarations
    "Attribute",
    "Field",
    "Variant",
    "Enum",
    "Struct",
    "Function",
    "TypeAlias",
    "Declaration",
    # Container
    "Module",
    "Span",
    # Errors
    "BindgenError",
    "CyclicDependencyError",
    "Level",
    # Generation
    "HeaderState",
    "Outcome",
    "translate",
    "Bindgen",
    "write_outputs",
    # Loading
    "load_module",
    "module_from_dict",
    "module_from_json",
    # Lang Protocol
    "Lang",
    # Lang API
    "get_default_lang",
    "get_lang",
    "get_lang_info",
    "is_lang_available",
    "list_langs",
    "register_lang",
]
