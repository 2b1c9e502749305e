"""Tests for the IR module."""

from headergen.ir import (
    ArrayType,
    Attribute,
    BareFnType,
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
    Variant,
)


class TestSpan:
    def test_location(self):
        span = Span("src/ffi.rs", 42, 10)
        assert span.file == "src/ffi.rs"
        assert str(span) == "src/ffi.rs:42:10"

    def test_location_without_column(self):
        span = Span("src/ffi.rs", 42)
        assert span.column is None
        assert str(span) == "src/ffi.rs:42"


class TestAttribute:
    def test_word(self):
        attr = Attribute.word("no_mangle")
        assert attr.kind == "word"
        assert str(attr) == "#[no_mangle]"

    def test_nested(self):
        attr = Attribute.nested("repr", [Attribute.word("C"), Attribute.word("packed")])
        assert attr.kind == "list"
        assert str(attr) == "#[repr(C, packed)]"

    def test_doc(self):
        attr = Attribute.doc("/// Frobnicates.")
        assert attr.kind == "name_value"
        assert attr.value == "/// Frobnicates."
        assert str(attr) == '#[doc = "/// Frobnicates."]'

    def test_items_default_to_empty(self):
        assert Attribute("no_mangle").items == []


class TestTypeExprs:
    def test_path(self):
        assert str(PathType(["u32"])) == "u32"

    def test_qualified_path(self):
        assert str(PathType(["std", "os", "raw", "c_int"])) == "std::os::raw::c_int"

    def test_generic_path(self):
        assert str(PathType(["Vec"], [PathType(["u8"])])) == "Vec<u8>"

    def test_const_pointer(self):
        assert str(PtrType(PathType(["u8"]))) == "*const u8"

    def test_mut_pointer(self):
        assert str(PtrType(PtrType(PathType(["u8"])), mutable=True)) == "*mut *const u8"

    def test_array(self):
        assert str(ArrayType(PathType(["u8"]), 32)) == "[u8; 32]"

    def test_bare_fn(self):
        fn = BareFnType([Param("x", PathType(["i32"]))], PathType(["bool"]))
        assert str(fn) == "fn(x: i32) -> bool"

    def test_bare_fn_anonymous_params(self):
        fn = BareFnType([Param("", PathType(["i32"]))])
        assert str(fn) == "fn(i32)"

    def test_bare_fn_with_lifetimes(self):
        fn = BareFnType([Param("s", RefType(PathType(["u8"]), lifetime="'a"))], lifetimes=["'a"])
        assert str(fn) == "for<'a> fn(s: &'a u8)"

    def test_unit(self):
        assert TupleType().is_unit
        assert str(TupleType()) == "()"

    def test_one_tuple(self):
        assert str(TupleType([PathType(["i32"])])) == "(i32,)"

    def test_pair(self):
        t = TupleType([PathType(["i32"]), PathType(["u8"])])
        assert not t.is_unit
        assert str(t) == "(i32, u8)"

    def test_never(self):
        assert str(NeverType()) == "!"

    def test_reference(self):
        assert str(RefType(PathType(["str"]), mutable=True, lifetime="'a")) == "&'a mut str"

    def test_slice(self):
        assert str(SliceType(PathType(["u8"]))) == "[u8]"


class TestDeclarations:
    def test_type_alias(self):
        alias = TypeAlias("Handle", PtrType(PathType(["c_void"]), mutable=True))
        assert str(alias) == "type Handle = *mut c_void"
        assert alias.public
        assert alias.generics == []

    def test_generic_type_alias(self):
        alias = TypeAlias("Wrapper", PathType(["T"]), generics=["T"])
        assert str(alias) == "type Wrapper<T> = T"

    def test_unit_variant(self):
        v = Variant("Red")
        assert v.is_unit
        assert str(v) == "Red"

    def test_variant_with_discriminant(self):
        assert str(Variant("Red", discriminant="4")) == "Red = 4"

    def test_tuple_variant(self):
        v = Variant("Code", [Field(None, PathType(["i32"]))])
        assert not v.is_unit
        assert str(v) == "Code(i32)"

    def test_struct_variant(self):
        v = Variant("Point", [Field("x", PathType(["i32"]))])
        assert str(v) == "Point { x: i32 }"

    def test_enum(self):
        e = Enum("Colour", [Variant("Red"), Variant("Green")])
        assert len(e.variants) == 2
        assert str(e) == "enum Colour"

    def test_struct(self):
        s = Struct("Point", [Field("x", PathType(["i32"])), Field("y", PathType(["i32"]))])
        assert s.kind == "named"
        assert str(s) == "struct Point"

    def test_tuple_struct(self):
        s = Struct("Handle", [Field(None, PathType(["u64"]))], kind="tuple")
        assert s.kind == "tuple"
        assert str(s.fields[0]) == "u64"

    def test_extern_function(self):
        f = Function("add", [Param("a", PathType(["i32"])), Param("b", PathType(["i32"]))], PathType(["i32"]), abi="C")
        assert str(f) == 'extern "C" fn add(a: i32, b: i32) -> i32'

    def test_rust_function(self):
        f = Function("helper")
        assert f.abi == "Rust"
        assert str(f) == "fn helper()"


class TestModule:
    def test_module(self):
        m = Module("ffi", [Struct("Point"), Module("ipc")])
        assert m.name == "ffi"
        assert len(m.items) == 2
        assert str(m) == "Module(ffi, 2 items)"

    def test_items_default_to_empty(self):
        assert Module("ffi").items == []
