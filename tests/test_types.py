"""Tests for the component interface model."""

from __future__ import annotations

from ktbindgen.types import (
    Argument,
    CallbackInterface,
    ComponentInterface,
    Constructor,
    Enum,
    FFIArgument,
    FFIType,
    Field,
    Function,
    MapType,
    Method,
    Object,
    OptionalType,
    PrimitiveKind,
    PrimitiveType,
    Record,
    RecordType,
    SequenceType,
    Variant,
    EnumType,
    ffi_type_of,
)

U16 = PrimitiveType(PrimitiveKind.UINT16)
I32 = PrimitiveType(PrimitiveKind.INT32)
STRING = PrimitiveType(PrimitiveKind.STRING)


def test_ffi_type_of() -> None:
    assert ffi_type_of(I32) == FFIType.INT32
    assert ffi_type_of(PrimitiveType(PrimitiveKind.BOOLEAN)) == FFIType.INT8
    assert ffi_type_of(STRING) == FFIType.RUST_BUFFER
    assert ffi_type_of(OptionalType(I32)) == FFIType.RUST_BUFFER


def test_ffi_symbol_names() -> None:
    ctor = Constructor(arguments=[Argument("start", U16)])
    meth = Method("get", return_type=U16)
    obj = Object("Counter", constructors=[ctor], methods=[meth])
    cbi = CallbackInterface("Logger")
    func = Function("hello", arguments=[Argument("name", STRING)], return_type=STRING)
    ci = ComponentInterface("geo", objects=[obj], callback_interfaces=[cbi], functions=[func])

    assert ci.ffi_function(func).name == "geo_hello"
    assert ci.ffi_function(func).arguments == (FFIArgument("name", FFIType.RUST_BUFFER),)
    assert ci.ffi_constructor(obj, ctor).name == "geo_Counter_new"
    assert ci.ffi_constructor(obj, ctor).return_type == FFIType.RUST_ARC_PTR
    assert ci.ffi_method(obj, meth).arguments[0] == FFIArgument("ptr", FFIType.RUST_ARC_PTR)
    assert ci.ffi_object_free(obj).name == "ffi_geo_Counter_object_free"
    assert ci.ffi_init_callback(cbi).name == "ffi_geo_Logger_init_callback"

    names = [f.name for f in ci.iter_ffi_function_definitions()]
    assert names[-4:] == [
        "ffi_geo_rustbuffer_alloc",
        "ffi_geo_rustbuffer_from_bytes",
        "ffi_geo_rustbuffer_free",
        "ffi_geo_rustbuffer_reserve",
    ]


def test_iter_types_expands_compounds_once() -> None:
    nested = MapType(STRING, SequenceType(OptionalType(I32)))
    ci = ComponentInterface(
        "a",
        functions=[
            Function("f", arguments=[Argument("m", nested)]),
            Function("g", return_type=nested),
        ],
    )
    types = list(ci.iter_types())
    assert types == [nested, STRING, SequenceType(OptionalType(I32)), OptionalType(I32), I32]


def test_contains_unsigned_follows_records_and_enums() -> None:
    inner = Record("Inner", fields=[Field("v", U16)])
    outer = Record("Outer", fields=[Field("inner", OptionalType(RecordType("Inner")))])
    wrapper = Enum("Wrapper", variants=[Variant("Some", fields=[Field("o", RecordType("Outer"))])])
    plain = Record("Plain", fields=[Field("s", STRING)])
    ci = ComponentInterface("a", records=[inner, outer, plain], enums=[wrapper])

    assert ci.contains_unsigned_types(outer)
    assert ci.contains_unsigned_types(wrapper)
    assert not ci.contains_unsigned_types(plain)


def test_contains_unsigned_terminates_on_cycles() -> None:
    node = Record("Node", fields=[Field("next", OptionalType(RecordType("Node"))), Field("v", I32)])
    ring = Enum("Ring", variants=[Variant("Link", fields=[Field("r", EnumType("Ring"))])])
    ci = ComponentInterface("a", records=[node], enums=[ring])

    assert not ci.contains_unsigned_types(node)
    assert not ci.contains_unsigned_types(ring)
