"""Tests for ktbindgen.oracle naming and dispatch."""

from __future__ import annotations

import pytest

from ktbindgen.compounds import MapCodeType, OptionalCodeType, SequenceCodeType
from ktbindgen.enum_ import EnumCodeType
from ktbindgen.errors import UnknownTypeError, UnreachableError
from ktbindgen.object_ import ObjectCodeType
from ktbindgen.oracle import kotlin_string, lower_camel_case, shouty_snake_case, upper_camel_case
from ktbindgen.primitives import PrimitiveCodeType, TimestampCodeType
from ktbindgen.types import (
    BooleanLiteral,
    EmptyMapLiteral,
    EmptySequenceLiteral,
    EnumType,
    FFIType,
    IntLiteral,
    MapType,
    NullLiteral,
    ObjectType,
    OptionalType,
    PrimitiveKind,
    PrimitiveType,
    SequenceType,
    StringLiteral,
)

U32 = PrimitiveType(PrimitiveKind.UINT32)


@pytest.mark.parametrize(
    "type_, expected",
    [
        (U32, PrimitiveCodeType),
        (PrimitiveType(PrimitiveKind.TIMESTAMP), TimestampCodeType),
        (EnumType("Direction"), EnumCodeType),
        (ObjectType("Counter"), ObjectCodeType),
        (OptionalType(U32), OptionalCodeType),
        (SequenceType(U32), SequenceCodeType),
        (MapType(PrimitiveType(PrimitiveKind.STRING), U32), MapCodeType),
    ],
)
def test_find_dispatches_on_type_variant(oracle, type_, expected) -> None:
    assert isinstance(oracle.find(type_), expected)


def test_find_rejects_unregistered_type(oracle) -> None:
    class Unregistered:
        pass

    with pytest.raises(UnknownTypeError, match="no code type registered"):
        oracle.find(Unregistered())


def test_find_is_a_pure_function(oracle) -> None:
    first = oracle.find(OptionalType(U32)).type_label(oracle)
    second = oracle.find(OptionalType(U32)).type_label(oracle)
    assert first == second == "UInt?"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("point", "Point"),
        ("shape_logger", "ShapeLogger"),
        ("HTTPServer", "HttpServer"),
        ("2d_point", "2DPoint"),
    ],
)
def test_class_name(oracle, name, expected) -> None:
    assert oracle.class_name(name) == expected


def test_fn_and_var_names_are_lower_camel_case(oracle) -> None:
    assert oracle.fn_name("log_shape") == "logShape"
    assert oracle.fn_name("from_string") == "fromString"
    assert oracle.var_name("start_value") == "startValue"


def test_var_name_escapes_keywords(oracle) -> None:
    assert oracle.var_name("object") == "`object`"
    assert oracle.var_name("when") == "`when`"
    # Already escaped names stay the same
    assert oracle.var_name("`object`") == "`object`"


def test_fn_name_escapes_keywords(oracle) -> None:
    assert oracle.fn_name("object") == "`object`"
    assert oracle.fn_name("fun") == "`fun`"
    assert oracle.fn_name("get_value") == "getValue"


def test_enum_variant_is_shouty_snake_case(oracle) -> None:
    assert oracle.enum_variant("North") == "NORTH"
    assert oracle.enum_variant("NorthEast") == "NORTH_EAST"
    assert oracle.enum_variant("north_east") == "NORTH_EAST"


def test_exception_name(oracle) -> None:
    assert oracle.exception_name("GeoError") == "GeoException"
    assert oracle.exception_name("Failure") == "Failure"


@pytest.mark.parametrize("name", ["shape_logger", "HTTPServer", "NorthEast", "v2_point"])
def test_naming_is_idempotent(name) -> None:
    for convert in (upper_camel_case, lower_camel_case, shouty_snake_case):
        once = convert(name)
        assert convert(once) == once


def test_ffi_type_labels(oracle) -> None:
    assert oracle.ffi_type_label(FFIType.UINT32) == "Int"
    assert oracle.ffi_type_label(FFIType.UINT64) == "Long"
    assert oracle.ffi_type_label(FFIType.RUST_ARC_PTR) == "Pointer"
    assert oracle.ffi_type_label(FFIType.RUST_BUFFER) == "RustBuffer.ByValue"
    assert oracle.ffi_type_label(FFIType.FOREIGN_CALLBACK) == "ForeignCallback"


def test_untyped_literals(oracle) -> None:
    assert oracle.untyped_literal(BooleanLiteral(True)) == "true"
    assert oracle.untyped_literal(BooleanLiteral(False)) == "false"
    assert oracle.untyped_literal(NullLiteral()) == "null"
    assert oracle.untyped_literal(EmptySequenceLiteral()) == "listOf()"
    assert oracle.untyped_literal(EmptyMapLiteral()) == "mapOf()"
    assert oracle.untyped_literal(StringLiteral("hi")) == '"hi"'


def test_untyped_literal_rejects_typed_literals(oracle) -> None:
    with pytest.raises(UnreachableError):
        oracle.untyped_literal(IntLiteral(1, PrimitiveType(PrimitiveKind.INT32)))


def test_kotlin_string_escapes_templates_and_quotes() -> None:
    assert kotlin_string('say "hi" to $name\n') == '"say \\"hi\\" to \\$name\\n"'


def test_sync_capabilities(oracle) -> None:
    flag = oracle.atomic_flag
    assert flag.create("false") == "AtomicBoolean(false)"
    assert flag.test_and_set("freed") == "freed.compareAndSet(false, true)"
    assert "java.util.concurrent.atomic.AtomicBoolean" in flag.imports

    mutex = oracle.mutex
    assert mutex.create() == "ReentrantLock()"
    assert mutex.guard("lock") == "lock.withLock"
    assert set(mutex.imports) == {
        "java.util.concurrent.locks.ReentrantLock",
        "kotlin.concurrent.withLock",
    }


@pytest.mark.parametrize(
    "signed, unsigned",
    [
        (FFIType.INT8, FFIType.UINT8),
        (FFIType.INT16, FFIType.UINT16),
        (FFIType.INT32, FFIType.UINT32),
        (FFIType.INT64, FFIType.UINT64),
    ],
)
def test_unsigned_wire_types_share_signed_label(oracle, signed, unsigned) -> None:
    assert oracle.ffi_type_label(signed) == oracle.ffi_type_label(unsigned)
