"""End-to-end tests for the generated Kotlin source."""

from __future__ import annotations

from pathlib import Path

import pytest

from ktbindgen import Config, KotlinWrapper, UnknownTypeError, generate_bindings, write_bindings
from ktbindgen.types import Argument, ComponentInterface, Function

from .conftest import parse_udl


def _imports(source: str) -> list[str]:
    return [line[len("import "):] for line in source.splitlines() if line.startswith("import ")]


def test_package_and_library_name_default_from_namespace(geo_source: str) -> None:
    assert "package uniffi.geo\n" in geo_source
    assert 'return "uniffi_geo"' in geo_source
    assert 'System.getProperty("uniffi.component.$componentName.libraryOverride")' in geo_source
    assert 'loadIndirect<_UniFFILib>(componentName = "geo")' in geo_source


def test_config_overrides_package_and_library(geo_ci) -> None:
    source = generate_bindings(geo_ci, Config(package_name="org.example.geo", cdylib_name="geonative"))
    assert "package org.example.geo\n" in source
    assert 'return "geonative"' in source


def test_imports_are_sorted_and_unique(geo_source: str) -> None:
    imports = _imports(geo_source)
    assert imports == sorted(set(imports))
    for expected in (
        "com.sun.jna.Pointer",
        "java.nio.ByteBuffer",
        "java.lang.ref.Cleaner",
        "java.util.concurrent.atomic.AtomicBoolean",
        "java.util.concurrent.atomic.AtomicLong",
        "java.util.concurrent.locks.ReentrantLock",
        "kotlin.concurrent.withLock",
        "kotlin.ExperimentalUnsignedTypes",
    ):
        assert expected in imports


def test_helpers_emitted_once_per_type(geo_source: str) -> None:
    assert geo_source.count("internal fun String.Companion.lift(") == 1
    assert geo_source.count("internal fun Double.Companion.read(") == 1
    assert geo_source.count("internal fun readSequenceRecordPoint(") == 1
    assert geo_source.count("internal fun liftOptionalRecordPoint(") == 1
    assert geo_source.count("internal fun writeMapStringInt64(") == 1
    assert "// Helper code for Point record is found in RecordTemplate.kt" in geo_source


def test_string_helpers_always_present() -> None:
    ci = ComponentInterface("bare", functions=[Function("ping")])
    source = generate_bindings(ci)
    assert "internal fun String.Companion.lift(" in source
    assert "fun ping() =" in source
    # No objects or callback interfaces, no runtime for them
    assert "abstract class FFIObject" not in source
    assert "ConcurrentHandleMap" not in source


def test_ffi_functions_declared_on_library(geo_source: str) -> None:
    assert "internal interface _UniFFILib : Library {" in geo_source
    assert (
        "    fun geo_gradient(ln: RustBuffer.ByValue, _uniffi_out_err: RustCallStatus\n"
        "    ): Double\n"
    ) in geo_source
    assert (
        "    fun geo_Counter_get(ptr: Pointer, _uniffi_out_err: RustCallStatus\n"
        "    ): Int\n"
    ) in geo_source
    assert (
        "    fun ffi_geo_Counter_object_free(ptr: Pointer, _uniffi_out_err: RustCallStatus\n"
        "    ): Unit\n"
    ) in geo_source
    assert "    fun ffi_geo_rustbuffer_alloc(size: Int, _uniffi_out_err: RustCallStatus\n" in geo_source


def test_top_level_functions(geo_source: str) -> None:
    assert (
        "fun gradient(ln: Line): Double {\n"
        "    val _retval = rustCall() { _status ->\n"
        "        _UniFFILib.INSTANCE.geo_gradient(ln.lower(), _status)\n"
        "    }\n"
        "    return Double.lift(_retval)\n"
        "}\n"
    ) in geo_source
    assert "fun intersection(ln1: Line, ln2: Line): Point? {" in geo_source
    assert "    return liftOptionalRecordPoint(_retval)" in geo_source
    assert "    return liftSequenceRecordPoint(_retval)" in geo_source


def test_throwing_function_uses_error_handler(geo_source: str) -> None:
    assert (
        "@Throws(GeoException::class)\n"
        "fun heading(from: Point, to: Point): Direction {\n"
        "    val _retval = rustCallWithError(GeoException) { _status ->\n"
    ) in geo_source


def test_callback_argument_is_lowered_through_internals(geo_source: str) -> None:
    assert "fun logShape(shape: Shape, logger: ShapeLogger) =" in geo_source
    assert (
        "_UniFFILib.INSTANCE.geo_log_shape(shape.lower(), "
        "CallbackInterfaceShapeLoggerInternals.lower(logger), _status)"
    ) in geo_source


def test_generation_is_deterministic(geo_ci) -> None:
    assert generate_bindings(geo_ci) == generate_bindings(geo_ci)


def test_wrapper_renders_with_resolved_config(geo_ci) -> None:
    resolved = Config().resolve(geo_ci)
    assert KotlinWrapper(resolved, geo_ci).render() == generate_bindings(geo_ci)


def test_unknown_type_fails_the_pass() -> None:
    class Mystery:
        pass

    ci = ComponentInterface("a", functions=[Function("f", arguments=[Argument("m", Mystery())])])
    with pytest.raises(UnknownTypeError):
        generate_bindings(ci)


def test_write_bindings_uses_package_path(geo_ci, tmp_path: Path) -> None:
    path = write_bindings(geo_ci, None, tmp_path)
    assert path == tmp_path / "uniffi" / "geo" / "geo.kt"
    assert path.read_text(encoding="utf-8") == generate_bindings(geo_ci)


def test_keyword_names_are_escaped() -> None:
    ci = parse_udl(
        """
        namespace kw { void accept(u8 object, string in); };
        """
    )
    source = generate_bindings(ci)
    assert "fun accept(`object`: UByte, `in`: String) =" in source
    assert "_UniFFILib.INSTANCE.kw_accept(`object`.lower(), `in`.lower(), _status)" in source
