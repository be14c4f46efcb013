"""Tests for generated callback interfaces and their dispatch runtime."""

from __future__ import annotations

import re


def _handle_map(source: str) -> str:
    start = source.index("internal class ConcurrentHandleMap<T>(")
    end = source.index("internal interface ForeignCallback")
    return source[start:end]


def test_every_handle_map_access_holds_the_lock(geo_source: str) -> None:
    handle_map = _handle_map(geo_source)
    assert "    private val lock = ReentrantLock()" in handle_map
    lines = handle_map.splitlines()
    functions = [i for i, line in enumerate(lines) if line.startswith("    fun ")]
    assert len(functions) == 4
    for i in functions:
        assert lines[i + 1].strip() == "lock.withLock {"
    # leftMap is only touched inside those guards
    assert handle_map.count("lock.withLock {") == 4


def test_interface_declaration(geo_source: str) -> None:
    assert (
        "@ExperimentalUnsignedTypes\n"
        "public interface ShapeLogger {\n"
        "    fun log(message: String, count: ULong)\n"
        "    fun name(): String\n"
        "}\n"
    ) in geo_source


def test_dispatch_by_method_index(geo_source: str) -> None:
    assert "internal const val IDX_CALLBACK_FREE = 0" in geo_source
    assert "            IDX_CALLBACK_FREE -> {\n                CallbackInterfaceShapeLoggerInternals.drop(handle)" in geo_source
    assert "            1 -> {" in geo_source
    assert "this.invokeLog(cb, args)" in geo_source
    assert "            2 -> {" in geo_source
    assert "this.invokeName(cb, args)" in geo_source
    assert "            else -> -1" in geo_source


def test_arguments_are_read_in_order(geo_source: str) -> None:
    assert (
        "            kotlinCallbackInterface.log(\n"
        "                String.read(buf),\n"
        "                ULong.read(buf)\n"
        "            )\n"
        "            .let { RustBuffer.ByValue() }\n"
    ) in geo_source


def test_return_value_is_written_back(geo_source: str) -> None:
    assert "                rval.write(rbuf)\n                rbuf.finalize()" in geo_source
    # No arguments, no argument buffer
    invoke_name = geo_source[geo_source.index("private fun invokeName("):]
    invoke_name = invoke_name[:invoke_name.index("RustBuffer.free(args)")]
    assert "asByteBuffer" not in invoke_name


def test_registered_when_library_loads(geo_source: str) -> None:
    assert (
        "            .also { lib: _UniFFILib ->\n"
        "                CallbackInterfaceShapeLoggerInternals.register(lib)\n"
        "            }\n"
    ) in geo_source
    assert "internal object CallbackInterfaceShapeLoggerInternals: CallbackInternals<ShapeLogger>(" in geo_source
    assert "lib.ffi_geo_ShapeLogger_init_callback(this.foreignCallback, status)" in geo_source


def test_init_callback_on_library(geo_source: str) -> None:
    assert re.search(
        r"fun ffi_geo_ShapeLogger_init_callback\(callbackStub: ForeignCallback, _uniffi_out_err: RustCallStatus\n\s+\): Unit",
        geo_source,
    )
