"""Code types for optionals, sequences and maps.

Each compound type gets a family of four top-level helper functions named
after its canonical name (`liftOptionalInt32`, `readOptionalInt32`, ...). The
helpers delegate to the code types of their element types, so nesting works
without special cases.
"""

from typing import Optional

from .backend import CodeType, LanguageOracle
from .types import contains_unsigned


class CompoundCodeType(CodeType):
    """Shared marshaling for types serialized through a RustBuffer helper family"""

    prefix = ""

    def __init__(self, type_):
        self.type_ = type_

    def canonical_name(self, oracle: LanguageOracle) -> str:
        return self.prefix + "".join(
            oracle.find(t).canonical_name(oracle) for t in self._element_types()
        )

    def _element_types(self) -> tuple:
        raise NotImplementedError

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"lower{self.canonical_name(oracle)}({oracle.var_name(nm)})"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"write{self.canonical_name(oracle)}({oracle.var_name(nm)}, {target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"lift{self.canonical_name(oracle)}({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"read{self.canonical_name(oracle)}({nm})"

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        name = self.canonical_name(oracle)
        label = self.type_label(oracle)
        annotation = ["@ExperimentalUnsignedTypes"] if contains_unsigned(self.type_) else []
        lines = [
            *annotation,
            f"internal fun lift{name}(rbuf: RustBuffer.ByValue): {label} {{",
            f"    return liftFromRustBuffer(rbuf) {{ buf -> read{name}(buf) }}",
            "}",
            "",
            *annotation,
            f"internal fun read{name}(buf: ByteBuffer): {label} {{",
            *self._read_body(oracle),
            "}",
            "",
            *annotation,
            f"internal fun lower{name}(v: {label}): RustBuffer.ByValue {{",
            f"    return lowerIntoRustBuffer(v) {{ v, buf -> write{name}(v, buf) }}",
            "}",
            "",
            *annotation,
            f"internal fun write{name}(v: {label}, buf: RustBufferBuilder) {{",
            *self._write_body(oracle),
            "}",
        ]
        return "\n".join(lines)

    def _read_body(self, oracle: LanguageOracle) -> list[str]:
        raise NotImplementedError

    def _write_body(self, oracle: LanguageOracle) -> list[str]:
        raise NotImplementedError


class OptionalCodeType(CompoundCodeType):
    """Nullable value, a 0/1 tag byte followed by the value when present"""

    prefix = "Optional"

    def _element_types(self) -> tuple:
        return (self.type_.inner,)

    def type_label(self, oracle: LanguageOracle) -> str:
        return f"{oracle.find(self.type_.inner).type_label(oracle)}?"

    def _read_body(self, oracle: LanguageOracle) -> list[str]:
        inner = oracle.find(self.type_.inner)
        return [
            "    if (buf.get().toInt() == 0) {",
            "        return null",
            "    }",
            f"    return {inner.read(oracle, 'buf')}",
        ]

    def _write_body(self, oracle: LanguageOracle) -> list[str]:
        inner = oracle.find(self.type_.inner)
        return [
            "    if (v == null) {",
            "        buf.putByte(0)",
            "    } else {",
            "        buf.putByte(1)",
            f"        {inner.write(oracle, 'v', 'buf')}",
            "    }",
        ]


class SequenceCodeType(CompoundCodeType):
    """List, an i32 count followed by the items"""

    prefix = "Sequence"

    def _element_types(self) -> tuple:
        return (self.type_.inner,)

    def type_label(self, oracle: LanguageOracle) -> str:
        return f"List<{oracle.find(self.type_.inner).type_label(oracle)}>"

    def _read_body(self, oracle: LanguageOracle) -> list[str]:
        inner = oracle.find(self.type_.inner)
        return [
            "    val len = buf.getInt()",
            f"    return List<{inner.type_label(oracle)}>(len) {{",
            f"        {inner.read(oracle, 'buf')}",
            "    }",
        ]

    def _write_body(self, oracle: LanguageOracle) -> list[str]:
        inner = oracle.find(self.type_.inner)
        return [
            "    buf.putInt(v.size)",
            "    v.forEach {",
            f"        {inner.write(oracle, 'it', 'buf')}",
            "    }",
        ]


class MapCodeType(CompoundCodeType):
    """Map, an i32 count followed by alternating keys and values"""

    prefix = "Map"

    def _element_types(self) -> tuple:
        return (self.type_.key, self.type_.value)

    def type_label(self, oracle: LanguageOracle) -> str:
        key = oracle.find(self.type_.key).type_label(oracle)
        value = oracle.find(self.type_.value).type_label(oracle)
        return f"Map<{key}, {value}>"

    def _read_body(self, oracle: LanguageOracle) -> list[str]:
        key = oracle.find(self.type_.key)
        value = oracle.find(self.type_.value)
        return [
            "    val len = buf.getInt()",
            f"    val items : MutableMap<{key.type_label(oracle)}, {value.type_label(oracle)}> = mutableMapOf()",
            "    repeat(len) {",
            f"        val k = {key.read(oracle, 'buf')}",
            f"        val v = {value.read(oracle, 'buf')}",
            "        items[k] = v",
            "    }",
            "    return items",
        ]

    def _write_body(self, oracle: LanguageOracle) -> list[str]:
        key = oracle.find(self.type_.key)
        value = oracle.find(self.type_.value)
        return [
            "    buf.putInt(v.size)",
            "    v.forEach { (k, v) ->",
            f"        {key.write(oracle, 'k', 'buf')}",
            f"        {value.write(oracle, 'v', 'buf')}",
            "    }",
        ]
