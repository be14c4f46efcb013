"""Code types for builtin scalars, strings, timestamps and durations"""

from typing import Optional

from .backend import CodeType, LanguageOracle
from .errors import UnreachableError
from .types import (
    FloatLiteral, IntLiteral, Literal, PrimitiveKind, PrimitiveType, Radix, UIntLiteral,
    ffi_type_of,
)


# kind -> (Kotlin type, ByteBuffer getter, RustBufferBuilder putter)
NUMERIC_TYPES = {
    PrimitiveKind.INT8: ("Byte", "get", "putByte"),
    PrimitiveKind.UINT8: ("UByte", "get", "putByte"),
    PrimitiveKind.INT16: ("Short", "getShort", "putShort"),
    PrimitiveKind.UINT16: ("UShort", "getShort", "putShort"),
    PrimitiveKind.INT32: ("Int", "getInt", "putInt"),
    PrimitiveKind.UINT32: ("UInt", "getInt", "putInt"),
    PrimitiveKind.INT64: ("Long", "getLong", "putLong"),
    PrimitiveKind.UINT64: ("ULong", "getLong", "putLong"),
    PrimitiveKind.FLOAT32: ("Float", "getFloat", "putFloat"),
    PrimitiveKind.FLOAT64: ("Double", "getDouble", "putDouble"),
}

CANONICAL_NAMES = {
    PrimitiveKind.BOOLEAN: "Boolean",
    PrimitiveKind.INT8: "Int8",
    PrimitiveKind.UINT8: "UInt8",
    PrimitiveKind.INT16: "Int16",
    PrimitiveKind.UINT16: "UInt16",
    PrimitiveKind.INT32: "Int32",
    PrimitiveKind.UINT32: "UInt32",
    PrimitiveKind.INT64: "Int64",
    PrimitiveKind.UINT64: "UInt64",
    PrimitiveKind.FLOAT32: "Float32",
    PrimitiveKind.FLOAT64: "Float64",
    PrimitiveKind.STRING: "String",
    PrimitiveKind.TIMESTAMP: "Timestamp",
    PrimitiveKind.DURATION: "Duration",
}

# Kotlin has no Byte/Short literals, those need a conversion
_INT_SUFFIXES = {
    PrimitiveKind.INT8: ".toByte()",
    PrimitiveKind.INT16: ".toShort()",
    PrimitiveKind.INT32: "",
    PrimitiveKind.INT64: "L",
    PrimitiveKind.UINT8: "u.toUByte()",
    PrimitiveKind.UINT16: "u.toUShort()",
    PrimitiveKind.UINT32: "u",
    PrimitiveKind.UINT64: "uL",
}


def _int_text(value: int, radix: Radix) -> str:
    # Kotlin has no octal literals, those are rendered in decimal
    if radix == Radix.HEXADECIMAL:
        return f"-0x{-value:x}" if value < 0 else f"0x{value:x}"
    return str(value)


class PrimitiveCodeType(CodeType):
    """Booleans, integers, floats and strings.

    These use extension functions on the Kotlin type and its companion, so
    `Int.lift(x)` and `x.lower()` read the same way as the generated classes.
    """

    def __init__(self, kind: PrimitiveKind):
        self.kind = kind

    def type_label(self, oracle: LanguageOracle) -> str:
        if self.kind == PrimitiveKind.BOOLEAN:
            return "Boolean"
        if self.kind == PrimitiveKind.STRING:
            return "String"
        return NUMERIC_TYPES[self.kind][0]

    def canonical_name(self, oracle: LanguageOracle) -> str:
        return CANONICAL_NAMES[self.kind]

    def literal(self, oracle: LanguageOracle, literal: Literal) -> str:
        if isinstance(literal, (IntLiteral, UIntLiteral)) and self.kind.is_integer:
            text = _int_text(literal.value, literal.radix)
            suffix = _INT_SUFFIXES[self.kind]
            # `-7.toByte()` applies the minus to the Byte and yields an Int
            if literal.value < 0 and suffix.startswith("."):
                text = f"({text})"
            return text + suffix
        if isinstance(literal, FloatLiteral) and self.kind.is_float:
            text = literal.value
            if self.kind == PrimitiveKind.FLOAT32:
                return f"{text}f"
            if not any(c in text for c in ".eE"):
                text = f"{text}.0"
            return text
        raise UnreachableError(f"{literal!r} cannot be rendered as {self.canonical_name(oracle)}")

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{oracle.var_name(nm)}.lower()"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"{oracle.var_name(nm)}.write({target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.type_label(oracle)}.lift({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.type_label(oracle)}.read({nm})"

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        if self.kind == PrimitiveKind.BOOLEAN:
            return self._boolean_helper(oracle)
        if self.kind == PrimitiveKind.STRING:
            return self._string_helper()
        return self._numeric_helper(oracle)

    def _boolean_helper(self, oracle: LanguageOracle) -> str:
        ffi = oracle.ffi_type_label(ffi_type_of(PrimitiveType(self.kind)))
        lines = [
            f"internal fun Boolean.Companion.lift(v: {ffi}): Boolean {{",
            "    return v.toInt() != 0",
            "}",
            "",
            "internal fun Boolean.Companion.read(buf: ByteBuffer): Boolean {",
            "    return Boolean.lift(buf.get())",
            "}",
            "",
            f"internal fun Boolean.lower(): {ffi} {{",
            f"    return if (this) 1.to{ffi}() else 0.to{ffi}()",
            "}",
            "",
            "internal fun Boolean.write(buf: RustBufferBuilder) {",
            "    buf.putByte(this.lower())",
            "}",
        ]
        return "\n".join(lines)

    def _string_helper(self) -> str:
        lines = [
            "internal fun String.Companion.lift(rbuf: RustBuffer.ByValue): String {",
            "    try {",
            "        val byteArr = ByteArray(rbuf.len)",
            "        rbuf.asByteBuffer()!!.get(byteArr)",
            "        return byteArr.toString(Charsets.UTF_8)",
            "    } finally {",
            "        RustBuffer.free(rbuf)",
            "    }",
            "}",
            "",
            "internal fun String.Companion.read(buf: ByteBuffer): String {",
            "    val len = buf.getInt()",
            "    val byteArr = ByteArray(len)",
            "    buf.get(byteArr)",
            "    return byteArr.toString(Charsets.UTF_8)",
            "}",
            "",
            "internal fun String.lower(): RustBuffer.ByValue {",
            "    val byteArr = this.toByteArray(Charsets.UTF_8)",
            "    val rbuf = RustBuffer.alloc(byteArr.size)",
            "    rbuf.asByteBuffer()!!.put(byteArr)",
            "    return rbuf",
            "}",
            "",
            "internal fun String.write(buf: RustBufferBuilder) {",
            "    val byteArr = this.toByteArray(Charsets.UTF_8)",
            "    buf.putInt(byteArr.size)",
            "    buf.put(byteArr)",
            "}",
        ]
        return "\n".join(lines)

    def _numeric_helper(self, oracle: LanguageOracle) -> str:
        label, getter, putter = NUMERIC_TYPES[self.kind]
        ffi = oracle.ffi_type_label(ffi_type_of(PrimitiveType(self.kind)))
        if self.kind.is_unsigned:
            # The wire carries the signed type of the same width
            to_host, to_wire = f".to{label}()", f".to{ffi}()"
            annotation = ["@ExperimentalUnsignedTypes"]
        else:
            to_host, to_wire = "", ""
            annotation = []
        lines = [
            *annotation,
            f"internal fun {label}.Companion.lift(v: {ffi}): {label} {{",
            f"    return v{to_host}",
            "}",
            "",
            *annotation,
            f"internal fun {label}.Companion.read(buf: ByteBuffer): {label} {{",
            f"    return {label}.lift(buf.{getter}())",
            "}",
            "",
            *annotation,
            f"internal fun {label}.lower(): {ffi} {{",
            f"    return this{to_wire}",
            "}",
            "",
            *annotation,
            f"internal fun {label}.write(buf: RustBufferBuilder) {{",
            f"    buf.{putter}(this{to_wire})",
            "}",
        ]
        return "\n".join(lines)


class TimestampCodeType(CodeType):
    """java.time.Instant, carried as signed seconds plus nanoseconds since the epoch"""

    def type_label(self, oracle: LanguageOracle) -> str:
        return "Instant"

    def canonical_name(self, oracle: LanguageOracle) -> str:
        return CANONICAL_NAMES[PrimitiveKind.TIMESTAMP]

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"lowerTimestamp({oracle.var_name(nm)})"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"writeTimestamp({oracle.var_name(nm)}, {target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"liftTimestamp({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"readTimestamp({nm})"

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        lines = [
            "internal fun liftTimestamp(rbuf: RustBuffer.ByValue): Instant {",
            "    return liftFromRustBuffer(rbuf) { buf -> readTimestamp(buf) }",
            "}",
            "",
            "internal fun readTimestamp(buf: ByteBuffer): Instant {",
            "    val seconds = buf.getLong()",
            "    // The wire type is u32, overflow shows up as a negative value",
            "    val nanoseconds = buf.getInt().toLong()",
            "    if (nanoseconds < 0) {",
            '        throw java.time.DateTimeException("Instant nanoseconds exceed minimum or maximum supported")',
            "    }",
            "    if (seconds >= 0) {",
            "        return Instant.EPOCH.plus(Duration.ofSeconds(seconds, nanoseconds))",
            "    } else {",
            "        return Instant.EPOCH.minus(Duration.ofSeconds(-seconds, nanoseconds))",
            "    }",
            "}",
            "",
            "internal fun lowerTimestamp(v: Instant): RustBuffer.ByValue {",
            "    return lowerIntoRustBuffer(v) { v, buf -> writeTimestamp(v, buf) }",
            "}",
            "",
            "internal fun writeTimestamp(v: Instant, buf: RustBufferBuilder) {",
            "    var epochOffset = Duration.between(Instant.EPOCH, v)",
            "    var sign = 1",
            "    if (epochOffset.isNegative()) {",
            "        sign = -1",
            "        epochOffset = epochOffset.negated()",
            "    }",
            "    if (epochOffset.nano < 0) {",
            '        throw IllegalArgumentException("Invalid timestamp, nano value must be non-negative")',
            "    }",
            "    buf.putLong(epochOffset.seconds * sign)",
            "    buf.putInt(epochOffset.nano)",
            "}",
        ]
        return "\n".join(lines)

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return ["java.time.Instant", "java.time.Duration"]


class DurationCodeType(CodeType):
    """java.time.Duration, carried as unsigned seconds plus nanoseconds"""

    def type_label(self, oracle: LanguageOracle) -> str:
        return "Duration"

    def canonical_name(self, oracle: LanguageOracle) -> str:
        return CANONICAL_NAMES[PrimitiveKind.DURATION]

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"lowerDuration({oracle.var_name(nm)})"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"writeDuration({oracle.var_name(nm)}, {target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"liftDuration({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"readDuration({nm})"

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        lines = [
            "internal fun liftDuration(rbuf: RustBuffer.ByValue): Duration {",
            "    return liftFromRustBuffer(rbuf) { buf -> readDuration(buf) }",
            "}",
            "",
            "internal fun readDuration(buf: ByteBuffer): Duration {",
            "    // Both wire types are unsigned, overflow shows up as a negative value",
            "    val seconds = buf.getLong()",
            "    val nanoseconds = buf.getInt().toLong()",
            "    if (seconds < 0) {",
            '        throw java.time.DateTimeException("Duration exceeds minimum or maximum value supported")',
            "    }",
            "    if (nanoseconds < 0) {",
            '        throw java.time.DateTimeException("Duration nanoseconds exceed minimum or maximum supported")',
            "    }",
            "    return Duration.ofSeconds(seconds, nanoseconds)",
            "}",
            "",
            "internal fun lowerDuration(v: Duration): RustBuffer.ByValue {",
            "    return lowerIntoRustBuffer(v) { v, buf -> writeDuration(v, buf) }",
            "}",
            "",
            "internal fun writeDuration(v: Duration, buf: RustBufferBuilder) {",
            "    if (v.seconds < 0) {",
            '        throw IllegalArgumentException("Invalid duration, must be non-negative")',
            "    }",
            "    if (v.nano < 0) {",
            '        throw IllegalArgumentException("Invalid duration, nano value must be non-negative")',
            "    }",
            "    buf.putLong(v.seconds)",
            "    buf.putInt(v.nano)",
            "}",
        ]
        return "\n".join(lines)

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return ["java.time.Duration"]


def primitive_code_type(type_: PrimitiveType) -> CodeType:
    if type_.kind == PrimitiveKind.TIMESTAMP:
        return TimestampCodeType()
    if type_.kind == PrimitiveKind.DURATION:
        return DurationCodeType()
    return PrimitiveCodeType(type_.kind)
