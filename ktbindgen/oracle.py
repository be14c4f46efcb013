"""Kotlin language oracle"""

import re

from .backend import AtomicFlag, CodeType, LanguageOracle, Mutex
from .callback_interface import CallbackInterfaceCodeType
from .compounds import MapCodeType, OptionalCodeType, SequenceCodeType
from .enum_ import EnumCodeType
from .error import ErrorCodeType
from .errors import UnknownTypeError, UnreachableError
from .external import ExternalCodeType
from .object_ import ObjectCodeType
from .primitives import primitive_code_type
from .record import RecordCodeType
from .types import (
    BooleanLiteral, CallbackInterfaceType, EmptyMapLiteral, EmptySequenceLiteral, EnumType,
    ErrorType, ExternalType, FFIType, Literal, MapType, NullLiteral, ObjectType, OptionalType,
    PrimitiveType, RecordType, SequenceType, StringLiteral, TypeIdentifier,
)

# One factory per variant of the type identifier union. Adding a variant means
# adding an entry here and a code type, nothing else.
CODE_TYPES = {
    PrimitiveType: primitive_code_type,
    RecordType: lambda t: RecordCodeType(t.name),
    EnumType: lambda t: EnumCodeType(t.name),
    ErrorType: lambda t: ErrorCodeType(t.name),
    ObjectType: lambda t: ObjectCodeType(t.name),
    CallbackInterfaceType: lambda t: CallbackInterfaceCodeType(t.name),
    OptionalType: OptionalCodeType,
    SequenceType: SequenceCodeType,
    MapType: MapCodeType,
    ExternalType: lambda t: ExternalCodeType(t.name, t.crate),
}

# java.nio.ByteBuffer has no unsigned accessors, so unsigned wire types use
# the signed type of the same width and generated code reinterprets them.
FFI_TYPE_LABELS = {
    FFIType.INT8: "Byte",
    FFIType.UINT8: "Byte",
    FFIType.INT16: "Short",
    FFIType.UINT16: "Short",
    FFIType.INT32: "Int",
    FFIType.UINT32: "Int",
    FFIType.INT64: "Long",
    FFIType.UINT64: "Long",
    FFIType.FLOAT32: "Float",
    FFIType.FLOAT64: "Double",
    FFIType.RUST_ARC_PTR: "Pointer",
    FFIType.RUST_BUFFER: "RustBuffer.ByValue",
    FFIType.FOREIGN_BYTES: "ForeignBytes.ByValue",
    FFIType.FOREIGN_CALLBACK: "ForeignCallback",
}

KOTLIN_KEYWORDS = frozenset({
    "as", "break", "class", "continue", "do", "else", "false", "for", "fun", "if", "in",
    "interface", "is", "null", "object", "package", "return", "super", "this", "throw",
    "true", "try", "typealias", "typeof", "val", "var", "when", "while",
})

# Words are runs of capitalised or lowercase letters, with trailing digits
# kept on the word they follow
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])\d*|[A-Z]?[a-z]+\d*|[A-Z]+\d*|\d+")


def split_words(nm: str) -> list[str]:
    return _WORD_RE.findall(nm)


def upper_camel_case(nm: str) -> str:
    return "".join(w[0].upper() + w[1:].lower() for w in split_words(nm))


def lower_camel_case(nm: str) -> str:
    camel = upper_camel_case(nm)
    words = split_words(camel)
    if not words:
        return camel
    return words[0].lower() + camel[len(words[0]):]


def shouty_snake_case(nm: str) -> str:
    return "_".join(w.upper() for w in split_words(nm))


def _escape_keyword(name: str) -> str:
    return f"`{name}`" if name in KOTLIN_KEYWORDS else name


def kotlin_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


class KotlinLanguageOracle(LanguageOracle):
    """Code types and naming conventions for Kotlin on the JVM.

    Stateless; one instance can serve any number of generation passes.
    """

    _atomic_flag = AtomicFlag(
        type_name="AtomicBoolean",
        imports=("java.util.concurrent.atomic.AtomicBoolean",),
        create_template="{type_name}({initial})",
        test_and_set_template="{flag}.compareAndSet(false, true)",
    )
    _mutex = Mutex(
        type_name="ReentrantLock",
        imports=("java.util.concurrent.locks.ReentrantLock", "kotlin.concurrent.withLock"),
        create_template="{type_name}()",
        guard_template="{lock}.withLock",
    )

    def find(self, type_: TypeIdentifier) -> CodeType:
        factory = CODE_TYPES.get(type(type_))
        if factory is None:
            raise UnknownTypeError(type_)
        return factory(type_)

    def class_name(self, nm: str) -> str:
        """Class names (records, enums, objects, ...) in UpperCamelCase"""
        return upper_camel_case(nm)

    def fn_name(self, nm: str) -> str:
        return _escape_keyword(lower_camel_case(nm))

    def var_name(self, nm: str) -> str:
        return _escape_keyword(lower_camel_case(nm))

    def enum_variant(self, nm: str) -> str:
        return shouty_snake_case(nm)

    def exception_name(self, nm: str) -> str:
        """Replace a trailing "Error" with "Exception".

        Interface definitions name failure types "...Error", but on the JVM an
        Error is reserved for non-recoverable conditions.
        """
        if nm.endswith("Error"):
            return nm[:-len("Error")] + "Exception"
        return nm

    def ffi_type_label(self, ffi_type: FFIType) -> str:
        return FFI_TYPE_LABELS[ffi_type]

    def untyped_literal(self, literal: Literal) -> str:
        if isinstance(literal, BooleanLiteral):
            return "true" if literal.value else "false"
        if isinstance(literal, StringLiteral):
            return kotlin_string(literal.value)
        if isinstance(literal, NullLiteral):
            return "null"
        if isinstance(literal, EmptySequenceLiteral):
            return "listOf()"
        if isinstance(literal, EmptyMapLiteral):
            return "mapOf()"
        raise UnreachableError(f"{literal!r} is rendered by its type's code type")

    @property
    def atomic_flag(self) -> AtomicFlag:
        return self._atomic_flag

    @property
    def mutex(self) -> Mutex:
        return self._mutex
