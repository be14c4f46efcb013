"""Data types for the component interface model"""

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union


class PrimitiveKind(enum.Enum):
    """Builtin scalar and string-like types"""
    BOOLEAN = "boolean"
    INT8 = "i8"
    UINT8 = "u8"
    INT16 = "i16"
    UINT16 = "u16"
    INT32 = "i32"
    UINT32 = "u32"
    INT64 = "i64"
    UINT64 = "u64"
    FLOAT32 = "f32"
    FLOAT64 = "f64"
    STRING = "string"
    TIMESTAMP = "timestamp"
    DURATION = "duration"

    @property
    def is_unsigned(self) -> bool:
        return self in _UNSIGNED_KINDS

    @property
    def is_integer(self) -> bool:
        return self in _SIGNED_KINDS or self in _UNSIGNED_KINDS

    @property
    def is_float(self) -> bool:
        return self in (PrimitiveKind.FLOAT32, PrimitiveKind.FLOAT64)


_SIGNED_KINDS = frozenset({
    PrimitiveKind.INT8, PrimitiveKind.INT16, PrimitiveKind.INT32, PrimitiveKind.INT64,
})
_UNSIGNED_KINDS = frozenset({
    PrimitiveKind.UINT8, PrimitiveKind.UINT16, PrimitiveKind.UINT32, PrimitiveKind.UINT64,
})


# ══════════════════════════════════════════════════════════════
# Type identifiers
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class RecordType:
    name: str


@dataclass(frozen=True)
class EnumType:
    name: str


@dataclass(frozen=True)
class ErrorType:
    """An enum declared as a failure type"""
    name: str


@dataclass(frozen=True)
class ObjectType:
    name: str


@dataclass(frozen=True)
class CallbackInterfaceType:
    name: str


@dataclass(frozen=True)
class OptionalType:
    inner: "TypeIdentifier"


@dataclass(frozen=True)
class SequenceType:
    inner: "TypeIdentifier"


@dataclass(frozen=True)
class MapType:
    key: "TypeIdentifier"
    value: "TypeIdentifier"


@dataclass(frozen=True)
class ExternalType:
    """A type declared by another component crate"""
    name: str
    crate: str


TypeIdentifier = Union[
    PrimitiveType, RecordType, EnumType, ErrorType, ObjectType, CallbackInterfaceType,
    OptionalType, SequenceType, MapType, ExternalType,
]


def inner_types(type_: TypeIdentifier) -> tuple:
    """Direct children of a compound type"""
    if isinstance(type_, (OptionalType, SequenceType)):
        return (type_.inner,)
    if isinstance(type_, MapType):
        return (type_.key, type_.value)
    return ()


def contains_unsigned(type_: TypeIdentifier) -> bool:
    """Check the structure of a type for unsigned scalars (named types are not followed)"""
    if isinstance(type_, PrimitiveType):
        return type_.kind.is_unsigned
    return any(contains_unsigned(t) for t in inner_types(type_))


# ══════════════════════════════════════════════════════════════
# FFI types
# ══════════════════════════════════════════════════════════════

class FFIType(enum.Enum):
    """Scalar types that actually cross the FFI boundary"""
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    RUST_ARC_PTR = "rust_arc_ptr"
    RUST_BUFFER = "rust_buffer"
    FOREIGN_BYTES = "foreign_bytes"
    FOREIGN_CALLBACK = "foreign_callback"


_SCALAR_FFI_TYPES = {
    PrimitiveKind.BOOLEAN: FFIType.INT8,
    PrimitiveKind.INT8: FFIType.INT8,
    PrimitiveKind.UINT8: FFIType.UINT8,
    PrimitiveKind.INT16: FFIType.INT16,
    PrimitiveKind.UINT16: FFIType.UINT16,
    PrimitiveKind.INT32: FFIType.INT32,
    PrimitiveKind.UINT32: FFIType.UINT32,
    PrimitiveKind.INT64: FFIType.INT64,
    PrimitiveKind.UINT64: FFIType.UINT64,
    PrimitiveKind.FLOAT32: FFIType.FLOAT32,
    PrimitiveKind.FLOAT64: FFIType.FLOAT64,
}


def ffi_type_of(type_: TypeIdentifier) -> FFIType:
    """The wire representation used when a value of this type crosses the boundary"""
    if isinstance(type_, PrimitiveType):
        return _SCALAR_FFI_TYPES.get(type_.kind, FFIType.RUST_BUFFER)
    if isinstance(type_, ObjectType):
        return FFIType.RUST_ARC_PTR
    if isinstance(type_, CallbackInterfaceType):
        return FFIType.UINT64
    return FFIType.RUST_BUFFER


# ══════════════════════════════════════════════════════════════
# Literals
# ══════════════════════════════════════════════════════════════

class Radix(enum.Enum):
    DECIMAL = 10
    OCTAL = 8
    HEXADECIMAL = 16


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NullLiteral:
    pass


@dataclass(frozen=True)
class EmptySequenceLiteral:
    pass


@dataclass(frozen=True)
class EmptyMapLiteral:
    pass


@dataclass(frozen=True)
class EnumLiteral:
    """A variant of a declared enum, e.g. a default of `"North"`"""
    variant: str
    type_: TypeIdentifier

    def __post_init__(self):
        if not isinstance(self.type_, EnumType):
            raise ValueError(f"enum literal declared against {self.type_!r}")


@dataclass(frozen=True)
class IntLiteral:
    value: int
    type_: TypeIdentifier
    radix: Radix = Radix.DECIMAL

    def __post_init__(self):
        if not (isinstance(self.type_, PrimitiveType) and self.type_.kind in _SIGNED_KINDS):
            raise ValueError(f"signed integer literal declared against {self.type_!r}")


@dataclass(frozen=True)
class UIntLiteral:
    value: int
    type_: TypeIdentifier
    radix: Radix = Radix.DECIMAL

    def __post_init__(self):
        if not (isinstance(self.type_, PrimitiveType) and self.type_.kind.is_unsigned):
            raise ValueError(f"unsigned integer literal declared against {self.type_!r}")
        if self.value < 0:
            raise ValueError(f"negative unsigned literal {self.value}")


@dataclass(frozen=True)
class FloatLiteral:
    """Float literal, kept as source text so no precision is lost"""
    value: str
    type_: TypeIdentifier

    def __post_init__(self):
        if not (isinstance(self.type_, PrimitiveType) and self.type_.kind.is_float):
            raise ValueError(f"float literal declared against {self.type_!r}")


# Literals carrying a type are rendered by that type's code type; the others
# have the same syntax whatever they are assigned to.
TYPED_LITERALS = (EnumLiteral, IntLiteral, UIntLiteral, FloatLiteral)

Literal = Union[
    BooleanLiteral, StringLiteral, NullLiteral, EmptySequenceLiteral, EmptyMapLiteral,
    EnumLiteral, IntLiteral, UIntLiteral, FloatLiteral,
]


# ══════════════════════════════════════════════════════════════
# Declarations
# ══════════════════════════════════════════════════════════════

@dataclass
class Field:
    """Record or enum variant field"""
    name: str
    type_: TypeIdentifier
    default: Optional[Literal] = None


@dataclass
class Argument:
    """Function, method or constructor argument"""
    name: str
    type_: TypeIdentifier
    default: Optional[Literal] = None


@dataclass
class Variant:
    name: str
    fields: list[Field] = field(default_factory=list)

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)


@dataclass
class Record:
    name: str
    fields: list[Field] = field(default_factory=list)


@dataclass
class Enum:
    name: str
    variants: list[Variant] = field(default_factory=list)

    @property
    def is_flat(self) -> bool:
        return not any(v.has_fields for v in self.variants)


@dataclass
class Error:
    """Enum used as a failure type; each variant carries a message"""
    name: str
    variants: list[Variant] = field(default_factory=list)


class _Throwing:
    """Mixin for callables that may declare an error type"""

    @property
    def throws_type(self) -> Optional[ErrorType]:
        return ErrorType(self.throws) if self.throws else None


@dataclass
class Constructor(_Throwing):
    name: str = "new"
    arguments: list[Argument] = field(default_factory=list)
    throws: Optional[str] = None

    @property
    def is_primary(self) -> bool:
        return self.name == "new"


@dataclass
class Method(_Throwing):
    name: str
    arguments: list[Argument] = field(default_factory=list)
    return_type: Optional[TypeIdentifier] = None
    throws: Optional[str] = None


@dataclass
class Function(_Throwing):
    name: str
    arguments: list[Argument] = field(default_factory=list)
    return_type: Optional[TypeIdentifier] = None
    throws: Optional[str] = None


@dataclass
class Object:
    """Interface backed by a native-owned resource"""
    name: str
    constructors: list[Constructor] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)

    @property
    def primary_constructor(self) -> Optional[Constructor]:
        return next((c for c in self.constructors if c.is_primary), None)

    @property
    def alternate_constructors(self) -> list[Constructor]:
        return [c for c in self.constructors if not c.is_primary]


@dataclass
class CallbackInterface:
    """Interface implemented in Kotlin and invoked from the native library"""
    name: str
    methods: list[Method] = field(default_factory=list)


@dataclass(frozen=True)
class FFIArgument:
    name: str
    type_: FFIType


@dataclass(frozen=True)
class FFIFunction:
    """A symbol exported by the native library"""
    name: str
    arguments: tuple = ()
    return_type: Optional[FFIType] = None


@dataclass
class ComponentInterface:
    """Complete, validated description of a component's public surface"""
    namespace: str
    records: list[Record] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    errors: list[Error] = field(default_factory=list)
    objects: list[Object] = field(default_factory=list)
    callback_interfaces: list[CallbackInterface] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    externals: list[ExternalType] = field(default_factory=list)

    def get_record(self, name: str) -> Optional[Record]:
        return next((r for r in self.records if r.name == name), None)

    def get_enum(self, name: str) -> Optional[Enum]:
        return next((e for e in self.enums if e.name == name), None)

    def get_error(self, name: str) -> Optional[Error]:
        return next((e for e in self.errors if e.name == name), None)

    def get_object(self, name: str) -> Optional[Object]:
        return next((o for o in self.objects if o.name == name), None)

    def get_callback_interface(self, name: str) -> Optional[CallbackInterface]:
        return next((c for c in self.callback_interfaces if c.name == name), None)

    # ── FFI symbols ───────────────────────────────────────────

    @staticmethod
    def _ffi_arguments(arguments: list[Argument]) -> tuple:
        return tuple(FFIArgument(a.name, ffi_type_of(a.type_)) for a in arguments)

    @staticmethod
    def _ffi_return(return_type: Optional[TypeIdentifier]) -> Optional[FFIType]:
        return ffi_type_of(return_type) if return_type is not None else None

    def ffi_function(self, func: Function) -> FFIFunction:
        return FFIFunction(
            name=f"{self.namespace}_{func.name}",
            arguments=self._ffi_arguments(func.arguments),
            return_type=self._ffi_return(func.return_type),
        )

    def ffi_constructor(self, obj: Object, ctor: Constructor) -> FFIFunction:
        return FFIFunction(
            name=f"{self.namespace}_{obj.name}_{ctor.name}",
            arguments=self._ffi_arguments(ctor.arguments),
            return_type=FFIType.RUST_ARC_PTR,
        )

    def ffi_method(self, obj: Object, meth: Method) -> FFIFunction:
        return FFIFunction(
            name=f"{self.namespace}_{obj.name}_{meth.name}",
            arguments=(FFIArgument("ptr", FFIType.RUST_ARC_PTR),) + self._ffi_arguments(meth.arguments),
            return_type=self._ffi_return(meth.return_type),
        )

    def ffi_object_free(self, obj: Object) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_{obj.name}_object_free",
            arguments=(FFIArgument("ptr", FFIType.RUST_ARC_PTR),),
        )

    def ffi_init_callback(self, cbi: CallbackInterface) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_{cbi.name}_init_callback",
            arguments=(FFIArgument("callback_stub", FFIType.FOREIGN_CALLBACK),),
        )

    def ffi_rustbuffer_alloc(self) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_rustbuffer_alloc",
            arguments=(FFIArgument("size", FFIType.INT32),),
            return_type=FFIType.RUST_BUFFER,
        )

    def ffi_rustbuffer_from_bytes(self) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_rustbuffer_from_bytes",
            arguments=(FFIArgument("bytes", FFIType.FOREIGN_BYTES),),
            return_type=FFIType.RUST_BUFFER,
        )

    def ffi_rustbuffer_free(self) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_rustbuffer_free",
            arguments=(FFIArgument("buf", FFIType.RUST_BUFFER),),
        )

    def ffi_rustbuffer_reserve(self) -> FFIFunction:
        return FFIFunction(
            name=f"ffi_{self.namespace}_rustbuffer_reserve",
            arguments=(FFIArgument("buf", FFIType.RUST_BUFFER), FFIArgument("additional", FFIType.INT32)),
            return_type=FFIType.RUST_BUFFER,
        )

    def iter_ffi_function_definitions(self) -> Iterator[FFIFunction]:
        for obj in self.objects:
            yield self.ffi_object_free(obj)
            for ctor in obj.constructors:
                yield self.ffi_constructor(obj, ctor)
            for meth in obj.methods:
                yield self.ffi_method(obj, meth)
        for cbi in self.callback_interfaces:
            yield self.ffi_init_callback(cbi)
        for func in self.functions:
            yield self.ffi_function(func)
        yield self.ffi_rustbuffer_alloc()
        yield self.ffi_rustbuffer_from_bytes()
        yield self.ffi_rustbuffer_free()
        yield self.ffi_rustbuffer_reserve()

    # ── Type traversal ────────────────────────────────────────

    @staticmethod
    def _callable_types(callables) -> Iterator[TypeIdentifier]:
        for c in callables:
            for arg in c.arguments:
                yield arg.type_
            if getattr(c, "return_type", None) is not None:
                yield c.return_type
            if c.throws_type is not None:
                yield c.throws_type

    def declaration_types(self, decl) -> Iterator[TypeIdentifier]:
        """Types referenced directly by one declaration, the declaration itself first"""
        if isinstance(decl, Record):
            yield RecordType(decl.name)
            for f in decl.fields:
                yield f.type_
        elif isinstance(decl, Enum):
            yield EnumType(decl.name)
            for v in decl.variants:
                for f in v.fields:
                    yield f.type_
        elif isinstance(decl, Error):
            yield ErrorType(decl.name)
            yield PrimitiveType(PrimitiveKind.STRING)
        elif isinstance(decl, Object):
            yield ObjectType(decl.name)
            yield from self._callable_types(decl.constructors)
            yield from self._callable_types(decl.methods)
        elif isinstance(decl, CallbackInterface):
            yield CallbackInterfaceType(decl.name)
            yield from self._callable_types(decl.methods)
        elif isinstance(decl, Function):
            yield from self._callable_types([decl])
        else:
            raise TypeError(f"not a declaration: {decl!r}")

    def iter_declarations(self):
        yield from self.records
        yield from self.enums
        yield from self.errors
        yield from self.objects
        yield from self.callback_interfaces
        yield from self.functions

    def iter_types(self) -> Iterator[TypeIdentifier]:
        """Every type referenced anywhere, compound types expanded, each once"""
        seen = set()

        def expand(type_):
            if type_ in seen:
                return
            seen.add(type_)
            yield type_
            for inner in inner_types(type_):
                yield from expand(inner)

        for decl in self.iter_declarations():
            for type_ in self.declaration_types(decl):
                yield from expand(type_)
        for type_ in self.externals:
            yield from expand(type_)

    def contains_unsigned_types(self, decl) -> bool:
        """Check whether a declaration reaches an unsigned scalar, following records and enums"""
        seen = set()
        pending = list(self.declaration_types(decl))
        while pending:
            type_ = pending.pop()
            if type_ in seen:
                continue
            seen.add(type_)
            if isinstance(type_, PrimitiveType) and type_.kind.is_unsigned:
                return True
            pending.extend(inner_types(type_))
            if isinstance(type_, RecordType) and (rec := self.get_record(type_.name)):
                pending.extend(f.type_ for f in rec.fields)
            elif isinstance(type_, EnumType) and (e := self.get_enum(type_.name)):
                pending.extend(f.type_ for v in e.variants for f in v.fields)
        return False
