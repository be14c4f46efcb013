"""Type mapping from UDL type strings to type identifiers"""

import re
from typing import Iterable

from .errors import ParseError
from .types import (
    ErrorType,
    MapType,
    OptionalType,
    PrimitiveKind,
    PrimitiveType,
    SequenceType,
    TypeIdentifier,
)


class TypeMapper:
    """Resolves UDL type strings against the builtins and the declared names"""

    BUILTIN_TYPES = {
        'boolean': PrimitiveKind.BOOLEAN,
        'i8': PrimitiveKind.INT8,
        'u8': PrimitiveKind.UINT8,
        'i16': PrimitiveKind.INT16,
        'u16': PrimitiveKind.UINT16,
        'i32': PrimitiveKind.INT32,
        'u32': PrimitiveKind.UINT32,
        'i64': PrimitiveKind.INT64,
        'u64': PrimitiveKind.UINT64,
        'float': PrimitiveKind.FLOAT32,
        'f32': PrimitiveKind.FLOAT32,
        'double': PrimitiveKind.FLOAT64,
        'f64': PrimitiveKind.FLOAT64,
        'string': PrimitiveKind.STRING,
        'DOMString': PrimitiveKind.STRING,
        'timestamp': PrimitiveKind.TIMESTAMP,
        'duration': PrimitiveKind.DURATION,
    }

    # Map keys are always strings
    MAP_KEY_TYPES = ('string', 'DOMString')

    def __init__(self):
        self.named: dict[str, TypeIdentifier] = {}

    def declare(self, type_: TypeIdentifier):
        """Make a declared type resolvable by name"""
        if type_.name in self.named or type_.name in self.BUILTIN_TYPES:
            raise ParseError(f"Duplicate type name: {type_.name}")
        self.named[type_.name] = type_

    def declare_all(self, types: Iterable[TypeIdentifier]):
        for type_ in types:
            self.declare(type_)

    def resolve(self, udl_type: str) -> TypeIdentifier:
        """Convert a UDL type string to a type identifier"""
        udl_type = udl_type.strip()
        if udl_type.endswith('?'):
            return OptionalType(self.resolve(udl_type[:-1]))

        if m := re.fullmatch(r'sequence\s*<(.+)>', udl_type):
            return SequenceType(self.resolve(m.group(1)))

        if m := re.fullmatch(r'record\s*<\s*(\w+)\s*,(.+)>', udl_type):
            if m.group(1) not in self.MAP_KEY_TYPES:
                raise ParseError(f"Map keys must be strings: {udl_type}")
            return MapType(PrimitiveType(PrimitiveKind.STRING), self.resolve(m.group(2)))

        if udl_type in self.BUILTIN_TYPES:
            return PrimitiveType(self.BUILTIN_TYPES[udl_type])

        if udl_type in self.named:
            return self.named[udl_type]

        raise ParseError(f"Unknown type: {udl_type}")

    def resolve_error(self, name: str) -> ErrorType:
        """The error type named by a `[Throws=...]` attribute"""
        type_ = self.named.get(name)
        if not isinstance(type_, ErrorType):
            raise ParseError(f"Throws names an unknown error: {name}")
        return type_
