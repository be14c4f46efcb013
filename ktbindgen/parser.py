"""UDL (WebIDL-flavoured) interface definition parser"""

import re
from dataclasses import dataclass
from typing import Optional

from .errors import ParseError
from .logging import get_logger
from .type_mapper import TypeMapper
from .types import (
    Argument,
    BooleanLiteral,
    CallbackInterface,
    CallbackInterfaceType,
    ComponentInterface,
    Constructor,
    EmptyMapLiteral,
    EmptySequenceLiteral,
    Enum,
    EnumLiteral,
    EnumType,
    Error,
    ErrorType,
    ExternalType,
    Field,
    FloatLiteral,
    Function,
    IntLiteral,
    Literal,
    Method,
    NullLiteral,
    Object,
    ObjectType,
    OptionalType,
    PrimitiveType,
    Radix,
    Record,
    RecordType,
    StringLiteral,
    TypeIdentifier,
    UIntLiteral,
    Variant,
)

logger = get_logger("parser")

# `[attrs] kind Name {` opening a definition block
_DEFINITION_RE = re.compile(
    r'(?:\[(?P<attrs>[^\]]*)\]\s*)?'
    r'\b(?P<kind>namespace|dictionary|enum|callback\s+interface|interface)\s+'
    r'(?P<name>\w+)\s*\{'
)
_EXTERNAL_RE = re.compile(r'\[(?P<attrs>[^\]]*)\]\s*typedef\s+extern\s+(?P<name>\w+)\s*;')
_ATTRIBUTES_RE = re.compile(r'^\[(?P<attrs>[^\]]*)\]\s*(?P<rest>.*)$', re.DOTALL)
_CALLABLE_RE = re.compile(r'^(?P<ret>.+?)\s+(?P<name>\w+)\s*\((?P<args>.*)\)$', re.DOTALL)
_CONSTRUCTOR_RE = re.compile(r'^constructor\s*\((?P<args>.*)\)$', re.DOTALL)
_VARIANT_RE = re.compile(r'^(?P<name>\w+)\s*\((?P<args>.*)\)$', re.DOTALL)
_MEMBER_RE = re.compile(r'^(?P<type>.+?)\s+(?P<name>\w+)(?:\s*=\s*(?P<default>.+))?$', re.DOTALL)
# Integers with a leading zero are octal
_INT_RE = re.compile(r'^-?(?:0[xX][0-9a-fA-F]+|0[0-7]*|[1-9]\d*)$')
_FLOAT_RE = re.compile(r'^-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$')


@dataclass
class _Definition:
    kind: str
    name: str
    attrs: dict
    body: str


class UDLParser:
    """Parses the UDL subset into a ComponentInterface.

    Parsing is two passes: the first collects every named definition so that
    type strings can refer to types declared later in the file, the second
    builds the declarations.
    """

    def __init__(self, content: str):
        self.content = self._strip_comments(content)
        self.mapper = TypeMapper()
        self._flat_enum_variants: dict[str, list[str]] = {}

    def _strip_comments(self, content: str) -> str:
        content = re.sub(r'//.*$', '', content, flags=re.MULTILINE)
        content = re.sub(r'/\*.*?\*/', '', content, flags=re.DOTALL)
        return content

    def parse(self) -> ComponentInterface:
        definitions = self._find_definitions()
        externals = self._parse_externals()

        namespaces = [d for d in definitions if d.kind == "namespace"]
        if len(namespaces) != 1:
            raise ParseError(f"Expected exactly one namespace, found {len(namespaces)}")

        self.mapper.declare_all(externals)
        for d in definitions:
            if d.kind != "namespace":
                self.mapper.declare(self._declared_type(d))
            if d.kind == "enum" and "Error" not in d.attrs:
                self._flat_enum_variants[d.name] = [
                    v.name for v in self._parse_flat_variants(d.body)
                ]

        ci = ComponentInterface(namespace=namespaces[0].name, externals=externals)
        ci.functions = self._parse_functions(namespaces[0].body)
        for d in definitions:
            if d.kind == "dictionary":
                ci.records.append(self._parse_record(d))
            elif d.kind == "enum" and "Error" in d.attrs:
                ci.errors.append(Error(name=d.name, variants=self._parse_flat_variants(d.body)))
            elif d.kind == "enum":
                ci.enums.append(Enum(name=d.name, variants=self._parse_flat_variants(d.body)))
            elif d.kind == "interface" and "Enum" in d.attrs:
                ci.enums.append(Enum(name=d.name, variants=self._parse_data_variants(d.body)))
            elif d.kind == "interface":
                ci.objects.append(self._parse_object(d))
            elif d.kind == "callback interface":
                ci.callback_interfaces.append(
                    CallbackInterface(name=d.name, methods=self._parse_methods(d.body))
                )

        logger.debug(
            "Parsed namespace %s: %d records, %d enums, %d errors, %d objects, "
            "%d callback interfaces, %d functions",
            ci.namespace, len(ci.records), len(ci.enums), len(ci.errors),
            len(ci.objects), len(ci.callback_interfaces), len(ci.functions),
        )
        return ci

    # ── First pass ────────────────────────────────────────────

    def _find_definitions(self) -> list[_Definition]:
        definitions = []
        pos = 0
        while m := _DEFINITION_RE.search(self.content, pos):
            end = self._matching_brace(m.end() - 1)
            body = self.content[m.end():end]
            if not re.match(r'\s*;', self.content[end + 1:]):
                raise ParseError(f"Missing ';' after definition of {m.group('name')}")
            kind = re.sub(r'\s+', ' ', m.group('kind'))
            definitions.append(_Definition(
                kind=kind,
                name=m.group('name'),
                attrs=self._parse_attributes(m.group('attrs') or ''),
                body=body,
            ))
            pos = end + 1
        return definitions

    def _matching_brace(self, open_pos: int) -> int:
        depth = 0
        for i in range(open_pos, len(self.content)):
            if self.content[i] == '{':
                depth += 1
            elif self.content[i] == '}':
                depth -= 1
                if depth == 0:
                    return i
        raise ParseError("Unbalanced braces")

    def _parse_externals(self) -> list[ExternalType]:
        externals = []
        for m in _EXTERNAL_RE.finditer(self.content):
            attrs = self._parse_attributes(m.group('attrs'))
            crate = attrs.get('External')
            if not isinstance(crate, str):
                raise ParseError(f"typedef extern {m.group('name')} needs an External=\"crate\" attribute")
            externals.append(ExternalType(name=m.group('name'), crate=crate))
        return externals

    def _declared_type(self, d: _Definition) -> TypeIdentifier:
        if d.kind == "dictionary":
            return RecordType(d.name)
        if d.kind == "enum":
            return ErrorType(d.name) if "Error" in d.attrs else EnumType(d.name)
        if d.kind == "interface":
            return EnumType(d.name) if "Enum" in d.attrs else ObjectType(d.name)
        return CallbackInterfaceType(d.name)

    def _parse_attributes(self, text: str) -> dict:
        """`Throws=E, Enum` -> {'Throws': 'E', 'Enum': True}"""
        attrs = {}
        for item in _split_top_level(text):
            if '=' in item:
                key, value = item.split('=', 1)
                attrs[key.strip()] = value.strip().strip('"')
            else:
                attrs[item] = True
        return attrs

    # ── Second pass ───────────────────────────────────────────

    def _parse_record(self, d: _Definition) -> Record:
        fields = []
        for stmt in _statements(d.body):
            stmt = re.sub(r'^required\s+', '', stmt)
            fields.append(self._parse_member(stmt, Field))
        return Record(name=d.name, fields=fields)

    def _parse_flat_variants(self, body: str) -> list[Variant]:
        return [Variant(name=name) for name in re.findall(r'"(\w+)"', body)]

    def _parse_data_variants(self, body: str) -> list[Variant]:
        variants = []
        for stmt in _statements(body):
            m = _VARIANT_RE.match(stmt)
            if not m:
                raise ParseError(f"Invalid enum variant: {stmt}")
            fields = [self._parse_member(a, Field) for a in _split_top_level(m.group('args'))]
            variants.append(Variant(name=m.group('name'), fields=fields))
        return variants

    def _parse_object(self, d: _Definition) -> Object:
        obj = Object(name=d.name)
        for stmt in _statements(d.body):
            attrs, rest = self._split_attributes(stmt)
            if m := _CONSTRUCTOR_RE.match(rest):
                obj.constructors.append(Constructor(
                    name=attrs.get('Name', 'new'),
                    arguments=self._parse_arguments(m.group('args')),
                    throws=self._throws(attrs),
                ))
            else:
                obj.methods.append(self._parse_callable(attrs, rest, Method))
        return obj

    def _parse_methods(self, body: str) -> list[Method]:
        methods = []
        for stmt in _statements(body):
            attrs, rest = self._split_attributes(stmt)
            methods.append(self._parse_callable(attrs, rest, Method))
        return methods

    def _parse_functions(self, body: str) -> list[Function]:
        functions = []
        for stmt in _statements(body):
            attrs, rest = self._split_attributes(stmt)
            functions.append(self._parse_callable(attrs, rest, Function))
        return functions

    def _parse_callable(self, attrs: dict, text: str, cls):
        m = _CALLABLE_RE.match(text)
        if not m:
            raise ParseError(f"Invalid declaration: {text}")
        ret = m.group('ret').strip()
        return cls(
            name=m.group('name'),
            arguments=self._parse_arguments(m.group('args')),
            return_type=None if ret == 'void' else self.mapper.resolve(ret),
            throws=self._throws(attrs),
        )

    def _parse_arguments(self, text: str) -> list[Argument]:
        return [self._parse_member(a, Argument) for a in _split_top_level(text)]

    def _parse_member(self, text: str, cls):
        """`type name [= default]` as a Field or Argument"""
        text = re.sub(r'^optional\s+', '', text.strip())
        m = _MEMBER_RE.match(text)
        if not m:
            raise ParseError(f"Invalid member: {text}")
        type_ = self.mapper.resolve(m.group('type'))
        default = m.group('default')
        return cls(
            name=m.group('name'),
            type_=type_,
            default=self._parse_literal(default.strip(), type_) if default else None,
        )

    def _parse_literal(self, text: str, type_: TypeIdentifier) -> Literal:
        if text == 'null':
            return NullLiteral()
        if text == '[]':
            return EmptySequenceLiteral()
        if text == '{}':
            return EmptyMapLiteral()
        if text in ('true', 'false'):
            return BooleanLiteral(text == 'true')

        # Non-null defaults of optionals are literals of the inner type
        while isinstance(type_, OptionalType):
            type_ = type_.inner

        try:
            if text.startswith('"') and text.endswith('"'):
                if isinstance(type_, EnumType):
                    return self._enum_literal(text[1:-1], type_)
                return StringLiteral(text[1:-1])
            if isinstance(type_, PrimitiveType) and type_.kind.is_integer and _INT_RE.match(text):
                radix = _int_radix(text)
                value = int(text, radix.value)
                literal_cls = UIntLiteral if type_.kind.is_unsigned else IntLiteral
                return literal_cls(value, type_, radix)
            if isinstance(type_, PrimitiveType) and type_.kind.is_float and _FLOAT_RE.match(text):
                return FloatLiteral(text, type_)
        except ValueError as e:
            raise ParseError(f"Invalid default {text}: {e}") from e
        raise ParseError(f"Invalid default {text} for {type_!r}")

    def _enum_literal(self, variant: str, type_: EnumType) -> EnumLiteral:
        # Only flat enums have constants to name in a default
        variants = self._flat_enum_variants.get(type_.name)
        if variants is None:
            raise ParseError(f"Enum {type_.name} carries data and cannot have a default")
        if variant not in variants:
            raise ParseError(f"Invalid default \"{variant}\": {type_.name} has no such variant")
        return EnumLiteral(variant, type_)

    def _split_attributes(self, stmt: str) -> tuple[dict, str]:
        if m := _ATTRIBUTES_RE.match(stmt):
            return self._parse_attributes(m.group('attrs')), m.group('rest').strip()
        return {}, stmt

    def _throws(self, attrs: dict) -> Optional[str]:
        name = attrs.get('Throws')
        if name is None:
            return None
        return self.mapper.resolve_error(name).name


def _int_radix(text: str) -> Radix:
    digits = text.lstrip('-').lower()
    if digits.startswith('0x'):
        return Radix.HEXADECIMAL
    if digits.startswith('0') and len(digits) > 1:
        return Radix.OCTAL
    return Radix.DECIMAL


def _statements(body: str) -> list[str]:
    return [s for s in _split_top_level(body, ';') if s]


def _split_top_level(text: str, sep: str = ',') -> list[str]:
    """Split on `sep` outside brackets and string literals"""
    parts = []
    depth = 0
    in_string = False
    current = []
    for ch in text:
        if ch == '"':
            in_string = not in_string
        elif not in_string and ch in '<([{':
            depth += 1
        elif not in_string and ch in '>)]}':
            depth -= 1
        if ch == sep and depth == 0 and not in_string:
            parts.append(''.join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = ''.join(current).strip()
    if tail:
        parts.append(tail)
    return [p for p in parts if p]
