"""Enums.

Enums without associated data become a Kotlin `enum class`; enums whose
variants carry fields become a `sealed class`. Either way the wire form is a
1-based i32 variant index followed by any fields.
"""

from .backend import LanguageOracle
from .declared import ClassCodeType, TemplateDeclaration
from .errors import UnreachableError
from .types import EnumLiteral, EnumType, Literal


class EnumCodeType(ClassCodeType):
    prefix = "Enum"
    template = "EnumTemplate.kt"
    description = "enum"

    def literal(self, oracle: LanguageOracle, literal: Literal) -> str:
        if not isinstance(literal, EnumLiteral):
            raise UnreachableError(f"{literal!r} cannot be rendered as {self.canonical_name(oracle)}")
        return f"{self.type_label(oracle)}.{oracle.enum_variant(literal.variant)}"


class KotlinEnum(TemplateDeclaration):
    template = "EnumTemplate.kt"

    def type_identifier(self) -> EnumType:
        return EnumType(self.inner.name)

    def context(self, oracle: LanguageOracle) -> dict:
        return {"e": self.inner}
