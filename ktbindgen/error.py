"""Errors: enums surfaced to Kotlin as a sealed exception hierarchy"""

from .backend import LanguageOracle
from .declared import ClassCodeType, TemplateDeclaration
from .types import ErrorType, PrimitiveKind, PrimitiveType


class ErrorCodeType(ClassCodeType):
    prefix = "Error"
    template = "ErrorTemplate.kt"
    description = "error"

    def type_label(self, oracle: LanguageOracle) -> str:
        return oracle.exception_name(oracle.class_name(self.id))


class KotlinError(TemplateDeclaration):
    template = "ErrorTemplate.kt"

    def type_identifier(self) -> ErrorType:
        return ErrorType(self.inner.name)

    def context(self, oracle: LanguageOracle) -> dict:
        return {"e": self.inner, "string_type": PrimitiveType(PrimitiveKind.STRING)}
