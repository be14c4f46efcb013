"""Shared pieces for types backed by a declaration of the component interface"""

from typing import Optional

from .backend import CodeType, LanguageOracle, MemberDeclaration
from .render import TemplateRenderer
from .types import ComponentInterface

UNSIGNED_IMPORT = "kotlin.ExperimentalUnsignedTypes"


class ClassCodeType(CodeType):
    """A Kotlin class whose companion lifts and reads values and whose
    instances lower and write themselves.
    """

    # Canonical name prefix and the template holding the class body
    prefix = ""
    template = ""
    description = ""

    def __init__(self, id_: str):
        self.id = id_

    def type_label(self, oracle: LanguageOracle) -> str:
        return oracle.class_name(self.id)

    def canonical_name(self, oracle: LanguageOracle) -> str:
        return f"{self.prefix}{self.type_label(oracle)}"

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{oracle.var_name(nm)}.lower()"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"{oracle.var_name(nm)}.write({target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.type_label(oracle)}.lift({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.type_label(oracle)}.read({nm})"

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        return f"// Helper code for {self.type_label(oracle)} {self.description} is found in {self.template}"


class TemplateDeclaration(MemberDeclaration):
    """Declaration whose definition is one template expansion.

    Instances are built fresh for every generation pass.
    """

    template = ""

    def __init__(self, inner, ci: ComponentInterface, renderer: TemplateRenderer):
        self.inner = inner
        self.ci = ci
        self.renderer = renderer
        self.contains_unsigned_types = ci.contains_unsigned_types(inner)

    def context(self, oracle: LanguageOracle) -> dict:
        return {}

    def definition_code(self, oracle: LanguageOracle) -> Optional[str]:
        context = {
            "ci": self.ci,
            "type_": self.type_identifier(),
            "contains_unsigned_types": self.contains_unsigned_types,
        }
        context.update(self.context(oracle))
        return self.renderer.render(self.template, context)

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return [UNSIGNED_IMPORT] if self.contains_unsigned_types else None
