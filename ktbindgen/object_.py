"""Objects: handles to native-owned resources.

A handle is lowered as the raw pointer and lifted by wrapping a pointer in a
new `FFIObject` subclass instance. The runtime base class frees the native
side exactly once, whether `destroy()` or the JVM cleaner gets there first.
"""

from typing import Optional

from .backend import LanguageOracle
from .declared import ClassCodeType, TemplateDeclaration
from .types import ObjectType


class ObjectCodeType(ClassCodeType):
    prefix = "Object"
    template = "ObjectTemplate.kt"
    description = "class"

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return [
            "java.lang.ref.Cleaner",
            "java.util.concurrent.atomic.AtomicLong",
            *oracle.atomic_flag.imports,
        ]


class KotlinObject(TemplateDeclaration):
    template = "ObjectTemplate.kt"

    def type_identifier(self) -> ObjectType:
        return ObjectType(self.inner.name)

    def context(self, oracle: LanguageOracle) -> dict:
        return {"obj": self.inner}
