"""Records: plain data classes serialized field by field"""

from .backend import LanguageOracle
from .declared import ClassCodeType, TemplateDeclaration
from .types import RecordType


class RecordCodeType(ClassCodeType):
    prefix = "Record"
    template = "RecordTemplate.kt"
    description = "record"


class KotlinRecord(TemplateDeclaration):
    template = "RecordTemplate.kt"

    def type_identifier(self) -> RecordType:
        return RecordType(self.inner.name)

    def context(self, oracle: LanguageOracle) -> dict:
        return {"rec": self.inner}
