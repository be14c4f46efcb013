"""Callback interfaces: Kotlin implementations invoked from the native library.

Implementations are handed to the native side as opaque handles into a
dispatch table. The table is shared between application threads registering
implementations and native threads calling back into them, so every access
goes through the oracle's mutex.
"""

from typing import Optional

from .backend import LanguageOracle
from .declared import ClassCodeType, TemplateDeclaration
from .types import CallbackInterfaceType


class CallbackInterfaceCodeType(ClassCodeType):
    prefix = "CallbackInterface"
    template = "CallbackInterfaceTemplate.kt"
    description = "callback interface"

    def internals(self, oracle: LanguageOracle) -> str:
        """Name of the object holding the dispatch table"""
        return f"{self.canonical_name(oracle)}Internals"

    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.internals(oracle)}.lower({oracle.var_name(nm)})"

    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        return f"{self.internals(oracle)}.write({oracle.var_name(nm)}, {target})"

    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.internals(oracle)}.lift({nm})"

    def read(self, oracle: LanguageOracle, nm: str) -> str:
        return f"{self.internals(oracle)}.read({nm})"


class KotlinCallbackInterface(TemplateDeclaration):
    template = "CallbackInterfaceTemplate.kt"

    def type_identifier(self) -> CallbackInterfaceType:
        return CallbackInterfaceType(self.inner.name)

    def _code_type(self) -> CallbackInterfaceCodeType:
        return CallbackInterfaceCodeType(self.inner.name)

    def context(self, oracle: LanguageOracle) -> dict:
        return {
            "cbi": self.inner,
            "internals": self._code_type().internals(oracle),
        }

    def initialization_code(self, oracle: LanguageOracle) -> Optional[str]:
        return f"{self._code_type().internals(oracle)}.register(lib)"

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return [*oracle.mutex.imports, *(super().import_code(oracle) or [])]
