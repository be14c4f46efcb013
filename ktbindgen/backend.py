"""Interfaces shared by language oracles, code types and declarations"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .errors import UnreachableError
from .types import FFIType, Literal, TypeIdentifier


@dataclass(frozen=True)
class AtomicFlag:
    """Atomic boolean of the target language, used for once-only teardown"""
    type_name: str
    imports: tuple
    create_template: str
    test_and_set_template: str

    def create(self, initial: str) -> str:
        return self.create_template.format(type_name=self.type_name, initial=initial)

    def test_and_set(self, flag: str) -> str:
        """Expression that sets `flag` and is true only for the caller that flipped it"""
        return self.test_and_set_template.format(flag=flag)


@dataclass(frozen=True)
class Mutex:
    """Mutual-exclusion lock of the target language"""
    type_name: str
    imports: tuple
    create_template: str
    guard_template: str

    def create(self) -> str:
        return self.create_template.format(type_name=self.type_name)

    def guard(self, lock: str) -> str:
        """Prefix for a block that runs while holding `lock`"""
        return self.guard_template.format(lock=lock)


class LanguageOracle(ABC):
    """Maps type identifiers to code types and knows the target's conventions"""

    @abstractmethod
    def find(self, type_: TypeIdentifier) -> "CodeType":
        ...

    @abstractmethod
    def class_name(self, nm: str) -> str:
        ...

    @abstractmethod
    def fn_name(self, nm: str) -> str:
        ...

    @abstractmethod
    def var_name(self, nm: str) -> str:
        ...

    @abstractmethod
    def enum_variant(self, nm: str) -> str:
        ...

    @abstractmethod
    def exception_name(self, nm: str) -> str:
        ...

    @abstractmethod
    def ffi_type_label(self, ffi_type: FFIType) -> str:
        ...

    @abstractmethod
    def untyped_literal(self, literal: Literal) -> str:
        """Render a literal whose syntax does not depend on its type (null, booleans, ...)"""

    @property
    @abstractmethod
    def atomic_flag(self) -> AtomicFlag:
        ...

    @property
    @abstractmethod
    def mutex(self) -> Mutex:
        ...


class CodeType(ABC):
    """Code generation strategy for one kind of type.

    The four marshaling operations must agree with each other: whatever `lower`
    produces, `lift` accepts, and whatever `write` puts into a buffer, `read`
    takes back out.
    """

    @abstractmethod
    def type_label(self, oracle: LanguageOracle) -> str:
        """The name users see for this type"""

    def canonical_name(self, oracle: LanguageOracle) -> str:
        """A name unique to this type, safe to embed in identifiers"""
        return self.type_label(oracle)

    def literal(self, oracle: LanguageOracle, literal: Literal) -> str:
        raise UnreachableError(f"{self.canonical_name(oracle)} has no literal syntax")

    @abstractmethod
    def lower(self, oracle: LanguageOracle, nm: str) -> str:
        ...

    @abstractmethod
    def write(self, oracle: LanguageOracle, nm: str, target: str) -> str:
        ...

    @abstractmethod
    def lift(self, oracle: LanguageOracle, nm: str) -> str:
        ...

    @abstractmethod
    def read(self, oracle: LanguageOracle, nm: str) -> str:
        ...

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        """Supporting declarations, emitted once however often the type is used"""
        return None

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return None


class MemberDeclaration(ABC):
    """Binds a code type to one declaration of the component interface"""

    @abstractmethod
    def type_identifier(self) -> TypeIdentifier:
        ...

    def definition_code(self, oracle: LanguageOracle) -> Optional[str]:
        return None

    def initialization_code(self, oracle: LanguageOracle) -> Optional[str]:
        """Statement run once when the native library is loaded"""
        return None

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return None
