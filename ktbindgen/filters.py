"""Template filters.

This is the only seam between the templates and the code type system. Every
filter looks up the oracle's code type for a type identifier and hands back
what it renders; none of them carry logic of their own.
"""

from functools import partial

from .backend import LanguageOracle
from .types import TYPED_LITERALS, FFIType, Literal, TypeIdentifier


def type_label(oracle: LanguageOracle, type_: TypeIdentifier) -> str:
    return oracle.find(type_).type_label(oracle)


def canonical_name(oracle: LanguageOracle, type_: TypeIdentifier) -> str:
    return oracle.find(type_).canonical_name(oracle)


def lower(oracle: LanguageOracle, nm: str, type_: TypeIdentifier) -> str:
    return oracle.find(type_).lower(oracle, nm)


def write(oracle: LanguageOracle, nm: str, target: str, type_: TypeIdentifier) -> str:
    return oracle.find(type_).write(oracle, nm, target)


def lift(oracle: LanguageOracle, nm: str, type_: TypeIdentifier) -> str:
    return oracle.find(type_).lift(oracle, nm)


def read(oracle: LanguageOracle, nm: str, type_: TypeIdentifier) -> str:
    return oracle.find(type_).read(oracle, nm)


def literal(oracle: LanguageOracle, lit: Literal) -> str:
    if isinstance(lit, TYPED_LITERALS):
        return oracle.find(lit.type_).literal(oracle, lit)
    return oracle.untyped_literal(lit)


def ffi_type_label(oracle: LanguageOracle, ffi_type: FFIType) -> str:
    return oracle.ffi_type_label(ffi_type)


def class_name(oracle: LanguageOracle, nm: str) -> str:
    return oracle.class_name(nm)


def fn_name(oracle: LanguageOracle, nm: str) -> str:
    return oracle.fn_name(nm)


def var_name(oracle: LanguageOracle, nm: str) -> str:
    return oracle.var_name(nm)


def enum_variant_name(oracle: LanguageOracle, nm: str) -> str:
    return oracle.enum_variant(nm)


def exception_name(oracle: LanguageOracle, nm: str) -> str:
    return oracle.exception_name(nm)


# Names the templates use for each filter
TEMPLATE_FILTERS = {
    "type_kt": type_label,
    "canonical_name": canonical_name,
    "lower_kt": lower,
    "write_kt": write,
    "lift_kt": lift,
    "read_kt": read,
    "literal_kt": literal,
    "type_ffi": ffi_type_label,
    "class_name_kt": class_name,
    "fn_name_kt": fn_name,
    "var_name_kt": var_name,
    "enum_variant_kt": enum_variant_name,
    "exception_name_kt": exception_name,
}


def bind_filters(oracle: LanguageOracle) -> dict:
    """Template filters with `oracle` applied as the first argument"""
    return {name: partial(fn, oracle) for name, fn in TEMPLATE_FILTERS.items()}
