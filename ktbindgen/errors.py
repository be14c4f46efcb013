"""Exceptions raised while generating bindings"""


class BindgenError(RuntimeError):
    """Base class for generation failures. A failed pass produces no output."""


class UnknownTypeError(BindgenError):
    """Raised when the oracle has no code type for a type identifier"""

    def __init__(self, type_):
        super().__init__(f"no code type registered for {type_!r}")
        self.type_ = type_


class ParseError(BindgenError):
    """Raised when an interface definition cannot be parsed"""


class ConfigError(BindgenError):
    """Raised when a bindings config file cannot be read"""


class UnreachableError(AssertionError):
    """A caller reached a code path that its traversal should have excluded.

    This is a defect in the caller, not a problem with the input.
    """
