"""
Kotlin Bindings Generator Package

Reads a UDL component interface definition and generates a single Kotlin
source file that calls the component's native library through JNA:
  1. Records as data classes, enums as enum or sealed classes
  2. Errors as sealed exception hierarchies
  3. Objects as handles with deterministic and cleaner-driven release
  4. Callback interfaces dispatched through a synchronized handle map
"""

from .types import (
    ComponentInterface, Record, Enum, Error, Object, CallbackInterface, Function,
    Field, Argument, Variant, Constructor, Method,
)
from .errors import BindgenError, UnknownTypeError, ParseError, ConfigError, UnreachableError
from .config import Config, ResolvedConfig, load_config
from .parser import UDLParser
from .type_mapper import TypeMapper
from .oracle import KotlinLanguageOracle
from .kotlin_generator import KotlinWrapper, generate_bindings, write_bindings

__all__ = [
    'ComponentInterface', 'Record', 'Enum', 'Error', 'Object', 'CallbackInterface', 'Function',
    'Field', 'Argument', 'Variant', 'Constructor', 'Method',
    'BindgenError', 'UnknownTypeError', 'ParseError', 'ConfigError', 'UnreachableError',
    'Config', 'ResolvedConfig', 'load_config',
    'UDLParser', 'TypeMapper',
    'KotlinLanguageOracle',
    'KotlinWrapper', 'generate_bindings', 'write_bindings',
]
