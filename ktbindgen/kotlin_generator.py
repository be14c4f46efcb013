"""Kotlin Generator - assembles the Kotlin bindings for one component"""

from pathlib import Path
from typing import Iterator, Optional

from .backend import LanguageOracle, MemberDeclaration
from .callback_interface import KotlinCallbackInterface
from .config import Config, ResolvedConfig
from .enum_ import KotlinEnum
from .error import KotlinError
from .logging import get_logger
from .object_ import KotlinObject
from .oracle import KotlinLanguageOracle
from .record import KotlinRecord
from .render import TemplateRenderer
from .types import ComponentInterface, PrimitiveKind, PrimitiveType, TypeIdentifier

logger = get_logger("generator")

# Imports the runtime section of wrapper.kt always needs
BASE_IMPORTS = (
    "com.sun.jna.Library",
    "com.sun.jna.Native",
    "com.sun.jna.Pointer",
    "com.sun.jna.Structure",
    "com.sun.jna.ptr.ByReference",
    "java.nio.ByteBuffer",
    "java.nio.ByteOrder",
)


class KotlinWrapper:
    """Renders the single Kotlin source file for a component.

    Everything is derived from the component interface and the resolved
    config; nothing is cached between calls to `render`.
    """

    def __init__(self, config: ResolvedConfig, ci: ComponentInterface,
                 oracle: Optional[LanguageOracle] = None):
        self.config = config
        self.ci = ci
        self.oracle = oracle or KotlinLanguageOracle()
        self.renderer = TemplateRenderer(self.oracle)

    def declarations(self) -> list[MemberDeclaration]:
        ci, renderer = self.ci, self.renderer
        return [
            *(KotlinRecord(rec, ci, renderer) for rec in ci.records),
            *(KotlinEnum(e, ci, renderer) for e in ci.enums),
            *(KotlinError(e, ci, renderer) for e in ci.errors),
            *(KotlinObject(obj, ci, renderer) for obj in ci.objects),
            *(KotlinCallbackInterface(cbi, ci, renderer) for cbi in ci.callback_interfaces),
        ]

    def iter_types(self) -> Iterator[TypeIdentifier]:
        # The call status machinery lifts panic messages as strings
        yield PrimitiveType(PrimitiveKind.STRING)
        yield from self.ci.iter_types()

    def helpers(self) -> list[str]:
        """Helper code for every type in use, one block per canonical name"""
        seen = set()
        helpers = []
        for type_ in self.iter_types():
            code_type = self.oracle.find(type_)
            name = code_type.canonical_name(self.oracle)
            if name in seen:
                continue
            seen.add(name)
            code = code_type.helper_code(self.oracle)
            if code:
                helpers.append(code)
        return helpers

    def imports(self, declarations: list[MemberDeclaration]) -> list[str]:
        """Sorted union of the runtime, type and declaration imports"""
        imports = set(BASE_IMPORTS)
        for type_ in self.iter_types():
            imports.update(self.oracle.find(type_).import_code(self.oracle) or [])
        for decl in declarations:
            imports.update(decl.import_code(self.oracle) or [])
        return sorted(imports)

    def render(self) -> str:
        declarations = self.declarations()
        definitions = []
        initialization_code = []
        for decl in declarations:
            logger.debug("Rendering declaration %s", decl.type_identifier())
            code = decl.definition_code(self.oracle)
            if code:
                definitions.append(code.rstrip("\n"))
            init = decl.initialization_code(self.oracle)
            if init:
                initialization_code.append(init)

        context = {
            "config": self.config,
            "ci": self.ci,
            "imports": self.imports(declarations),
            "helpers": self.helpers(),
            "definitions": definitions,
            "initialization_code": initialization_code,
        }
        return self.renderer.render("wrapper.kt", context)


def generate_bindings(ci: ComponentInterface, config: Optional[Config] = None) -> str:
    """Kotlin source for `ci`, with `config` overriding the derived defaults"""
    resolved = (config or Config()).resolve(ci)
    logger.info("Generating Kotlin bindings for %s (package %s)", ci.namespace, resolved.package_name)
    return KotlinWrapper(resolved, ci).render()


def write_bindings(ci: ComponentInterface, config: Optional[Config], out_dir: Path) -> Path:
    """Write `<out_dir>/<package path>/<namespace>.kt` and return its path"""
    resolved = (config or Config()).resolve(ci)
    source = KotlinWrapper(resolved, ci).render()
    package_dir = Path(out_dir).joinpath(*resolved.package_name.split("."))
    package_dir.mkdir(parents=True, exist_ok=True)
    path = package_dir / f"{ci.namespace}.kt"
    path.write_text(source, encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
