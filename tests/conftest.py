from __future__ import annotations

from pathlib import Path

import pytest

from ktbindgen import UDLParser, generate_bindings
from ktbindgen.oracle import KotlinLanguageOracle
from ktbindgen.types import ComponentInterface

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "samples"


@pytest.fixture
def oracle() -> KotlinLanguageOracle:
    return KotlinLanguageOracle()


@pytest.fixture
def geo_udl() -> str:
    return (SAMPLES_DIR / "geo.udl").read_text(encoding="utf-8")


@pytest.fixture
def geo_ci(geo_udl: str) -> ComponentInterface:
    """The sample geometry component"""
    return UDLParser(geo_udl).parse()


@pytest.fixture
def geo_source(geo_ci: ComponentInterface) -> str:
    """Kotlin generated for the sample component with default config"""
    return generate_bindings(geo_ci)


def parse_udl(text: str) -> ComponentInterface:
    return UDLParser(text).parse()
