"""Types declared by another component and imported from its package"""

from typing import Optional

from .backend import LanguageOracle
from .config import ROOT_PACKAGE
from .declared import ClassCodeType


class ExternalCodeType(ClassCodeType):
    prefix = "External"
    description = "external type"

    def __init__(self, id_: str, crate: str):
        super().__init__(id_)
        self.crate = crate

    def helper_code(self, oracle: LanguageOracle) -> Optional[str]:
        return f"// {self.type_label(oracle)} is defined in {ROOT_PACKAGE}.{self.crate}"

    def import_code(self, oracle: LanguageOracle) -> Optional[list[str]]:
        return [f"{ROOT_PACKAGE}.{self.crate}.{self.type_label(oracle)}"]
