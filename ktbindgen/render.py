"""Jinja2 environment used to expand the Kotlin source skeletons"""

from __future__ import annotations

import os
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .backend import LanguageOracle
from .filters import bind_filters
from .logging import get_logger

logger = get_logger("render")

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


class TemplateRenderer:
    """Renders the templates under `templates/` with filters bound to one oracle.

    Template errors are not caught here; a failed expansion fails the whole
    generation pass.
    """

    def __init__(self, oracle: LanguageOracle, template_dir: str = TEMPLATE_DIR):
        self.oracle = oracle
        self._env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            autoescape=False,
        )
        self._env.filters.update(bind_filters(oracle))
        self._env.globals["oracle"] = oracle

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template file with the given context"""
        logger.debug("Rendering %s", template_name)
        return self._env.get_template(template_name).render(**context)
