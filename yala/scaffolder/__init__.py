"""Component scaffolding: Jinja2 templates rendered into component folders."""

from yala.scaffolder.generator import ComponentGenerator
from yala.scaffolder.templates import TemplateRenderer

__all__ = [
    "ComponentGenerator",
    "TemplateRenderer",
]
