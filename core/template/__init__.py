"""Compile function definitions into CloudFormation templates."""

from .assembler import TemplateAssembler, build_template
from .references import collect_output_references, function_dependencies

__all__ = ["TemplateAssembler", "build_template", "collect_output_references", "function_dependencies"]
