"""Core domain models and the template compiler for lambdacf."""

from .models import LambdaFunction, Parameter, ResourceOutputReference
from .template import TemplateAssembler, build_template, function_dependencies

__all__ = ["LambdaFunction", "Parameter", "ResourceOutputReference", "TemplateAssembler", "build_template", "function_dependencies"]
