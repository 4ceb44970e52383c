"""API routes."""

from . import dependencies, template
from ._request import read_body

__all__ = ["dependencies", "read_body", "template"]
