"""Installable entry point for the Lambda template compiler.

The code lives in the top-level ``core`` and ``apiserver`` packages;
``lambdacf.core`` and ``lambdacf.apiserver`` resolve to them lazily.
``lambdacf.cli`` is a real subpackage backing the console script.
"""

from importlib import import_module

__version__ = "0.1.0"

_FORWARDED = ("core", "apiserver")

__all__ = ["__version__", *_FORWARDED]


def __getattr__(name: str):
    if name in _FORWARDED:
        module = import_module(name)
        globals()[name] = module
        return module
    raise AttributeError(f"lambdacf has no module or attribute {name!r}")


def __dir__() -> list[str]:
    return sorted({*globals(), *_FORWARDED})
