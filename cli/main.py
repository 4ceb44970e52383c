"""Command line interface for compiling function definitions into CloudFormation."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from cli import config, output
from core.backend_config import update_backend_config
from core.errors import DefinitionError, TemplateError
from core.loader import FunctionDefinitionReader, load_function_definition
from core.models import LambdaFunction
from core.template.assembler import TemplateAssembler
from core.template.references import function_dependencies

logger = logging.getLogger(__name__)


class CLIError(Exception):
    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lambdacf", description="Compile Lambda definitions into CloudFormation templates")
    parser.add_argument("--config", type=Path, default=Path("lambdacf.yml"), help="Path to CLI configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # build ------------------------------------------------------------------
    build_cmd = subparsers.add_parser("build", help="Compile every function in a handlers directory")
    build_cmd.add_argument("-f", "--functions", type=Path, required=True, help="Directory holding one subdirectory per function")
    build_cmd.add_argument("-b", "--build", dest="only", help="Build only this function directory")
    build_cmd.add_argument("-a", "--amplify-backend", help="Amplify backend directory")
    build_cmd.add_argument("--format", choices=config.FORMATS, help="Template format override")

    # compile ----------------------------------------------------------------
    compile_cmd = subparsers.add_parser("compile", help="Compile a single definition file")
    compile_cmd.add_argument("--definition", type=Path, required=True)
    compile_cmd.add_argument("--name", required=True, help="Function name")
    compile_cmd.add_argument("--output", type=Path)
    compile_cmd.add_argument("--format", choices=config.FORMATS, help="Output format override")

    # dependencies -----------------------------------------------------------
    deps_cmd = subparsers.add_parser("dependencies", help="List the outputs a definition depends on")
    deps_cmd.add_argument("--definition", type=Path, required=True)
    deps_cmd.add_argument("--output", type=Path)
    deps_cmd.add_argument("--format", choices=config.FORMATS, help="Output format override")

    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def app(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = config.load_settings(args.config)
        format_override = getattr(args, "format", None)

        if args.command == "build":
            return _cmd_build(args, settings.merge_cli(format_override=format_override, amplify_backend=args.amplify_backend))
        if args.command == "compile":
            return _cmd_compile(args, settings.merge_cli(format_override=format_override))
        if args.command == "dependencies":
            return _cmd_dependencies(args, settings.merge_cli(format_override=format_override))
    except CLIError as exc:
        print(exc, file=sys.stderr)
        return exc.exit_code
    except (DefinitionError, TemplateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:  # pragma: no cover - unexpected errors bubble up
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Command implementations


def _cmd_build(args: argparse.Namespace, settings: config.Settings) -> int:
    reader = FunctionDefinitionReader(args.functions)
    backend_dir = Path(settings.amplify_backend)
    if args.only:
        names = [args.only]
    else:
        try:
            names = list(reader.discover())
        except FileNotFoundError as exc:
            raise CLIError(f"Functions directory not found: {exc}") from exc

    if not names:
        logger.warning("No function definitions found in %s", args.functions)
        return 0

    assembler = TemplateAssembler(**settings.assembler_options())
    for name in names:
        logger.info("Building function %s", name)
        function = reader.load(name)
        _build_function(assembler, name, function, backend_dir, settings.default_format)
    return 0


def _build_function(
    assembler: TemplateAssembler,
    name: str,
    function: LambdaFunction,
    backend_dir: Path,
    fmt: str,
) -> None:
    template = assembler.build(name, function)
    template_path = output.write_template(template, backend_dir / "function" / name, name, fmt)
    logger.info("Wrote %s", template_path)

    config_path = update_backend_config(backend_dir, name, function)
    logger.info("Registered %s in %s", name, config_path)


def _cmd_compile(args: argparse.Namespace, settings: config.Settings) -> int:
    function = load_function_definition(args.definition)
    template = TemplateAssembler(**settings.assembler_options()).build(args.name, function)
    output.emit(template, settings.default_format, output_path=args.output)
    return 0


def _cmd_dependencies(args: argparse.Namespace, settings: config.Settings) -> int:
    function = load_function_definition(args.definition)
    output.emit({"dependsOn": function_dependencies(function)}, settings.default_format, output_path=args.output)
    return 0


def main() -> None:
    raise SystemExit(app())


if __name__ == "__main__":
    main()
