#!/usr/bin/env python3
"""
flowmodel-io command line

Usage:
    flowmodel-io validate <file type> <file>    # Check a file against one format
    flowmodel-io info <file>                     # Recognise a file
    flowmodel-io formats list [--json]           # List supported formats
    flowmodel-io formats docs                    # Markdown reference of formats
    flowmodel-io inputs commands <input type>    # Commands accepting an input type
    flowmodel-io config validate <path>          # Check a config file
    flowmodel-io config schema                   # JSON Schema of the config file

Options:
    --config PATH   Config file (default: config.local.yaml)
    --quiet         Only print warnings and errors
    --debug         Print every import attempt

Use - as file name to read from standard input.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import config_schema, load_config, validate_config_file
from .core import (
    Capability,
    Command,
    ConfigError,
    FlowModelError,
    InputType,
    ObjectKind,
    ResolvedInput,
    SourceError,
    auto_discover_file_handlers,
    get_catalog,
    open_source,
    resolve_input,
    validate_object_of,
)
from .core.context import OutputMode
from .models import CommandPathsResponse, FileHandlerInfo, FileHandlerListResponse, ResolvedInputInfo

logger = logging.getLogger(__name__)


def setup_logging(output_mode: OutputMode) -> None:
    """Configure logging based on output mode."""
    if output_mode == OutputMode.QUIET:
        level = logging.WARNING
    elif output_mode == OutputMode.DEBUG:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_input_type(text: str) -> InputType:
    """
    Parse an input type name as typed on the command line.

    Accepts ``object``, ``file``, ``text``, ``integer``, ``fraction``,
    ``capability:<name>`` and ``object:<name>``, e.g. ``capability:event log``.
    """
    primitives = {
        "object": InputType.ANY_OBJECT,
        "file": InputType.FILE_HANDLER,
        "text": InputType.TEXT,
        "integer": InputType.INTEGER,
        "fraction": InputType.FRACTION,
    }
    text = text.strip()
    if text in primitives:
        return primitives[text]

    prefix, _, name = text.partition(":")
    name = name.strip()
    if prefix == "capability":
        for capability in Capability:
            if str(capability) == name:
                return InputType.capability(capability)
    elif prefix == "object":
        for kind in ObjectKind:
            if str(kind) == name:
                return InputType.object(kind)
    raise ValueError(
        f"Unknown input type: '{text}'. Use one of {', '.join(primitives)}, "
        f"capability:<name> or object:<name>"
    )


# === Built-in commands ===

def _validate(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    handler = args.file_type
    source = open_source(args.file, max_bytes=args._config["stdin"]["max_bytes"])
    try:
        validate_object_of(source, handler)
    except SourceError:
        raise
    except Exception as e:
        print(f"✗ The input is not {handler}: {e}")
        return 1
    print(f"✓ The input is {handler}.")
    return 0


def _info(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    resolved = inputs[0]
    info = ResolvedInputInfo(
        input_type=str(resolved.get_type()),
        file_handler=resolved.file_handler.name if resolved.file_handler else None,
        value_type=type(resolved.value).__name__,
    )
    if args.json:
        print(info.model_dump_json(indent=2))
    else:
        print(f"Read as {resolved.file_handler} ({info.value_type})")
    return 0


def _formats_list(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    catalog = get_catalog()
    if args.json:
        response = FileHandlerListResponse(
            file_handlers=[FileHandlerInfo.from_handler(h) for h in catalog],
            total=len(catalog),
        )
        print(response.model_dump_json(indent=2))
        return 0

    if not len(catalog):
        print("No file handlers registered. Add plug-in packages under 'plugins' in the config.")
        return 0

    print(f"{'Name':<40} {'Extension':<10} Reads")
    print("-" * 80)
    for handler in catalog:
        reads = ", ".join(str(k) for k in handler.object_kinds())
        print(f"{handler.name:<40} {'.' + handler.file_extension:<10} {reads}")
    return 0


def _formats_docs(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    print(get_catalog().generate_docs())
    return 0


def _inputs_commands(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    input_type = parse_input_type(inputs[0].value)
    paths = sorted(input_type.get_applicable_commands(COMMANDS))
    if args.json:
        response = CommandPathsResponse(
            input_type=str(input_type),
            commands=[" ".join(p) for p in paths],
        )
        print(response.model_dump_json(indent=2))
    elif not paths:
        print(f"No command accepts {input_type.get_article()} {input_type}.")
    else:
        for path in paths:
            print(f"{COMMANDS.name} {' '.join(path)}")
    return 0


def _config_validate(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    path = Path(inputs[0].value)
    if not path.exists():
        print(f"✗ {path} does not exist.")
        return 1
    errors = validate_config_file(path)
    if errors:
        print(f"✗ {path} is not a valid config file:")
        for error in errors:
            print(f"  - {error}")
        return 1
    print(f"✓ {path} is valid.")
    return 0


def _config_schema(inputs: list[ResolvedInput], args: argparse.Namespace) -> int:
    print(json.dumps(config_schema(), indent=2))
    return 0


COMMANDS = Command(
    name="flowmodel-io",
    explanation="Recognise and inspect process model and event log files.",
    subcommands=[
        Command(
            name="validate",
            explanation="Check whether a file conforms to one specific file type.",
            input_names=["file_type", "file"],
            input_types=[[InputType.FILE_HANDLER], [InputType.ANY_OBJECT]],
            input_helps=["Name or extension of the file type.", "The file to check."],
            execute=_validate,
        ),
        Command(
            name="info",
            explanation="Recognise a file and report what it was read as.",
            input_names=["file"],
            input_types=[[InputType.ANY_OBJECT]],
            flags={"--json": "Print JSON"},
            execute=_info,
        ),
        Command(
            name="formats",
            explanation="Supported file types.",
            subcommands=[
                Command(
                    name="list",
                    explanation="List the supported file types in the order they are tried.",
                    flags={"--json": "Print JSON"},
                    execute=_formats_list,
                ),
                Command(
                    name="docs",
                    explanation="Print a markdown reference of the supported file types.",
                    execute=_formats_docs,
                ),
            ],
        ),
        Command(
            name="inputs",
            explanation="Input types and the commands that accept them.",
            subcommands=[
                Command(
                    name="commands",
                    explanation="List the commands with a parameter accepting the input type.",
                    input_names=["input_type"],
                    input_types=[[InputType.TEXT]],
                    input_helps=["e.g. object, integer or 'capability:event log'."],
                    flags={"--json": "Print JSON"},
                    execute=_inputs_commands,
                ),
            ],
        ),
        Command(
            name="config",
            explanation="Configuration files.",
            subcommands=[
                Command(
                    name="validate",
                    explanation="Check a config file against the schema.",
                    input_names=["path"],
                    input_types=[[InputType.TEXT]],
                    input_helps=["Path of the YAML config file."],
                    execute=_config_validate,
                ),
                Command(
                    name="schema",
                    explanation="Print the JSON Schema of the config file.",
                    execute=_config_schema,
                ),
            ],
        ),
    ],
)

# Commands whose executor reads its arguments from the namespace directly.
_UNRESOLVED = {("validate",)}


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to a config file")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--quiet", action="store_true", help="Only print warnings and errors")
    mode.add_argument("--debug", action="store_true", help="Print every import attempt")


def _output_mode(args: Any, config: dict) -> OutputMode:
    if args.quiet:
        return OutputMode.QUIET
    if args.debug:
        return OutputMode.DEBUG
    return OutputMode[config["output_mode"].upper()]


def build_cli() -> argparse.ArgumentParser:
    """Build the full parser; the catalog must be complete by now."""
    parser = argparse.ArgumentParser(
        prog=COMMANDS.name,
        description=COMMANDS.explanation,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    _add_global_options(parser)
    return COMMANDS.build_parser(parser=parser)


def run(args: argparse.Namespace, config: dict) -> int:
    """Resolve the positional inputs of the chosen command and execute it."""
    path = tuple(args._command)
    command = COMMANDS.find(path)
    args._config = config

    inputs: list[ResolvedInput] = []
    if path not in _UNRESOLVED:
        for name, alternatives in zip(command.input_names, command.input_types):
            inputs.append(resolve_input(
                alternatives,
                getattr(args, name),
                validate_command=config["validate_command"],
                max_bytes=config["stdin"]["max_bytes"],
            ))

    return command.execute(inputs, args) or 0


def main(argv: list[str] | None = None) -> int:
    # Config and plug-ins come first: the parser describes the catalog.
    pre_parser = argparse.ArgumentParser(add_help=False)
    _add_global_options(pre_parser)
    pre_args, _ = pre_parser.parse_known_args(argv)

    try:
        config = load_config(pre_args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    setup_logging(_output_mode(pre_args, config))

    for plugin in config["plugins"]:
        try:
            added = auto_discover_file_handlers(plugin)
        except (ImportError, ValueError, FlowModelError) as e:
            logger.error(f"Could not load plug-in {plugin}: {e}")
            return 1
        logger.debug(f"Plug-in {plugin} added: {', '.join(added) or 'nothing'}")

    args = build_cli().parse_args(argv)

    try:
        return run(args, config)
    except (FlowModelError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
