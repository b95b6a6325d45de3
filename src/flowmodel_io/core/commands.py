"""Command tree: what each command accepts and how its arguments are parsed."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Sequence

from .catalog import FileHandlerCatalog
from .inputs import InputType, ResolvedInput

# execute(inputs, args) -> exit code; inputs are in declaration order.
Executor = Callable[[list[ResolvedInput], argparse.Namespace], int | None]


@dataclass
class Command:
    """
    A node of the command tree.

    A node with subcommands is a group; a node without is a command that
    runs. ``input_types[i]`` lists, in order, the input types accepted by
    the positional argument ``input_names[i]``.
    """
    name: str
    explanation: str = ""
    input_names: list[str] = field(default_factory=list)
    input_types: list[list[InputType]] = field(default_factory=list)
    input_helps: list[str] = field(default_factory=list)
    flags: dict[str, str] = field(default_factory=dict)  # --flag -> help
    execute: Executor | None = None
    subcommands: list["Command"] = field(default_factory=list)

    def __post_init__(self):
        if len(self.input_names) != len(self.input_types):
            raise ValueError(
                f"Command '{self.name}': {len(self.input_names)} input names "
                f"for {len(self.input_types)} input types"
            )
        for i, alternatives in enumerate(self.input_types):
            if not alternatives:
                raise ValueError(f"Command '{self.name}': input '{self.input_names[i]}' accepts nothing")

    @property
    def is_group(self) -> bool:
        return bool(self.subcommands)

    def walk(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], "Command"]]:
        """Yield (path, command) for every runnable command below this node."""
        for sub in self.subcommands:
            path = prefix + (sub.name,)
            if sub.is_group:
                yield from sub.walk(path)
            else:
                yield path, sub

    def get_command_paths(self) -> set[tuple[str, ...]]:
        return {path for path, _ in self.walk()}

    def find(self, path: Sequence[str]) -> "Command | None":
        node = self
        for name in path:
            node = next((s for s in node.subcommands if s.name == name), None)
            if node is None:
                return None
        return node

    def get_declared_input_slot_alternatives(
        self, path: Sequence[str] = ()
    ) -> list[list[InputType]]:
        """Input alternatives of the command at ``path`` (this node if empty)."""
        command = self.find(path)
        if command is None:
            raise KeyError(f"Unknown command: {' '.join(path)}")
        return [list(alternatives) for alternatives in command.input_types]

    def describe_inputs(self, catalog: FileHandlerCatalog | None = None) -> list[dict[str, Any]]:
        """Name, accepted inputs and help of each positional argument."""
        described = []
        for i, name in enumerate(self.input_names):
            alternatives = self.input_types[i]
            described.append({
                "name": name,
                "accepts": InputType.possible_inputs_as_strings_with_articles(alternatives, " or ", catalog),
                "help": self.input_helps[i] if i < len(self.input_helps) else "",
            })
        return described

    def build_parser(
        self,
        catalog: FileHandlerCatalog | None = None,
        parser: argparse.ArgumentParser | None = None,
        prefix: tuple[str, ...] = ()
    ) -> argparse.ArgumentParser:
        """
        Build an argparse parser for this node and everything below it.

        Each positional argument's ``type=`` comes from its first accepted
        input type. The parsed namespace carries the command path in
        ``_command``.
        """
        if parser is None:
            parser = argparse.ArgumentParser(prog=self.name, description=self.explanation)

        if self.is_group:
            subparsers = parser.add_subparsers(dest=f"_group_{len(prefix)}", metavar="COMMAND")
            subparsers.required = True
            for sub in self.subcommands:
                sub_parser = subparsers.add_parser(sub.name, help=sub.explanation, description=sub.explanation)
                sub.build_parser(catalog, sub_parser, prefix + (sub.name,))
            return parser

        for i, name in enumerate(self.input_names):
            alternatives = self.input_types[i]
            accepts = InputType.possible_inputs_as_strings_with_articles(alternatives, " or ", catalog)
            help_text = self.input_helps[i] if i < len(self.input_helps) else ""
            if alternatives[0].is_file():
                help_text = f"{help_text} Use - for standard input.".strip()
            parser.add_argument(
                name,
                metavar=name.upper(),
                type=InputType.get_value_parser_for_alternatives(alternatives, catalog),
                help=f"{help_text} Accepts {accepts or 'nothing registered'}.".strip(),
            )
        for flag, flag_help in self.flags.items():
            parser.add_argument(flag, action="store_true", help=flag_help)
        parser.set_defaults(_command=prefix)
        return parser
