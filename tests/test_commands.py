"""Tests for the command tree and its argparse parser."""

from pathlib import Path

import pytest

from flowmodel_io.core import (
    Capability,
    CapabilityImporter,
    Command,
    FileHandlerCatalog,
    FormatHandler,
    InputType,
    UnparsedFraction,
)

from conftest import accepting

LOG = FormatHandler(
    "event log", "xes", article="an",
    capability_importers=[CapabilityImporter(Capability.EVENT_LOG, accepting(b"<log", "log"))],
)
CATALOG = FileHandlerCatalog([LOG])


def tree():
    return Command(
        name="tool",
        explanation="Test tool.",
        subcommands=[
            Command(
                name="discover",
                subcommands=[
                    Command(
                        name="uniform",
                        input_names=["log"],
                        input_types=[[InputType.capability(Capability.EVENT_LOG)]],
                        input_helps=["The log to mine."],
                    ),
                ],
            ),
            Command(
                name="sample",
                input_names=["count", "threshold", "format"],
                input_types=[[InputType.INTEGER], [InputType.FRACTION], [InputType.FILE_HANDLER, InputType.TEXT]],
                flags={"--json": "Print JSON"},
            ),
        ],
    )


class TestCommand:

    def test_input_names_must_match_types(self):
        with pytest.raises(ValueError, match="input names"):
            Command(name="broken", input_names=["a", "b"], input_types=[[InputType.TEXT]])

    def test_input_needs_an_alternative(self):
        with pytest.raises(ValueError, match="accepts nothing"):
            Command(name="broken", input_names=["a"], input_types=[[]])

    def test_command_paths(self):
        assert tree().get_command_paths() == {("discover", "uniform"), ("sample",)}

    def test_find(self):
        root = tree()

        assert root.find(["discover", "uniform"]).name == "uniform"
        assert root.find(["discover"]).is_group
        assert root.find(["nope"]) is None
        assert root.find([]) is root

    def test_declared_alternatives(self):
        declared = tree().get_declared_input_slot_alternatives(["sample"])

        assert declared == [[InputType.INTEGER], [InputType.FRACTION], [InputType.FILE_HANDLER, InputType.TEXT]]

    def test_declared_alternatives_unknown_command(self):
        with pytest.raises(KeyError):
            tree().get_declared_input_slot_alternatives(["missing"])

    def test_describe_inputs(self):
        described = tree().find(["discover", "uniform"]).describe_inputs(CATALOG)

        assert described == [{"name": "log", "accepts": "an event log (.xes)", "help": "The log to mine."}]


class TestBuildParser:

    def test_value_parsers_follow_first_alternative(self):
        parser = tree().build_parser(CATALOG)

        args = parser.parse_args(["sample", "3", "1/2", "xes", "--json"])

        assert args._command == ("sample",)
        assert args.count == 3
        assert args.threshold == UnparsedFraction("1/2")
        assert args.format is LOG
        assert args.json is True

    def test_heterogeneous_alternatives_use_first_grammar(self):
        parser = tree().build_parser(CATALOG)

        with pytest.raises(SystemExit):
            parser.parse_args(["sample", "3", "1/2", "free text"])

    def test_file_arguments_are_paths(self):
        args = tree().build_parser(CATALOG).parse_args(["discover", "uniform", "log.xes"])

        assert args._command == ("discover", "uniform")
        assert args.log == Path("log.xes")

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            tree().build_parser(CATALOG).parse_args([])

    def test_help_lists_accepted_inputs(self, capsys):
        with pytest.raises(SystemExit):
            tree().build_parser(CATALOG).parse_args(["discover", "uniform", "--help"])

        out = " ".join(capsys.readouterr().out.split())
        assert "an event log (.xes)" in out
        assert "standard input" in out
