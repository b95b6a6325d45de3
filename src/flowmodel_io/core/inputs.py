"""Descriptors for what a command argument accepts, and resolved argument values."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, Sequence

from .capability import Capability
from .catalog import FileHandlerCatalog, get_catalog
from .errors import FlowModelError, SourceError
from .handler import FormatHandler, InteropHandler
from .interop import FRACTION_INTEROP_HANDLERS, INTEGER_INTEROP_HANDLERS, TEXT_INTEROP_HANDLERS
from .object_kind import ObjectKind
from .resolution import VALIDATE_COMMAND, read_as_any_object, read_as_object, read_as_trait
from .source import RewindableSource, open_source
from .text import join_with

logger = logging.getLogger(__name__)


class InputTag(Enum):
    """Which variant of input an ``InputType`` describes."""
    CAPABILITY = "capability"
    OBJECT = "object"
    ANY_OBJECT = "any_object"
    FILE_HANDLER = "file_handler"
    TEXT = "text"
    INTEGER = "integer"
    FRACTION = "fraction"


# Fixed articles and names of the variants that carry no payload.
_PRIMITIVE_ARTICLES = {
    InputTag.ANY_OBJECT: "an",
    InputTag.FILE_HANDLER: "a",
    InputTag.TEXT: "a",
    InputTag.INTEGER: "an",
    InputTag.FRACTION: "a",
}

_PRIMITIVE_NAMES = {
    InputTag.ANY_OBJECT: "object",
    InputTag.FILE_HANDLER: "file",
    InputTag.TEXT: "text",
    InputTag.INTEGER: "integer",
    InputTag.FRACTION: "fraction",
}

_FILE_TAGS = (InputTag.CAPABILITY, InputTag.OBJECT, InputTag.ANY_OBJECT)


@dataclass(frozen=True)
class UnparsedFraction:
    """A fraction as typed on the command line; parsed only when used."""
    text: str

    def parse(self) -> Fraction:
        try:
            return Fraction(self.text.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"`{self.text}` is not a fraction") from e

    def __str__(self) -> str:
        return self.text


def parse_unsigned_integer(value: str) -> int:
    """argparse type for non-negative integers written as plain decimal digits."""
    if value.startswith("-") and value[1:].isascii() and value[1:].isdigit():
        raise argparse.ArgumentTypeError(f"`{value}` is negative; expected 0 or more")
    if not (value.isascii() and value.isdigit()):
        raise argparse.ArgumentTypeError(f"`{value}` is not an integer")
    return int(value)


def file_handler_parser(catalog: FileHandlerCatalog | None = None) -> Callable[[str], FormatHandler]:
    """argparse type accepting a handler name or file extension."""

    def parse(value: str) -> FormatHandler:
        handlers = catalog if catalog is not None else get_catalog()
        handler = handlers.get(value) or handlers.find_by_extension(value)
        if handler is None:
            available = join_with(handlers.list_extensions(), ", ", " or ") or "none registered"
            raise argparse.ArgumentTypeError(
                f"`{value}` is not a known file type; expected one of {available}"
            )
        return handler

    parse.__name__ = "file handler"
    return parse


@dataclass(frozen=True)
class InputType:
    """
    What one argument position accepts.

    Built with ``InputType.capability(c)`` and ``InputType.object(k)``, or
    taken from the constants ``ANY_OBJECT``, ``FILE_HANDLER``, ``TEXT``,
    ``INTEGER`` and ``FRACTION``. Used to pick a value parser, to describe
    the argument in help text and documentation, and to look up commands.
    """
    tag: InputTag
    payload: Capability | ObjectKind | None = None

    ANY_OBJECT = None  # type: InputType
    FILE_HANDLER = None  # type: InputType
    TEXT = None  # type: InputType
    INTEGER = None  # type: InputType
    FRACTION = None  # type: InputType

    @classmethod
    def capability(cls, capability: Capability) -> "InputType":
        return cls(InputTag.CAPABILITY, capability)

    @classmethod
    def object(cls, kind: ObjectKind) -> "InputType":
        return cls(InputTag.OBJECT, kind)

    def is_file(self) -> bool:
        """True if values of this type are read from a file or standard input."""
        return self.tag in _FILE_TAGS

    def get_article(self) -> str:
        if self.tag in (InputTag.CAPABILITY, InputTag.OBJECT):
            return self.payload.get_article()
        return _PRIMITIVE_ARTICLES[self.tag]

    def __str__(self) -> str:
        if self.tag in (InputTag.CAPABILITY, InputTag.OBJECT):
            return str(self.payload)
        return _PRIMITIVE_NAMES[self.tag]

    def get_file_handlers(self, catalog: FileHandlerCatalog | None = None) -> list[FormatHandler]:
        """Handlers that can supply a value of this type; empty for primitives."""
        catalog = catalog if catalog is not None else get_catalog()
        if self.tag in (InputTag.CAPABILITY, InputTag.OBJECT):
            return self.payload.get_file_handlers(catalog)
        if self.tag == InputTag.ANY_OBJECT:
            return list(catalog)
        return []

    def get_interop_handlers(self, catalog: FileHandlerCatalog | None = None) -> list[InteropHandler]:
        if self.is_file():
            return FileHandlerCatalog.flatten_interop_handlers(self.get_file_handlers(catalog))
        if self.tag == InputTag.TEXT:
            return list(TEXT_INTEROP_HANDLERS)
        if self.tag == InputTag.INTEGER:
            return list(INTEGER_INTEROP_HANDLERS)
        if self.tag == InputTag.FRACTION:
            return list(FRACTION_INTEROP_HANDLERS)
        # Handler names cannot come from a host runtime.
        return []

    def _descriptions(self, catalog: FileHandlerCatalog, latex: bool) -> list[str]:
        if self.is_file():
            handlers = self.get_file_handlers(catalog)
            if latex:
                return catalog.latex_references(handlers)
            return catalog.display_names(handlers)
        if self.tag == InputTag.FILE_HANDLER:
            extensions = join_with(catalog.list_extensions(), ", ", " or ")
            return [f"the file extension of any supported file type ({extensions})"]
        return [_PRIMITIVE_NAMES[self.tag]]

    # --- operations over the alternatives of one argument ----------------

    @staticmethod
    def get_value_parser_for_alternatives(
        alternatives: Sequence["InputType"],
        catalog: FileHandlerCatalog | None = None
    ) -> Callable[[str], Any]:
        """
        Pick the argparse ``type=`` callable for an argument.

        Only the first alternative decides. An argument accepting, say, a
        file handler or text gets the file-handler grammar.
        """
        if not alternatives:
            raise ValueError("An argument needs at least one accepted input type")
        first = alternatives[0]
        if first.is_file():
            return Path
        if first.tag == InputTag.TEXT:
            return str
        if first.tag == InputTag.INTEGER:
            return parse_unsigned_integer
        if first.tag == InputTag.FILE_HANDLER:
            return file_handler_parser(catalog)
        return UnparsedFraction

    @staticmethod
    def get_possible_inputs(
        alternatives: Iterable["InputType"],
        catalog: FileHandlerCatalog | None = None
    ) -> list[str]:
        """Distinct descriptions of everything the alternatives accept, sorted."""
        catalog = catalog if catalog is not None else get_catalog()
        result: set[str] = set()
        for input_type in alternatives:
            result.update(input_type._descriptions(catalog, latex=False))
        return sorted(result)

    @staticmethod
    def get_possible_inputs_with_latex(
        alternatives: Iterable["InputType"],
        catalog: FileHandlerCatalog | None = None
    ) -> list[str]:
        catalog = catalog if catalog is not None else get_catalog()
        result: set[str] = set()
        for input_type in alternatives:
            result.update(input_type._descriptions(catalog, latex=True))
        return sorted(result)

    @staticmethod
    def possible_inputs_as_strings_with_articles(
        alternatives: Iterable["InputType"],
        last_connector: str,
        catalog: FileHandlerCatalog | None = None
    ) -> str:
        return join_with(InputType.get_possible_inputs(alternatives, catalog), ", ", last_connector)

    @staticmethod
    def get_interop_handlers_for_alternatives(
        alternatives: Iterable["InputType"],
        catalog: FileHandlerCatalog | None = None
    ) -> list[InteropHandler]:
        """Interop handlers able to bring a host object into the core."""
        result: list[InteropHandler] = []
        seen: set[int] = set()
        for input_type in alternatives:
            for interop in input_type.get_interop_handlers(catalog):
                if id(interop) in seen or not interop.can_import():
                    continue
                seen.add(id(interop))
                result.append(interop)
        return result

    def get_applicable_commands(self, command_tree: "CommandTree") -> set[tuple[str, ...]]:
        """Paths of all commands with a parameter that accepts this input type."""
        result = set()
        for path in command_tree.get_command_paths():
            declared = command_tree.get_declared_input_slot_alternatives(path)
            if any(self in alternatives for alternatives in declared):
                result.add(tuple(path))
        return result


InputType.ANY_OBJECT = InputType(InputTag.ANY_OBJECT)
InputType.FILE_HANDLER = InputType(InputTag.FILE_HANDLER)
InputType.TEXT = InputType(InputTag.TEXT)
InputType.INTEGER = InputType(InputTag.INTEGER)
InputType.FRACTION = InputType(InputTag.FRACTION)


class CommandTree(Protocol):
    """What ``InputType.get_applicable_commands`` needs from a command tree."""

    def get_command_paths(self) -> set[tuple[str, ...]]: ...

    def get_declared_input_slot_alternatives(
        self, path: Sequence[str]
    ) -> list[list[InputType]]: ...


@dataclass(frozen=True)
class ResolvedInput:
    """
    One argument after resolution.

    ``value`` is the imported object, text, integer, fraction or handler;
    ``file_handler`` is the handler that read it, for file inputs only.
    """
    input_type: InputType
    value: Any
    file_handler: FormatHandler | None = None

    @classmethod
    def trait(cls, capability: Capability, value: Any, handler: FormatHandler) -> "ResolvedInput":
        return cls(InputType.capability(capability), value, handler)

    @classmethod
    def object(cls, kind: ObjectKind, value: Any, handler: FormatHandler) -> "ResolvedInput":
        return cls(InputType.object(kind), value, handler)

    @classmethod
    def text(cls, value: str) -> "ResolvedInput":
        return cls(InputType.TEXT, value)

    @classmethod
    def integer(cls, value: int) -> "ResolvedInput":
        return cls(InputType.INTEGER, value)

    @classmethod
    def fraction(cls, value: Fraction) -> "ResolvedInput":
        return cls(InputType.FRACTION, value)

    @classmethod
    def handler(cls, handler: FormatHandler) -> "ResolvedInput":
        return cls(InputType.FILE_HANDLER, handler)

    def get_type(self) -> InputType:
        return self.input_type


def resolve_input(
    alternatives: Sequence[InputType],
    raw: Any,
    catalog: FileHandlerCatalog | None = None,
    validate_command: str = VALIDATE_COMMAND,
    max_bytes: int | None = None
) -> ResolvedInput:
    """
    Turn one command-line value into a ``ResolvedInput``.

    Alternatives are tried in order and the first that accepts the value is
    used. File alternatives share a single source, so standard input is read
    only once. If every alternative fails, the last failure is raised.

    Raises:
        SourceError: If the file or standard input cannot be read
    """
    if not alternatives:
        raise ValueError("An argument needs at least one accepted input type")

    source: RewindableSource | None = None
    last_error: Exception | None = None

    for input_type in alternatives:
        try:
            if input_type.is_file():
                if source is None:
                    source = open_source(raw, max_bytes=max_bytes)
                return _resolve_file(input_type, source, catalog, validate_command)
            return _resolve_primitive(input_type, raw, catalog)
        except SourceError:
            raise
        except (FlowModelError, ValueError, argparse.ArgumentTypeError) as e:
            logger.debug(f"Input `{raw}` is not {input_type.get_article()} {input_type}: {e}")
            last_error = e

    raise last_error


def _resolve_file(
    input_type: InputType,
    source: RewindableSource,
    catalog: FileHandlerCatalog | None,
    validate_command: str
) -> ResolvedInput:
    if input_type.tag == InputTag.CAPABILITY:
        value, handler = read_as_trait(input_type.payload, source, catalog, validate_command)
        return ResolvedInput.trait(input_type.payload, value, handler)
    if input_type.tag == InputTag.OBJECT:
        value, handler = read_as_object(input_type.payload, source, catalog)
        return ResolvedInput.object(input_type.payload, value, handler)
    value, handler = read_as_any_object(source, catalog)
    return ResolvedInput(InputType.ANY_OBJECT, value, handler)


def _resolve_primitive(
    input_type: InputType,
    raw: Any,
    catalog: FileHandlerCatalog | None
) -> ResolvedInput:
    if input_type.tag == InputTag.TEXT:
        return ResolvedInput.text(str(raw))
    if input_type.tag == InputTag.INTEGER:
        return ResolvedInput.integer(parse_unsigned_integer(str(raw)))
    if input_type.tag == InputTag.FILE_HANDLER:
        if isinstance(raw, FormatHandler):
            return ResolvedInput.handler(raw)
        return ResolvedInput.handler(file_handler_parser(catalog)(str(raw)))
    if isinstance(raw, UnparsedFraction):
        return ResolvedInput.fraction(raw.parse())
    return ResolvedInput.fraction(UnparsedFraction(str(raw)).parse())

