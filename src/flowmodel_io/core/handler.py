"""File handler descriptors and the importer/validator records they own."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable

from .capability import Capability
from .errors import FormatParseError
from .object_kind import ObjectKind

# Importers and validators receive a fresh binary stream positioned at the
# first byte and raise on input they do not accept.
Importer = Callable[[BinaryIO], Any]
Validator = Callable[[BinaryIO], None]


@dataclass(frozen=True)
class CapabilityImporter:
    """Reads a stream into an object exposing ``capability``."""
    capability: Capability
    importer: Importer

    def import_from(self, stream: BinaryIO) -> Any:
        return self.importer(stream)

    def __str__(self) -> str:
        return str(self.capability)


@dataclass(frozen=True)
class ObjectImporter:
    """Reads a stream into a concrete object of ``kind``."""
    kind: ObjectKind
    importer: Importer

    def import_from(self, stream: BinaryIO) -> Any:
        return self.importer(stream)

    def __str__(self) -> str:
        return str(self.kind)


@dataclass(frozen=True, eq=False)
class InteropHandler:
    """
    Describes how an object travels to and from a host runtime.

    Instances compare by identity. The translators are only carried here,
    never called.
    """
    name: str
    host_type: str
    translator_host_to_core: Callable[[Any], Any] | None = None
    translator_core_to_host: Callable[[Any], Any] | None = None

    def can_import(self) -> bool:
        """True if host objects can be translated into core objects."""
        return self.translator_host_to_core is not None

    def can_export(self) -> bool:
        return self.translator_core_to_host is not None

    def __str__(self) -> str:
        return f"{self.name} ({self.host_type})"


def _parse_and_discard(importer: Importer) -> Validator:
    def validate(stream: BinaryIO) -> None:
        importer(stream)
    return validate


def _reject_everything(stream: BinaryIO) -> None:
    raise FormatParseError("This file handler has no importer to validate with.")


@dataclass(frozen=True)
class FormatHandler:
    """
    Everything the core knows about one on-disk encoding.

    Importer order is the tie-break between importers of the same handler,
    so the tuples are kept exactly as declared.
    """
    name: str
    file_extension: str
    article: str = "a"
    capability_importers: tuple[CapabilityImporter, ...] = ()
    object_importers: tuple[ObjectImporter, ...] = ()
    validator: Validator | None = None
    interop_handlers: tuple[InteropHandler, ...] = ()
    description: str = ""

    def __post_init__(self):
        # Accept lists in declarations but store tuples.
        object.__setattr__(self, "capability_importers", tuple(self.capability_importers))
        object.__setattr__(self, "object_importers", tuple(self.object_importers))
        object.__setattr__(self, "interop_handlers", tuple(self.interop_handlers))
        object.__setattr__(self, "file_extension", self.file_extension.lstrip("."))
        if self.validator is None:
            # Without an explicit validator, validating means importing with
            # the first declared importer and dropping the result.
            if self.object_importers:
                validator = _parse_and_discard(self.object_importers[0].importer)
            elif self.capability_importers:
                validator = _parse_and_discard(self.capability_importers[0].importer)
            else:
                validator = _reject_everything
            object.__setattr__(self, "validator", validator)

    def validate(self, stream: BinaryIO) -> None:
        self.validator(stream)

    def declares_capability(self, capability: Capability) -> bool:
        return any(i.capability == capability for i in self.capability_importers)

    def declares_object_kind(self, kind: ObjectKind) -> bool:
        return any(i.kind == kind for i in self.object_importers)

    def capabilities(self) -> list[Capability]:
        """Capabilities this handler can import, in declaration order, without repeats."""
        seen: list[Capability] = []
        for importer in self.capability_importers:
            if importer.capability not in seen:
                seen.append(importer.capability)
        return seen

    def object_kinds(self) -> list[ObjectKind]:
        seen: list[ObjectKind] = []
        for importer in self.object_importers:
            if importer.kind not in seen:
                seen.append(importer.kind)
        return seen

    def latex_reference(self) -> str:
        """Cross-reference to this handler's section in the manual."""
        return f"\\hyperref[filehandler:{self.name}]{{{self}}}"

    def __str__(self) -> str:
        return f"{self.article} {self.name} (.{self.file_extension})"

    def __repr__(self) -> str:
        return f"FormatHandler(name={self.name!r}, extension={self.file_extension!r})"
