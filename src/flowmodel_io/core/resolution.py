"""
Trial-and-error resolution of inputs against the file handler catalog.

Formats carry no universal header, so an input is recognised by trying
importers one after another. Handlers are tried in catalog order and, within
a handler, importers in declaration order. The first importer that succeeds
wins and nothing after it runs. Every attempt reads from a fresh view of the
source, so a failed attempt never leaves the next one with a half-consumed
stream.

The failure policies differ on purpose:

- ``read_as_trait`` keeps the error of the last importer it tried and
  raises it wrapped in a ``TraitResolutionError``.
- ``read_as_object`` and ``read_as_any_object`` drop every per-attempt error
  and raise a bare ``UnrecognisedInputError``.
"""

from __future__ import annotations

import logging
from typing import Any

from .capability import Capability
from .catalog import FileHandlerCatalog, get_catalog
from .errors import NoCandidatesError, TraitResolutionError, UnrecognisedInputError
from .handler import FormatHandler
from .object_kind import ObjectKind
from .source import RewindableSource

logger = logging.getLogger(__name__)

VALIDATE_COMMAND = "flowmodel-io validate"
NOT_RECOGNISED = "File could not be recognised."


def _resolve_catalog(catalog: FileHandlerCatalog | None) -> FileHandlerCatalog:
    return catalog if catalog is not None else get_catalog()


def read_as_trait(
    capability: Capability,
    source: RewindableSource,
    catalog: FileHandlerCatalog | None = None,
    validate_command: str = VALIDATE_COMMAND
) -> tuple[Any, FormatHandler]:
    """
    Read the source as an object exposing ``capability``.

    Returns:
        (object, handler) for the first importer that succeeds

    Raises:
        SourceError: If a fresh view cannot be obtained
        NoCandidatesError: If no handler declares an importer for the capability
        TraitResolutionError: If every importer failed; wraps the last failure
    """
    catalog = _resolve_catalog(catalog)
    last_error: Exception | None = None
    last_handler: FormatHandler | None = None

    for handler in catalog:
        for importer in handler.capability_importers:
            if importer.capability != capability:
                continue

            logger.debug(f"Trying to read {source.location} as {capability} with {handler}")
            with source.get_fresh_view() as stream:
                try:
                    result = importer.import_from(stream)
                except Exception as e:
                    last_error = e
                    last_handler = handler
                    continue

            logger.debug(f"Read {source.location} as {capability} with {handler}")
            return result, handler

    if last_error is None:
        raise NoCandidatesError(
            f"No file handler can read {capability.get_article()} {capability}; nothing was attempted.",
            requested=capability,
        )

    attempted = capability.get_file_handlers(catalog)
    message = (
        f"Could not read the input as {capability.get_article()} {capability}.\n"
        f"Attempted to parse the file as either {', '.join(str(h) for h in attempted)}.\n"
        f"The last attempted importer was: {last_handler}.\n"
        f"If you know the type of your file, use `{validate_command}` to check it.\n"
        f"Last error: {last_error}"
    )
    raise TraitResolutionError(
        message,
        capability=capability,
        attempted=attempted,
        last_handler=last_handler,
        cause=last_error,
    ) from last_error


def read_as_object(
    kind: ObjectKind,
    source: RewindableSource,
    catalog: FileHandlerCatalog | None = None
) -> tuple[Any, FormatHandler]:
    """
    Read the source as a concrete object of ``kind``.

    Raises:
        SourceError: If a fresh view cannot be obtained
        NoCandidatesError: If no handler declares an importer for the kind
        UnrecognisedInputError: If every importer failed (no cause is kept)
    """
    catalog = _resolve_catalog(catalog)
    attempted = False

    for handler in catalog:
        for importer in handler.object_importers:
            if importer.kind != kind:
                continue

            attempted = True
            result = _attempt(importer.import_from, handler, source)
            if result is not _FAILED:
                logger.debug(f"Read {source.location} as {kind} with {handler}")
                return result, handler

    if not attempted:
        raise NoCandidatesError(
            f"No file handler can read {kind.get_article()} {kind}; nothing was attempted.",
            requested=kind,
        )
    raise UnrecognisedInputError(NOT_RECOGNISED)


def read_as_any_object(
    source: RewindableSource,
    catalog: FileHandlerCatalog | None = None
) -> tuple[Any, FormatHandler]:
    """
    Read the source with every object importer in catalog order.

    Whatever kind the first successful importer produces is returned.
    """
    catalog = _resolve_catalog(catalog)
    attempted = False

    for handler in catalog:
        for importer in handler.object_importers:
            attempted = True
            result = _attempt(importer.import_from, handler, source)
            if result is not _FAILED:
                logger.debug(f"Read {source.location} as {importer.kind} with {handler}")
                return result, handler

    if not attempted:
        raise NoCandidatesError("No file handler can read objects; nothing was attempted.")
    raise UnrecognisedInputError(NOT_RECOGNISED)


def validate_object_of(source: RewindableSource, handler: FormatHandler) -> None:
    """
    Check the source against exactly one handler's validator.

    No other handler is consulted and the validator's exception, if any,
    reaches the caller unchanged.
    """
    with source.get_fresh_view() as stream:
        handler.validate(stream)


# Marker for a failed attempt; ``None`` is a legal import result.
_FAILED = object()


def _attempt(import_from, handler: FormatHandler, source: RewindableSource) -> Any:
    logger.debug(f"Trying to read {source.location} with {handler}")
    with source.get_fresh_view() as stream:
        try:
            return import_from(stream)
        except Exception:
            # Object resolution reports no per-attempt detail.
            return _FAILED
