"""Ordered catalog of file handlers with plug-in registration and discovery."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Callable, Iterable, Iterator

from .capability import Capability
from .errors import CatalogFrozenError, PluginError
from .handler import FormatHandler, InteropHandler
from .object_kind import ObjectKind

logger = logging.getLogger(__name__)


class FileHandlerCatalog:
    """
    Fixed, ordered collection of file handlers.

    Declaration order is the only tie-break when several handlers accept
    the same bytes: resolution walks the handlers front to back and stops
    at the first importer that succeeds.
    """

    def __init__(self, handlers: Iterable[FormatHandler] = ()):
        handlers = tuple(handlers)
        names = [h.name for h in handlers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"File handler registered more than once: {', '.join(duplicates)}")
        self._handlers: tuple[FormatHandler, ...] = handlers

    def __iter__(self) -> Iterator[FormatHandler]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return handler in self._handlers

    def __repr__(self) -> str:
        return f"FileHandlerCatalog({[h.name for h in self._handlers]!r})"

    @property
    def handlers(self) -> tuple[FormatHandler, ...]:
        return self._handlers

    def get(self, name: str) -> FormatHandler | None:
        """Get a handler by name."""
        for handler in self._handlers:
            if handler.name == name:
                return handler
        return None

    def find_by_extension(self, extension: str) -> FormatHandler | None:
        """Get the first handler whose canonical extension matches (leading dot optional)."""
        extension = extension.lstrip(".").lower()
        for handler in self._handlers:
            if handler.file_extension.lower() == extension:
                return handler
        return None

    def list_names(self) -> list[str]:
        return [h.name for h in self._handlers]

    def list_extensions(self) -> list[str]:
        return [h.file_extension for h in self._handlers]

    def handlers_for_capability(self, capability: Capability) -> list[FormatHandler]:
        return capability.get_file_handlers(self)

    def handlers_for_object_kind(self, kind: ObjectKind) -> list[FormatHandler]:
        return kind.get_file_handlers(self)

    def display_names(self, handlers: Iterable[FormatHandler] | None = None) -> list[str]:
        """Human-readable names, e.g. ``"a labelled Petri net (.lpn)"``."""
        return [str(h) for h in (self._handlers if handlers is None else handlers)]

    def latex_references(self, handlers: Iterable[FormatHandler] | None = None) -> list[str]:
        return [h.latex_reference() for h in (self._handlers if handlers is None else handlers)]

    @staticmethod
    def flatten_interop_handlers(handlers: Iterable[FormatHandler]) -> list[InteropHandler]:
        """
        Interop handlers of several file handlers as one list.

        An interop handler shared by several file handlers appears once, at
        the position where it was first seen.
        """
        result: list[InteropHandler] = []
        seen: set[int] = set()
        for handler in handlers:
            for interop in handler.interop_handlers:
                if id(interop) in seen:
                    continue
                seen.add(id(interop))
                result.append(interop)
        return result

    def generate_docs(self) -> str:
        """Generate markdown documentation for the file handlers."""
        lines = []

        for handler in self._handlers:
            lines.append(f"### `{handler.name}` (.{handler.file_extension})")
            if handler.description:
                lines.append(f"{handler.description}\n")
            else:
                lines.append("")

            capabilities = handler.capabilities()
            if capabilities:
                lines.append("**Can be read as:**")
                for capability in capabilities:
                    lines.append(f"- {capability.get_article()} {capability}")
                lines.append("")

            kinds = handler.object_kinds()
            if kinds:
                lines.append("**Objects:**")
                for kind in kinds:
                    lines.append(f"- {kind}")
                lines.append("")

            if handler.interop_handlers:
                lines.append("**Interop:**")
                for interop in handler.interop_handlers:
                    lines.append(f"- `{interop.host_type}`")
                lines.append("")

            lines.append("---\n")

        return "\n".join(lines)


# Declarations collected before the process catalog is first used.
_pending: list[FormatHandler] = []
_catalog: FileHandlerCatalog | None = None


def register_file_handler(handler: FormatHandler) -> FormatHandler:
    """
    Append a handler to the process-wide catalog.

    Must run before anything reads the catalog; format modules call this at
    import time.

    Raises:
        CatalogFrozenError: If the catalog has already been built
        ValueError: If a handler with the same name is already declared
    """
    if _catalog is not None:
        raise CatalogFrozenError(
            f"Cannot register file handler '{handler.name}': the catalog is already in use"
        )
    if any(h.name == handler.name for h in _pending):
        raise ValueError(f"File handler already registered: {handler.name}")
    _pending.append(handler)
    return handler


def file_handler(factory: Callable[[], FormatHandler]) -> Callable[[], FormatHandler]:
    """
    Decorator registering the handler returned by a factory function.

    Usage:
        @file_handler
        def labelled_petri_net() -> FormatHandler:
            return FormatHandler(name="labelled Petri net", file_extension="lpn", ...)
    """
    register_file_handler(factory())
    return factory


def get_catalog() -> FileHandlerCatalog:
    """Get the process-wide catalog, building it on first use."""
    global _catalog
    if _catalog is None:
        _catalog = FileHandlerCatalog(_pending)
        logger.debug(f"File handler catalog built with {len(_catalog)} handlers")
    return _catalog


def auto_discover_file_handlers(package: str) -> list[str]:
    """
    Import every module of a plug-in package so its handlers register.

    Args:
        package: Dotted name of the package holding format modules

    Returns:
        Names of the handlers that were added by the import

    Raises:
        ImportError: If the package itself cannot be imported
        PluginError: If a module fails while declaring its handlers, for
            example by registering a name that is already taken
    """
    before = {h.name for h in _pending}

    module = _import_plugin_module(package)
    search_path = getattr(module, "__path__", None)
    if search_path is not None:
        for info in pkgutil.walk_packages(search_path, prefix=f"{package}."):
            if info.name.rsplit(".", 1)[-1].startswith("_"):
                continue
            try:
                _import_plugin_module(info.name)
            except ImportError as e:
                logger.warning(f"Failed to import {info.name}: {e}")

    return [h.name for h in _pending if h.name not in before]


def _import_plugin_module(name: str):
    try:
        return importlib.import_module(name)
    except ImportError:
        raise
    except Exception as e:
        raise PluginError(f"Plug-in module {name} failed to load: {e}", module=name) from e
