"""Concrete object kinds that can be imported as a whole."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .catalog import FileHandlerCatalog
    from .handler import FormatHandler


class ObjectKind(Enum):
    """Serialisable object shapes. The value is the display name."""
    EVENT_LOG = "event log"
    DIRECTLY_FOLLOWS_MODEL = "directly follows model"
    FINITE_LANGUAGE = "finite language"
    FINITE_STOCHASTIC_LANGUAGE = "finite stochastic language"
    LABELLED_PETRI_NET = "labelled Petri net"
    STOCHASTIC_DETERMINISTIC_FINITE_AUTOMATON = "stochastic deterministic finite automaton"
    STOCHASTIC_LABELLED_PETRI_NET = "stochastic labelled Petri net"
    LANGUAGE_OF_ALIGNMENTS = "language of alignments"
    STOCHASTIC_LANGUAGE_OF_ALIGNMENTS = "stochastic language of alignments"
    DETERMINISTIC_FINITE_AUTOMATON = "deterministic finite automaton"
    PROCESS_TREE = "process tree"
    EXECUTIONS = "executions"

    def __str__(self) -> str:
        return self.value

    def get_article(self) -> str:
        if self in (ObjectKind.EVENT_LOG, ObjectKind.EXECUTIONS):
            return "an"
        return "a"

    def get_file_handlers(
        self,
        catalog: "FileHandlerCatalog | None" = None
    ) -> list["FormatHandler"]:
        """Handlers, in catalog order, that can import this kind of object."""
        from .catalog import get_catalog
        catalog = catalog if catalog is not None else get_catalog()
        return [h for h in catalog if h.declares_object_kind(self)]
