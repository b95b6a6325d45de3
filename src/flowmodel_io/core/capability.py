"""Abstract capabilities an imported object may expose."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .catalog import FileHandlerCatalog
    from .handler import FormatHandler


class Capability(Enum):
    """
    A behavioural contract, independent of how the object is stored.

    The value of each member is its display name; ``get_article`` gives the
    indefinite article used when the name appears in messages.
    """
    FINITE_LANGUAGE = "finite language"  # finite set of traces
    FINITE_STOCHASTIC_LANGUAGE = "finite stochastic language"  # finite number of traces
    QUERIABLE_STOCHASTIC_LANGUAGE = "queriable stochastic language"  # can query the probability of a trace
    ITERABLE_STOCHASTIC_LANGUAGE = "iterable stochastic language"  # can walk over the traces, potentially forever
    EVENT_LOG = "event log"  # traces and attributes
    SEMANTICS = "semantics"  # can walk over states using transitions
    STOCHASTIC_SEMANTICS = "stochastic semantics"
    STOCHASTIC_DETERMINISTIC_SEMANTICS = "deterministic stochastic semantics"  # walks over states using activities

    def __str__(self) -> str:
        return self.value

    def get_article(self) -> str:
        return _ARTICLES.get(self, "a")

    def get_file_handlers(
        self,
        catalog: "FileHandlerCatalog | None" = None
    ) -> list["FormatHandler"]:
        """Handlers, in catalog order, that can import this capability."""
        from .catalog import get_catalog
        catalog = catalog if catalog is not None else get_catalog()
        return [h for h in catalog if h.declares_capability(self)]


_ARTICLES = {
    Capability.ITERABLE_STOCHASTIC_LANGUAGE: "an",
    Capability.EVENT_LOG: "an",
}
