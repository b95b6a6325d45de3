"""Interop handlers for the primitive input slots."""

from __future__ import annotations

from fractions import Fraction

from .handler import InteropHandler

TEXT_INTEROP_HANDLERS: tuple[InteropHandler, ...] = (
    InteropHandler(
        name="text",
        host_type="string",
        translator_host_to_core=str,
        translator_core_to_host=str,
    ),
)

INTEGER_INTEROP_HANDLERS: tuple[InteropHandler, ...] = (
    InteropHandler(
        name="integer",
        host_type="integer",
        translator_host_to_core=int,
        translator_core_to_host=int,
    ),
)

FRACTION_INTEROP_HANDLERS: tuple[InteropHandler, ...] = (
    InteropHandler(
        name="fraction",
        host_type="string",
        translator_host_to_core=Fraction,
        translator_core_to_host=str,
    ),
    InteropHandler(
        name="fraction",
        host_type="double",
        translator_host_to_core=Fraction,
        translator_core_to_host=float,
    ),
)
