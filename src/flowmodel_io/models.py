"""Pydantic models for the machine-readable listings of the CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .core.handler import FormatHandler


class InteropInfo(BaseModel):
    """An interop handler as exposed to a host runtime."""
    name: str
    host_type: str
    can_import: bool
    can_export: bool


class FileHandlerInfo(BaseModel):
    """Summary of a file handler."""
    name: str
    file_extension: str
    description: str = ""
    capabilities: list[str] = Field(default_factory=list)
    object_kinds: list[str] = Field(default_factory=list)
    interop: list[InteropInfo] = Field(default_factory=list)

    @classmethod
    def from_handler(cls, handler: FormatHandler) -> "FileHandlerInfo":
        return cls(
            name=handler.name,
            file_extension=handler.file_extension,
            description=handler.description,
            capabilities=[str(c) for c in handler.capabilities()],
            object_kinds=[str(k) for k in handler.object_kinds()],
            interop=[
                InteropInfo(
                    name=i.name,
                    host_type=i.host_type,
                    can_import=i.can_import(),
                    can_export=i.can_export(),
                )
                for i in handler.interop_handlers
            ],
        )


class FileHandlerListResponse(BaseModel):
    """All file handlers, in catalog order."""
    file_handlers: list[FileHandlerInfo]
    total: int


class ResolvedInputInfo(BaseModel):
    """What an input was read as."""
    input_type: str
    file_handler: str | None = None
    value_type: str


class CommandPathsResponse(BaseModel):
    """Commands accepting a given input type."""
    input_type: str
    commands: list[str] = Field(default_factory=list)
