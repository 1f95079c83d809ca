"""Minimal Pydantic models for Ignition-style node configuration documents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IgnitionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class FileContents(IgnitionBaseModel):
    source: str | None = None


class OwnerPayload(IgnitionBaseModel):
    name: str | None = None
    id: int | None = None

    @property
    def ref(self) -> str | int | None:
        if self.name:
            return self.name
        return self.id


class FilePayload(IgnitionBaseModel):
    path: str = Field(min_length=1)
    contents: FileContents = Field(default_factory=FileContents)
    mode: int | None = None
    user: OwnerPayload | None = None
    group: OwnerPayload | None = None


class DropinPayload(IgnitionBaseModel):
    name: str = Field(min_length=1)
    contents: str = ""


class UnitPayload(IgnitionBaseModel):
    name: str = Field(min_length=1)
    enabled: bool | None = None
    mask: bool = False
    contents: str | None = None
    dropins: list[DropinPayload] = Field(default_factory=list[DropinPayload])


class StoragePayload(IgnitionBaseModel):
    files: list[FilePayload] = Field(default_factory=list[FilePayload])


class SystemdPayload(IgnitionBaseModel):
    units: list[UnitPayload] = Field(default_factory=list[UnitPayload])


class ConfigPayload(IgnitionBaseModel):
    storage: StoragePayload = Field(default_factory=StoragePayload)
    systemd: SystemdPayload = Field(default_factory=SystemdPayload)
