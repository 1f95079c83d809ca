"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Kind of managed entity a change or policy rule refers to."""

    FILE = "file"
    UNIT = "unit"


class ChangeKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ActionKind(StrEnum):
    """Discriminator of the closed ``Action`` union."""

    RUN_COMMAND = "command"
    SERVICE_CONTROL = "service"
    NOOP = "none"
    ALWAYS_REBOOT = "always-reboot"


class ServiceOperation(StrEnum):
    RESTART = "restart"
    RELOAD = "reload"


class RebootReason(StrEnum):
    """Why a reconciliation pass fell back to a full reboot."""

    DELETION = "deletion"
    NO_MATCHING_RULE = "no_matching_rule"
    ALWAYS_REBOOT_RULE = "always_reboot_rule"
    EXECUTION_FAILURE = "execution_failure"
    DRAIN_UNAVAILABLE = "drain_unavailable"
