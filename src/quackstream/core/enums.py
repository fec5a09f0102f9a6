"""Enumerations used across quackstream."""

from enum import Enum


class TimelinePolicy(str, Enum):
    FOLD = "fold"  # Deleted removes the most recent item
    APPEND_ONLY = "append_only"  # Deleted is ignored


class QuackPolicy(str, Enum):
    ALLOW = "allow"
    REJECT_AFTER_DELETE = "reject_after_delete"


class CommandOutcome(str, Enum):
    APPLIED = "applied"
    REJECTED = "rejected"
