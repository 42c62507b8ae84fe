"""State container for the loaded policy."""

from __future__ import annotations

from dataclasses import dataclass

from core.policy import PolicyModel


@dataclass
class PolicyState:
    model: PolicyModel | None = None
    error: str | None = None
