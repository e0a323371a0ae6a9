"""
MessageWall Backend - Like Counter Policies
=============================================

What:  Pure functions deciding the next like count from the current one.
How:   Strategy pattern: each policy turns (current, action) into a new count.
       MessageService owns the I/O; policies never see the database.

Policies:
    DirectionalPolicy ("directional", default)
        "add" → +1, anything else → −1, result clamped at 0.
        Responds with the new count only.
    IncrementPolicy ("increment")
        Always +1, the action is ignored.
        Responds with the full record re-read after the write.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type


class LikePolicy(ABC):
    """
    Contract:
        - delta() returns the signed step for a request
        - apply() treats a NULL stored count as 0 and never returns a negative value
        - returns_record tells the service which response shape to build
    """

    name: str = ""
    returns_record: bool = False

    @abstractmethod
    def delta(self, action: Any) -> int:
        """Signed change requested by `action`."""

    def apply(self, current: Optional[int], action: Any = None) -> int:
        return max(0, (current or 0) + self.delta(action))


class DirectionalPolicy(LikePolicy):
    name = "directional"
    returns_record = False

    def delta(self, action: Any) -> int:
        return 1 if action == "add" else -1


class IncrementPolicy(LikePolicy):
    name = "increment"
    returns_record = True

    def delta(self, action: Any) -> int:
        return 1


_POLICIES: Dict[str, Type[LikePolicy]] = {
    DirectionalPolicy.name: DirectionalPolicy,
    IncrementPolicy.name: IncrementPolicy,
}


def get_like_policy(name: str) -> LikePolicy:
    """Instantiates the policy registered under `name` (raises ValueError if unknown)."""
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown like policy '{name}'. Must be one of: {sorted(_POLICIES)}"
        ) from None
