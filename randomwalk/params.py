# randomwalk/params.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidParameter


class WalkVariant(str, Enum):
    SIMPLE = "simple"
    JUMP = "jump"
    BRIDGE = "bridge"


@dataclass(frozen=True)
class WalkParameters:
    """
    Parameters of a unit-step random walk.

    Parameters
    ----------
    start_value : float
        Value the walk starts from (x0 of the first step).
    volatility : float
        Per-unit-time standard deviation sigma. 0 gives a constant path.
    step_count : int
        Number of points to generate.
    """

    start_value: float
    volatility: float
    step_count: int

    def __post_init__(self) -> None:
        if self.volatility < 0:
            raise InvalidParameter("volatility must be >= 0")
        if self.step_count < 0:
            raise InvalidParameter("step_count must be >= 0")


@dataclass(frozen=True)
class JumpParameters(WalkParameters):
    """
    Walk with a single long step of `jump_duration` time units at `jump_start_index`.

    `bound` is the half-range used by the reflection rule on the jump value;
    None disables it.
    """

    jump_start_index: int
    jump_duration: int = 1
    bound: Optional[float] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.jump_duration < 1:
            raise InvalidParameter("jump_duration must be >= 1")
        if not (0 <= self.jump_start_index < self.step_count):
            raise InvalidParameter(
                f"jump_start_index must be in [0, {self.step_count}), got {self.jump_start_index}"
            )
        if self.bound is not None and self.bound <= 0:
            raise InvalidParameter("bound must be > 0")

    @property
    def gap_before_index(self) -> Optional[int]:
        """Last time index before the gap, None when the walk starts with the jump."""
        return self.jump_start_index - 1 if self.jump_start_index > 0 else None

    @property
    def gap_after_index(self) -> int:
        return self.jump_start_index + self.jump_duration


@dataclass(frozen=True)
class BridgeParameters(WalkParameters):
    """Walk conditioned to hit `anchor_value` at time `anchor_time`."""

    anchor_value: float
    anchor_time: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.volatility <= 0:
            raise InvalidParameter("volatility must be > 0 for a bridge")
        if self.anchor_time <= 0:
            raise InvalidParameter("anchor_time must be > 0")

    @property
    def anchor_in_range(self) -> bool:
        """True when some generated point falls in the snap window around the anchor."""
        # point i carries time i+1 and the window is anchor_time +/- 1
        return self.anchor_time <= self.step_count + 1
