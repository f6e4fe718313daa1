"""Agent model for valsim.

An agent is a fixed stat record: a role, three style scores (aggro, control,
midrange), an optional one-off splash bonus to a single style, and a
relative power number. Everything is frozen except current relative power,
which only map balancing touches.

Splash bonuses (from parameters.py):
- AGGRO: +2 aggro
- CONTROL: +2 control
- MIDRANGE: +3 midrange
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr

from valsim.parameters import (
    AGGRO_SPLASH_BONUS,
    CONTROL_SPLASH_BONUS,
    MIDRANGE_SPLASH_BONUS,
)


class Role(str, Enum):
    """Agent role tag."""

    CONTROLLER = "CONTROLLER"
    INITIATOR = "INITIATOR"
    SENTINEL = "SENTINEL"
    DUELIST = "DUELIST"


class SplashStyle(str, Enum):
    """Style that receives an agent's one-off splash bonus."""

    NONE = "NONE"
    AGGRO = "AGGRO"
    CONTROL = "CONTROL"
    MIDRANGE = "MIDRANGE"


SPLASH_BONUSES: dict[SplashStyle, float] = {
    SplashStyle.NONE: 0.0,
    SplashStyle.AGGRO: AGGRO_SPLASH_BONUS,
    SplashStyle.CONTROL: CONTROL_SPLASH_BONUS,
    SplashStyle.MIDRANGE: MIDRANGE_SPLASH_BONUS,
}


def _round4(value: float) -> float:
    return round(value * 10000.0) / 10000.0


class Agent(BaseModel):
    """A single agent's stat record.

    Attributes:
        name: Display name, also the lookup key (case-insensitive)
        role: Role tag
        aggro: Base aggro score (>= 0)
        control: Base control score (>= 0)
        midrange: Base midrange score (>= 0)
        baseline_relative_power: Relative power before map balancing
        splash: Style boosted once by apply_splash()
    """

    name: str = Field(min_length=1, frozen=True)
    role: Role = Field(frozen=True)
    aggro: float = Field(ge=0.0, frozen=True)
    control: float = Field(ge=0.0, frozen=True)
    midrange: float = Field(ge=0.0, frozen=True)
    baseline_relative_power: float = Field(frozen=True)
    splash: SplashStyle = Field(default=SplashStyle.NONE, frozen=True)

    _current_relative_power: float = PrivateAttr(default=0.0)
    _splash_applied: bool = PrivateAttr(default=False)

    def model_post_init(self, __context) -> None:
        self._current_relative_power = self.baseline_relative_power

    @property
    def key(self) -> str:
        """Normalized lookup key."""
        return self.name.strip().lower()

    # Relative power
    @property
    def current_relative_power(self) -> float:
        return self._current_relative_power

    def change_relative_power(self, delta: float) -> None:
        """Shift current relative power by a signed delta."""
        self._current_relative_power += delta

    def reset_relative_power(self) -> None:
        """Restore current relative power to baseline."""
        self._current_relative_power = self.baseline_relative_power

    # Splash
    @property
    def splash_applied(self) -> bool:
        return self._splash_applied

    def apply_splash(self) -> bool:
        """Apply the splash bonus.

        Safe to call repeatedly: only the first call has any effect.

        Returns:
            True if this call applied the splash, False if it was already applied
        """
        if self._splash_applied:
            return False
        self._splash_applied = True
        return True

    def _splash_for(self, style: SplashStyle) -> float:
        if self._splash_applied and self.splash == style:
            return SPLASH_BONUSES[style]
        return 0.0

    @property
    def true_aggro(self) -> float:
        """Aggro including the splash bonus, once applied."""
        return self.aggro + self._splash_for(SplashStyle.AGGRO)

    @property
    def true_control(self) -> float:
        """Control including the splash bonus, once applied."""
        return self.control + self._splash_for(SplashStyle.CONTROL)

    @property
    def true_midrange(self) -> float:
        """Midrange including the splash bonus, once applied."""
        return self.midrange + self._splash_for(SplashStyle.MIDRANGE)

    def describe(self) -> str:
        """One-line stat summary used by team stats output."""
        return (
            f"{self.name}, {_round4(self.true_aggro)}/{_round4(self.true_control)}/"
            f"{_round4(self.true_midrange)}, Relative Power: {self.current_relative_power}"
        )

    def __str__(self) -> str:
        return self.describe()
