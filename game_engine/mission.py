# game_engine/mission.py
# Defines the player's secret Mission and how one is drawn at the start of a session.

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .world import ArmyColor, PLAYABLE_COLORS

logger = logging.getLogger(__name__)

TERRITORIES_TO_WIN = 3


class MissionKind(str, Enum):
    ELIMINATE_ARMY = "eliminate_army"
    CONQUER_COUNT = "conquer_count"


@dataclass(frozen=True)
class Mission:
    """
    The player's private victory condition. Drawn once per session and never
    changed afterwards.

    Attributes:
        kind: A MissionKind.
        target: The ArmyColor to wipe out (ELIMINATE_ARMY) or the number of
                territories to hold (CONQUER_COUNT).
        description: Text shown to the player.
    """
    kind: MissionKind
    target: Union[ArmyColor, int]
    description: Optional[str] = None

    def __post_init__(self):
        kind, target = self.kind, self.target
        if kind is MissionKind.ELIMINATE_ARMY and target not in PLAYABLE_COLORS:
            raise ValueError(f"An elimination mission needs a playable army colour, got {target!r}.")
        if kind is MissionKind.CONQUER_COUNT and (isinstance(target, bool) or not isinstance(target, int) or target < 1):
            raise ValueError(f"A conquest mission needs a positive territory count, got {target!r}.")
        if self.description is None:
            # Instance is frozen; fill in the default text once.
            object.__setattr__(self, "description", self._describe(kind, target))

    @staticmethod
    def _describe(kind, target):
        if kind is MissionKind.ELIMINATE_ARMY:
            return f"Destroy army {target.label} (take every one of its territories)"
        return f"Conquer {target} different territories"

    def is_satisfied(self, world_map, player_color):
        """
        Checks the mission against the current map. Pure: reads, never writes.

        An elimination mission whose target is the player's own colour can never
        be met in normal play, since no rule makes a player lose their last
        territory on purpose. That draw is kept as is; see targets_own_army().
        """
        if self.kind is MissionKind.ELIMINATE_ARMY:
            return not world_map.any_owned_by(self.target)
        return world_map.count_owned_by(player_color) >= self.target

    def targets_own_army(self, player_color):
        return self.kind is MissionKind.ELIMINATE_ARMY and self.target is player_color

    def to_dict(self):
        target = self.target.value if isinstance(self.target, ArmyColor) else self.target
        return {"kind": self.kind.value, "target": target, "description": self.description}

    def __repr__(self):
        return f"Mission({self.kind.value}, {self.target!r})"


def draw_mission(rng):
    """Draws the session's mission: each kind with equal odds, then its target."""
    kind = rng.choice((MissionKind.ELIMINATE_ARMY, MissionKind.CONQUER_COUNT))
    if kind is MissionKind.ELIMINATE_ARMY:
        mission = Mission(kind, rng.choice(PLAYABLE_COLORS))
    else:
        mission = Mission(kind, TERRITORIES_TO_WIN)
    logger.debug("Mission drawn: %r", mission)
    return mission
