# game_engine/gamestate.py
# Defines the GameSession: the map, the mission, the player's colour and the turn state machine.

import logging
import random
from collections import namedtuple
from enum import Enum

from .combat import CombatResolver
from .errors import GameOverError, NotYourTerritory, SelfAttack
from .mission import draw_mission
from .world import PLAYABLE_COLORS, WorldMap

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    QUIT = "quit"


class GameSnapshot(namedtuple("GameSnapshot", ["territories", "mission", "player_color", "status"])):
    """Read-only picture of a session, for display and for the spectator feed."""
    __slots__ = ()

    def to_dict(self):
        return {
            "territories": [
                {"index": t.index, "name": t.name, "owner": t.owner.value, "troops": t.troops}
                for t in self.territories
            ],
            "mission": self.mission.to_dict(),
            "player_color": self.player_color.value,
            "status": self.status.value,
        }


class GameSession:
    """
    Holds the complete state of one game, from the first draw until the player
    wins or quits.

    The session owns its random generator; every draw (setup, mission, dice)
    comes from it, so a seeded session replays identically.
    """
    def __init__(self, world_map, mission, player_color, rng=None):
        if player_color not in PLAYABLE_COLORS:
            raise ValueError(f"The player must command a playable army, got {player_color!r}.")
        self.world_map = world_map
        self.mission = mission
        self.player_color = player_color
        self.rng = rng if rng is not None else random.Random()
        self.resolver = CombatResolver(self.rng)
        self.status = SessionStatus.PLAYING

    @classmethod
    def new_game(cls, seed=None, rng=None):
        """
        Sets up a fresh session: random map, then the player's colour, then the mission.

        Args:
            seed: Optional seed for a new random.Random. Ignored when `rng` is given.
            rng: Optional generator to use instead.
        """
        rng = rng if rng is not None else random.Random(seed)
        world_map = WorldMap.initialize(rng)
        player_color = rng.choice(PLAYABLE_COLORS)
        mission = draw_mission(rng)
        logger.info("New game: player commands %s", player_color.value)
        if mission.targets_own_army(player_color):
            logger.warning("Mission targets the player's own army; it cannot be completed.")
        return cls(world_map, mission, player_color, rng)

    @property
    def is_over(self):
        return self.status is not SessionStatus.PLAYING

    def _ensure_playing(self):
        if self.is_over:
            raise GameOverError(f"The game is over ({self.status.value}).")

    def check_origin(self, origin_index):
        """
        Validates an attack origin on its own, so the shell can reject it before
        asking for a destination.

        Raises:
            GameOverError: The session is already won or quit.
            IndexOutOfRange: The index is not a territory.
            NotYourTerritory: The player does not hold the territory.
        """
        self._ensure_playing()
        origin = self.world_map.territory_at(origin_index)
        if origin.owner is not self.player_color:
            raise NotYourTerritory(origin.name, self.player_color)
        return origin

    def attack(self, origin_index, destination_index):
        """
        Validates the command and, if it is legal, resolves one attack exchange.
        No dice are rolled when validation fails.

        Returns:
            AttackOutcome: The outcome reported by the CombatResolver.

        Raises:
            GameOverError, IndexOutOfRange, NotYourTerritory, SelfAttack
        """
        self._ensure_playing()
        origin = self.world_map.territory_at(origin_index)
        self.world_map.territory_at(destination_index)
        if origin.owner is not self.player_color:
            raise NotYourTerritory(origin.name, self.player_color)
        if origin_index == destination_index:
            raise SelfAttack(origin.name)
        return self.resolver.resolve_attack(self.world_map, origin_index, destination_index, self.player_color)

    def check_victory(self):
        """Asks the mission whether it is fulfilled. A success while playing ends the game as WON."""
        satisfied = self.mission.is_satisfied(self.world_map, self.player_color)
        if satisfied and self.status is SessionStatus.PLAYING:
            self.status = SessionStatus.WON
            logger.info("Mission accomplished: %s", self.mission.description)
        return satisfied

    def quit(self):
        if self.status is SessionStatus.PLAYING:
            self.status = SessionStatus.QUIT
            logger.info("Player quit the game.")

    def snapshot(self):
        return GameSnapshot(tuple(self.world_map.views()), self.mission, self.player_color, self.status)
