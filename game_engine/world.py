# game_engine/world.py
# Defines the army colours, the Territory class and the fixed five-territory WorldMap.

import logging
from collections import namedtuple
from enum import Enum

from .errors import IndexOutOfRange

logger = logging.getLogger(__name__)

TERRITORY_NAMES = ("América", "Europa", "Ásia", "África", "Oceania")
INITIAL_TROOPS = 10
MAX_BONUS_TROOPS = 5  # Initial garrisons fall in [10, 15]


class ArmyColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    # Owner of a territory whose garrison was wiped out. Never a playable colour.
    UNCLAIMED = "unclaimed"

    @property
    def label(self):
        return self.value.capitalize()


PLAYABLE_COLORS = (ArmyColor.RED, ArmyColor.BLUE, ArmyColor.GREEN)

# Read-only copy of a territory, handed to the shell and the spectator feed.
TerritoryView = namedtuple("TerritoryView", ["index", "name", "owner", "troops"])


class Territory:
    """A single territory: who holds it and how many troops garrison it."""
    def __init__(self, name, owner, troops):
        if troops < 0:
            raise ValueError(f"{name} cannot hold a negative number of troops ({troops}).")
        if (troops == 0) != (owner is ArmyColor.UNCLAIMED):
            raise ValueError(f"{name}: only unclaimed territories may be empty ({owner}, {troops} troops).")
        self.name = name
        self.owner = owner
        self.troops = troops

    def remove_troop(self):
        """Removes one troop from a garrison that keeps at least one afterwards."""
        if self.troops < 2:
            raise ValueError(f"{self.name} cannot lose its last troop this way; use abandon().")
        self.troops -= 1

    def abandon(self):
        """The last defender fell: the territory is empty and belongs to nobody."""
        self.troops = 0
        self.owner = ArmyColor.UNCLAIMED

    def occupy(self, color, troops=1):
        self.owner = color
        self.troops = troops

    def __repr__(self):
        return f"Territory({self.name}, {self.owner.value}, {self.troops})"


class WorldMap:
    """The fixed, ordered collection of territories fought over during a session.

    The map never grows or shrinks; only owners and troop counts change, and
    only through the CombatResolver.
    """
    SIZE = len(TERRITORY_NAMES)

    def __init__(self, territories):
        if len(territories) != self.SIZE:
            raise ValueError(f"A world map holds exactly {self.SIZE} territories, got {len(territories)}.")
        self.territories = list(territories)

    @classmethod
    def initialize(cls, rng):
        """
        Builds the starting map: every territory gets a random owner among the
        three playable colours and a random garrison in [10, 15].

        Args:
            rng: A random.Random-like generator owned by the game session.
        """
        territories = []
        for name in TERRITORY_NAMES:
            owner = rng.choice(PLAYABLE_COLORS)
            troops = INITIAL_TROOPS + rng.randint(0, MAX_BONUS_TROOPS)
            territories.append(Territory(name, owner, troops))
        logger.info("World map initialized: %s", territories)
        return cls(territories)

    def _check_index(self, index):
        # bool is an int subclass and negative ints would wrap around the list.
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self.SIZE:
            raise IndexOutOfRange(index, self.SIZE)

    def get(self, index):
        """Returns the live Territory at `index`. Used by the combat resolver."""
        self._check_index(index)
        return self.territories[index]

    def territory_at(self, index):
        """Returns a read-only TerritoryView of the territory at `index`."""
        territory = self.get(index)
        return TerritoryView(index, territory.name, territory.owner, territory.troops)

    def views(self):
        return [self.territory_at(i) for i in range(self.SIZE)]

    def count_owned_by(self, color):
        return sum(1 for t in self.territories if t.owner is color)

    def any_owned_by(self, color):
        """True while `color` still holds at least one territory; False once it is destroyed."""
        return any(t.owner is color for t in self.territories)

    def owned_indices(self, color):
        return [i for i, t in enumerate(self.territories) if t.owner is color]

    def __len__(self):
        return self.SIZE

    def __iter__(self):
        return iter(self.views())

    def __repr__(self):
        return f"WorldMap({self.territories})"
