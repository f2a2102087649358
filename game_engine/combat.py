# game_engine/combat.py
# The core logic to resolve a single attack exchange between two territories.

import logging
from dataclasses import dataclass
from enum import Enum

from .world import ArmyColor

logger = logging.getLogger(__name__)

DIE_FACES = 6
MIN_ATTACKING_TROOPS = 2  # One troop always stays behind in the origin


class OutcomeKind(str, Enum):
    INSUFFICIENT_TROOPS = "insufficient_troops"
    ATTACKER_WINS_SKIRMISH = "attacker_wins_skirmish"
    TERRITORY_CONQUERED = "territory_conquered"
    DEFENDER_WINS_SKIRMISH = "defender_wins_skirmish"
    ORIGIN_LOST_ALL_TROOPS = "origin_lost_all_troops"
    DRAW = "draw"


@dataclass(frozen=True)
class AttackOutcome:
    """Everything the shell needs to print a battle report."""
    kind: OutcomeKind
    attacker_die: int
    defender_die: int
    attacker_color: ArmyColor
    origin_index: int
    origin_name: str
    destination_index: int
    destination_name: str
    origin_troops_before: int
    destination_troops_before: int
    origin_troops_after: int
    destination_troops_after: int

    @property
    def attacker_won(self):
        return self.kind in (OutcomeKind.ATTACKER_WINS_SKIRMISH, OutcomeKind.TERRITORY_CONQUERED)

    @property
    def defender_won(self):
        return self.kind in (OutcomeKind.DEFENDER_WINS_SKIRMISH, OutcomeKind.ORIGIN_LOST_ALL_TROOPS)

    @property
    def changed_map(self):
        return self.kind not in (OutcomeKind.INSUFFICIENT_TROOPS, OutcomeKind.DRAW)

    def to_dict(self):
        data = dict(self.__dict__)
        data['kind'] = self.kind.value
        data['attacker_color'] = self.attacker_color.value
        return data


class CombatResolver:
    """
    Resolves one attack: one die per side, a single troop lost by whichever
    side rolls lower, nothing on a tie.

    The resolver trusts its caller (GameSession) for the preconditions: both
    indices valid and distinct, and the origin owned by `attacker_color`.
    """
    def __init__(self, rng):
        self.rng = rng

    def roll_die(self):
        return self.rng.randint(1, DIE_FACES)

    def resolve_attack(self, world_map, origin_index, destination_index, attacker_color):
        """
        Rolls the dice and applies exactly one of the outcome branches to the map.

        Args:
            world_map: The WorldMap to mutate.
            origin_index: Index of the attacking territory.
            destination_index: Index of the defending territory.
            attacker_color: The ArmyColor launching the attack.

        Returns:
            AttackOutcome: Dice, outcome kind and troop counts before and after.
        """
        origin = world_map.get(origin_index)
        destination = world_map.get(destination_index)
        origin_before, destination_before = origin.troops, destination.troops

        # Dice are rolled before the troop check, so even an aborted attack reports them.
        attacker_die = self.roll_die()
        defender_die = self.roll_die()

        if origin.troops < MIN_ATTACKING_TROOPS:
            kind = OutcomeKind.INSUFFICIENT_TROOPS
        elif attacker_die > defender_die:
            if destination.troops > 1:
                destination.remove_troop()
                kind = OutcomeKind.ATTACKER_WINS_SKIRMISH
            else:
                # Last defender fell: one troop moves in from the origin.
                origin.remove_troop()
                destination.occupy(attacker_color, troops=1)
                kind = OutcomeKind.TERRITORY_CONQUERED
        elif defender_die > attacker_die:
            if origin.troops > 1:
                origin.remove_troop()
                kind = OutcomeKind.DEFENDER_WINS_SKIRMISH
            else:
                # Only reachable if the troop check above is ever relaxed.
                origin.abandon()
                kind = OutcomeKind.ORIGIN_LOST_ALL_TROOPS
        else:
            kind = OutcomeKind.DRAW

        outcome = AttackOutcome(
            kind=kind,
            attacker_die=attacker_die,
            defender_die=defender_die,
            attacker_color=attacker_color,
            origin_index=origin_index,
            origin_name=origin.name,
            destination_index=destination_index,
            destination_name=destination.name,
            origin_troops_before=origin_before,
            destination_troops_before=destination_before,
            origin_troops_after=origin.troops,
            destination_troops_after=destination.troops,
        )
        if kind is OutcomeKind.TERRITORY_CONQUERED:
            logger.info("%s conquered by %s", destination.name, attacker_color.value)
        else:
            logger.debug("%s -> %s: dice %d vs %d, %s",
                         origin.name, destination.name, attacker_die, defender_die, kind.value)
        return outcome
