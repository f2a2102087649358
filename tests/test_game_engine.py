import json
import random
import unittest
from dataclasses import FrozenInstanceError
from unittest.mock import Mock

from game_engine.world import ArmyColor, PLAYABLE_COLORS, TERRITORY_NAMES, Territory, WorldMap
from game_engine.mission import Mission, MissionKind, TERRITORIES_TO_WIN, draw_mission
from game_engine.combat import CombatResolver, OutcomeKind
from game_engine.gamestate import GameSession, SessionStatus
from game_engine.errors import (AttackError, GameOverError, IndexOutOfRange,
                                NotYourTerritory, SelfAttack)

RED, BLUE, GREEN, UNCLAIMED = ArmyColor.RED, ArmyColor.BLUE, ArmyColor.GREEN, ArmyColor.UNCLAIMED


def make_map(*owners_and_troops):
    """Builds a WorldMap from (owner, troops) pairs, one per territory in order."""
    return WorldMap([Territory(name, owner, troops)
                     for name, (owner, troops) in zip(TERRITORY_NAMES, owners_and_troops)])


def scripted_rng(*dice):
    """An rng whose randint returns the given dice, in order."""
    rng = Mock()
    rng.randint.side_effect = list(dice)
    return rng


def total_territories(world_map):
    return sum(world_map.count_owned_by(c) for c in PLAYABLE_COLORS) + world_map.count_owned_by(UNCLAIMED)


class TestWorldMap(unittest.TestCase):
    def setUp(self):
        self.map = make_map((RED, 10), (BLUE, 1), (GREEN, 12), (RED, 2), (BLUE, 15))

    def test_initialize_builds_fixed_territories(self):
        for seed in range(20):
            world_map = WorldMap.initialize(random.Random(seed))
            self.assertEqual([t.name for t in world_map], list(TERRITORY_NAMES))
            for territory in world_map:
                self.assertIn(territory.owner, PLAYABLE_COLORS)
                self.assertTrue(10 <= territory.troops <= 15)

    def test_territory_at_returns_read_only_view(self):
        view = self.map.territory_at(1)
        self.assertEqual((view.index, view.name, view.owner, view.troops), (1, "Europa", BLUE, 1))
        with self.assertRaises(AttributeError):
            view.troops = 50
        self.assertEqual(self.map.get(1).troops, 1)

    def test_territory_at_rejects_out_of_range(self):
        for bad_index in (-1, 5, 99, True, "1", None):
            with self.assertRaises(IndexOutOfRange):
                self.map.territory_at(bad_index)

    def test_index_out_of_range_is_an_index_error(self):
        with self.assertRaises(IndexError):
            self.map.territory_at(5)

    def test_count_and_any_owned_by(self):
        self.assertEqual(self.map.count_owned_by(RED), 2)
        self.assertEqual(self.map.count_owned_by(GREEN), 1)
        self.assertTrue(self.map.any_owned_by(BLUE))
        self.assertFalse(self.map.any_owned_by(UNCLAIMED))
        self.assertEqual(self.map.owned_indices(RED), [0, 3])

    def test_territory_conservation(self):
        self.map.get(3).abandon()
        self.assertEqual(self.map.count_owned_by(UNCLAIMED), 1)
        self.assertEqual(total_territories(self.map), 5)

    def test_territory_invariant_on_construction(self):
        with self.assertRaises(ValueError):
            Territory("Europa", RED, 0)
        with self.assertRaises(ValueError):
            Territory("Europa", UNCLAIMED, 3)
        with self.assertRaises(ValueError):
            Territory("Europa", RED, -1)

    def test_map_size_is_fixed(self):
        with self.assertRaises(ValueError):
            WorldMap([Territory("América", RED, 10)])

    def test_unclaimed_is_not_playable(self):
        self.assertNotIn(UNCLAIMED, PLAYABLE_COLORS)
        self.assertEqual(len(PLAYABLE_COLORS), 3)


class TestMission(unittest.TestCase):
    def test_draw_elimination_mission(self):
        rng = Mock()
        rng.choice.side_effect = [MissionKind.ELIMINATE_ARMY, BLUE]
        mission = draw_mission(rng)
        self.assertIs(mission.kind, MissionKind.ELIMINATE_ARMY)
        self.assertIs(mission.target, BLUE)
        self.assertIn("Destroy army Blue", mission.description)

    def test_draw_conquest_mission(self):
        rng = Mock()
        rng.choice.side_effect = [MissionKind.CONQUER_COUNT]
        mission = draw_mission(rng)
        self.assertIs(mission.kind, MissionKind.CONQUER_COUNT)
        self.assertEqual(mission.target, TERRITORIES_TO_WIN)
        self.assertEqual(mission.description, "Conquer 3 different territories")

    def test_draw_covers_both_kinds(self):
        rng = random.Random(7)
        kinds = {draw_mission(rng).kind for _ in range(50)}
        self.assertEqual(kinds, set(MissionKind))

    def test_conquest_needs_three_territories(self):
        mission = Mission(MissionKind.CONQUER_COUNT, 3)
        world_map = make_map((RED, 10), (RED, 3), (BLUE, 1), (GREEN, 12), (BLUE, 15))
        self.assertFalse(mission.is_satisfied(world_map, RED))
        world_map.get(2).occupy(RED, troops=1)
        self.assertTrue(mission.is_satisfied(world_map, RED))

    def test_elimination_satisfied_once_target_holds_nothing(self):
        mission = Mission(MissionKind.ELIMINATE_ARMY, GREEN)
        world_map = make_map((RED, 10), (RED, 3), (GREEN, 1), (BLUE, 12), (BLUE, 15))
        self.assertFalse(mission.is_satisfied(world_map, RED))
        world_map.get(2).occupy(RED, troops=1)
        self.assertTrue(mission.is_satisfied(world_map, RED))

    def test_elimination_of_own_army_cannot_be_met_in_normal_play(self):
        # Known quirk kept from the original game: the draw may name the player's
        # own colour, which stays on the map for as long as the player does.
        mission = Mission(MissionKind.ELIMINATE_ARMY, RED)
        world_map = make_map((RED, 10), (BLUE, 3), (GREEN, 1), (BLUE, 12), (GREEN, 15))
        self.assertTrue(mission.targets_own_army(RED))
        self.assertFalse(mission.targets_own_army(BLUE))
        self.assertFalse(mission.is_satisfied(world_map, RED))

    def test_mission_is_immutable(self):
        mission = Mission(MissionKind.CONQUER_COUNT, 3)
        with self.assertRaises(FrozenInstanceError):
            mission.target = 1
        with self.assertRaises(FrozenInstanceError):
            mission.description = "Conquer 1 territory"
        self.assertEqual(mission.target, 3)

    def test_missions_compare_and_hash_by_value(self):
        first = Mission(MissionKind.ELIMINATE_ARMY, BLUE)
        second = Mission(MissionKind.ELIMINATE_ARMY, BLUE)
        self.assertEqual(first, second)
        self.assertEqual(len({first, second}), 1)
        self.assertNotEqual(first, Mission(MissionKind.ELIMINATE_ARMY, GREEN))

    def test_custom_description_is_kept(self):
        mission = Mission(MissionKind.CONQUER_COUNT, 3, description="Hold three lands")
        self.assertEqual(mission.description, "Hold three lands")

    def test_invalid_targets_rejected(self):
        with self.assertRaises(ValueError):
            Mission(MissionKind.ELIMINATE_ARMY, UNCLAIMED)
        with self.assertRaises(ValueError):
            Mission(MissionKind.CONQUER_COUNT, 0)


class TestCombatResolver(unittest.TestCase):
    def setUp(self):
        self.map = make_map((RED, 10), (BLUE, 1), (GREEN, 5), (RED, 1), (BLUE, 15))

    def resolve(self, origin, destination, *dice):
        return CombatResolver(scripted_rng(*dice)).resolve_attack(self.map, origin, destination, RED)

    def test_conquest_of_last_defender(self):
        outcome = self.resolve(0, 1, 6, 1)
        self.assertIs(outcome.kind, OutcomeKind.TERRITORY_CONQUERED)
        self.assertEqual(self.map.territory_at(1).owner, RED)
        self.assertEqual(self.map.territory_at(1).troops, 1)
        self.assertEqual(self.map.territory_at(0).troops, 9)
        self.assertEqual((outcome.origin_name, outcome.destination_name), ("América", "Europa"))
        self.assertEqual((outcome.attacker_die, outcome.defender_die), (6, 1))

    def test_attacker_wins_skirmish(self):
        outcome = self.resolve(0, 2, 4, 3)
        self.assertIs(outcome.kind, OutcomeKind.ATTACKER_WINS_SKIRMISH)
        self.assertEqual(self.map.territory_at(2).troops, 4)
        self.assertEqual(self.map.territory_at(2).owner, GREEN)
        self.assertEqual(self.map.territory_at(0).troops, 10)
        self.assertTrue(outcome.attacker_won)

    def test_defender_wins_skirmish(self):
        outcome = self.resolve(0, 2, 2, 5)
        self.assertIs(outcome.kind, OutcomeKind.DEFENDER_WINS_SKIRMISH)
        self.assertEqual(self.map.territory_at(0).troops, 9)
        self.assertEqual(self.map.territory_at(0).owner, RED)
        self.assertEqual(self.map.territory_at(2).troops, 5)
        self.assertTrue(outcome.defender_won)

    def test_draw_changes_nothing(self):
        before = self.map.views()
        outcome = self.resolve(0, 2, 3, 3)
        self.assertIs(outcome.kind, OutcomeKind.DRAW)
        self.assertEqual(self.map.views(), before)
        self.assertFalse(outcome.changed_map)

    def test_insufficient_troops_changes_nothing(self):
        before = self.map.views()
        outcome = self.resolve(3, 1, 6, 1)
        self.assertIs(outcome.kind, OutcomeKind.INSUFFICIENT_TROOPS)
        self.assertEqual(self.map.views(), before)
        # Dice are still rolled and reported.
        self.assertEqual((outcome.attacker_die, outcome.defender_die), (6, 1))

    def test_outcome_records_troops_before_and_after(self):
        outcome = self.resolve(0, 2, 6, 2)
        self.assertEqual((outcome.origin_troops_before, outcome.destination_troops_before), (10, 5))
        self.assertEqual((outcome.origin_troops_after, outcome.destination_troops_after), (10, 4))
        self.assertEqual(json.loads(json.dumps(outcome.to_dict()))['kind'], "attacker_wins_skirmish")

    def test_random_battles_keep_map_invariants(self):
        rng = random.Random(1234)
        resolver = CombatResolver(rng)
        for _ in range(300):
            origin, destination = rng.sample(range(5), 2)
            attacker = self.map.get(origin).owner
            if attacker is UNCLAIMED:
                continue
            resolver.resolve_attack(self.map, origin, destination, attacker)
            self.assertEqual(total_territories(self.map), 5)
            for territory in self.map:
                self.assertGreaterEqual(territory.troops, 0)
                self.assertEqual(territory.troops == 0, territory.owner is UNCLAIMED)


class TestGameSession(unittest.TestCase):
    def setUp(self):
        self.map = make_map((RED, 10), (BLUE, 1), (GREEN, 5), (RED, 1), (BLUE, 15))
        self.rng = Mock()
        self.session = GameSession(self.map, Mission(MissionKind.CONQUER_COUNT, 3), RED, rng=self.rng)

    def test_new_game_is_reproducible_with_seed(self):
        first = GameSession.new_game(seed=42).snapshot()
        second = GameSession.new_game(seed=42).snapshot()
        self.assertEqual(first, second)
        self.assertIn(first.player_color, PLAYABLE_COLORS)
        self.assertIs(first.status, SessionStatus.PLAYING)

    def test_self_attack_rejected_before_rolling(self):
        with self.assertRaises(SelfAttack):
            self.session.attack(0, 0)
        self.rng.randint.assert_not_called()

    def test_attack_from_foreign_territory_rejected(self):
        with self.assertRaises(NotYourTerritory):
            self.session.attack(1, 0)
        self.rng.randint.assert_not_called()

    def test_attack_out_of_range_rejected(self):
        with self.assertRaises(IndexOutOfRange):
            self.session.attack(5, 1)
        with self.assertRaises(IndexOutOfRange):
            self.session.attack(0, -1)
        self.rng.randint.assert_not_called()

    def test_attack_errors_share_a_base_class(self):
        for origin, destination in ((0, 0), (1, 0), (0, 7)):
            with self.assertRaises(AttackError):
                self.session.attack(origin, destination)

    def test_check_origin(self):
        self.assertEqual(self.session.check_origin(0).name, "América")
        with self.assertRaises(NotYourTerritory):
            self.session.check_origin(2)

    def test_attack_delegates_to_resolver(self):
        self.rng.randint.side_effect = [6, 1]
        outcome = self.session.attack(0, 1)
        self.assertIs(outcome.kind, OutcomeKind.TERRITORY_CONQUERED)
        self.assertEqual(self.map.territory_at(1).owner, RED)

    def test_check_victory_is_idempotent(self):
        self.assertFalse(self.session.check_victory())
        self.assertFalse(self.session.check_victory())
        self.assertIs(self.session.status, SessionStatus.PLAYING)

    def test_victory_ends_the_game(self):
        self.rng.randint.side_effect = [6, 1]
        self.session.attack(0, 1)
        self.assertTrue(self.session.check_victory())
        self.assertTrue(self.session.check_victory())
        self.assertIs(self.session.status, SessionStatus.WON)
        with self.assertRaises(GameOverError):
            self.session.attack(0, 2)

    def test_quit_is_terminal(self):
        self.session.quit()
        self.assertIs(self.session.status, SessionStatus.QUIT)
        with self.assertRaises(GameOverError):
            self.session.attack(0, 1)
        self.assertFalse(self.session.check_victory())
        self.assertIs(self.session.status, SessionStatus.QUIT)

    def test_quit_after_win_keeps_won(self):
        self.map.get(2).occupy(RED, troops=1)
        self.session.check_victory()
        self.session.quit()
        self.assertIs(self.session.status, SessionStatus.WON)

    def test_snapshot_serializes(self):
        data = json.loads(json.dumps(self.session.snapshot().to_dict()))
        self.assertEqual(len(data['territories']), 5)
        self.assertEqual(data['territories'][1], {"index": 1, "name": "Europa", "owner": "blue", "troops": 1})
        self.assertEqual(data['player_color'], "red")
        self.assertEqual(data['mission']['target'], 3)
        self.assertEqual(data['status'], "playing")

    def test_player_must_be_playable(self):
        with self.assertRaises(ValueError):
            GameSession(self.map, Mission(MissionKind.CONQUER_COUNT, 3), UNCLAIMED)


if __name__ == '__main__':
    unittest.main()
