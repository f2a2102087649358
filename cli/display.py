# cli/display.py
# Functions for printing the map, the secret mission, the menu and battle reports
# to the command line interface.

from game_engine.combat import OutcomeKind
from game_engine.gamestate import GameSnapshot # Used for type hinting

BANNER_WIDTH = 68


def _banner(*lines):
    print("\n╔" + "═" * BANNER_WIDTH + "╗")
    for line in lines:
        print("║" + line.center(BANNER_WIDTH) + "║")
    print("╚" + "═" * BANNER_WIDTH + "╝")


def display_welcome(snapshot: GameSnapshot):
    """Prints the welcome banner naming the army the player commands."""
    _banner("WELCOME TO WAR!", "", f"You command the {snapshot.player_color.label.upper()} army")


def display_board_state(snapshot: GameSnapshot):
    """
    Prints every territory as a table row: ID, name, owning army and troops.

    Args:
        snapshot: The GameSnapshot returned by GameSession.snapshot().
    """
    print("\n╔════════╦═════════════════╦════════════════╦════════════╗")
    print("║                       WORLD MAP                        ║")
    print("╠════════╬═════════════════╬════════════════╬════════════╣")
    print("║   ID   ║ Territory       ║ Army           ║ Troops     ║")
    print("╠════════╬═════════════════╬════════════════╬════════════╣")
    for territory in snapshot.territories:
        print(f"║   {territory.index:<4} ║ {territory.name:<15} ║ "
              f"{territory.owner.label:<14} ║ {territory.troops:<10} ║")
    print("╚════════╩═════════════════╩════════════════╩════════════╝")


def display_mission(snapshot: GameSnapshot):
    """Prints the player's secret mission."""
    print("\n┌" + "─" * BANNER_WIDTH + "┐")
    print("│ " + "SECRET MISSION:".ljust(BANNER_WIDTH - 1) + "│")
    print("├" + "─" * BANNER_WIDTH + "┤")
    print(f"│ {snapshot.mission.description}")
    print("└" + "─" * BANNER_WIDTH + "┘")


def display_menu():
    print("\n┌────────────────────────────────────┐")
    print("│             MAIN MENU              │")
    print("├────────────────────────────────────┤")
    print("│ 1 - Attack                         │")
    print("│ 2 - Check victory                  │")
    print("│ 0 - Quit                           │")
    print("└────────────────────────────────────┘")


def display_attack_phase(snapshot: GameSnapshot, owned_indices):
    """Prints the attack phase header, the map and the IDs the player may attack from."""
    _banner("ATTACK PHASE")
    display_board_state(snapshot)
    if owned_indices:
        print(f"\nYour territories: {', '.join(str(i) for i in owned_indices)}")
    else:
        print("\nYou no longer control any territory.")


# Headline printed for each outcome kind, after the dice.
_OUTCOME_HEADLINES = {
    OutcomeKind.INSUFFICIENT_TROOPS: "You need at least 2 troops to attack (1 stays behind in the origin).",
    OutcomeKind.ATTACKER_WINS_SKIRMISH: "✓ ATTACKER WINS!",
    OutcomeKind.TERRITORY_CONQUERED: "✓ ATTACKER WINS!",
    OutcomeKind.DEFENDER_WINS_SKIRMISH: "✗ DEFENDER WINS!",
    OutcomeKind.ORIGIN_LOST_ALL_TROOPS: "✗ DEFENDER WINS!",
    OutcomeKind.DRAW: "= DRAW! No damage was done.",
}


def display_attack_outcome(outcome):
    """
    Prints the battle report for one attack exchange.

    Args:
        outcome: The AttackOutcome returned by GameSession.attack().
    """
    _banner("BATTLE")
    print(f"Attacking territory: {outcome.origin_name} ({outcome.origin_troops_before} troops)")
    print(f"Defending territory: {outcome.destination_name} ({outcome.destination_troops_before} troops)")
    print("\n--- Dice ---")
    print(f"Attacker die: {outcome.attacker_die}")
    print(f"Defender die: {outcome.defender_die}")
    print(f"\n{_OUTCOME_HEADLINES[outcome.kind]}")

    if outcome.kind is OutcomeKind.TERRITORY_CONQUERED:
        print("\n*** TERRITORY CONQUERED! ***")
        print(f"{outcome.destination_name} now belongs to your army!")
    elif outcome.kind is OutcomeKind.ORIGIN_LOST_ALL_TROOPS:
        print(f"\nYou lost every troop in {outcome.origin_name}!")
    elif outcome.kind is OutcomeKind.ATTACKER_WINS_SKIRMISH:
        print(f"{outcome.destination_name} is down to {outcome.destination_troops_after} troops.")
    elif outcome.kind is OutcomeKind.DEFENDER_WINS_SKIRMISH:
        print(f"{outcome.origin_name} is down to {outcome.origin_troops_after} troops.")


def display_error(error):
    print(f"\n{error}")


def display_victory():
    _banner("CONGRATULATIONS! YOU WON!", "Mission accomplished!")


def display_mission_pending():
    print("\nMission not accomplished yet. Keep conquering territories!")


def display_goodbye():
    print("\nThanks for playing! See you next time!")
