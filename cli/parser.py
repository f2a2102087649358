# cli/parser.py
# Functions for turning raw console lines into menu choices and territory indices.

from enum import IntEnum


class MenuChoice(IntEnum):
    QUIT = 0
    ATTACK = 1
    CHECK_VICTORY = 2


def parse_int(text, what="number"):
    """
    Parses a whole number typed by the player.
    Raises ValueError when the line is empty or not an integer.
    """
    text = text.strip()
    if not text:
        raise ValueError(f"Please type a {what}.")
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"'{text}' is not a valid {what}.") from None


def parse_menu_choice(text):
    """Parses the main menu selector (1 = attack, 2 = check victory, 0 = quit)."""
    value = parse_int(text, "menu option")
    try:
        return MenuChoice(value)
    except ValueError:
        raise ValueError(f"Invalid option: {value}.") from None


def parse_territory_index(text):
    """
    Parses a territory ID. Only the number format is checked here; whether the
    territory exists is up to the game session, which raises IndexOutOfRange.
    """
    return parse_int(text, "territory ID")
