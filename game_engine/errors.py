# game_engine/errors.py
# Exceptions raised by the engine for commands the shell should reject and re-prompt.


class GameError(Exception):
    """Base class for every error the game engine raises."""


class AttackError(GameError, ValueError):
    """An attack command that cannot be carried out. Nothing on the map changed."""


class IndexOutOfRange(AttackError, IndexError):
    def __init__(self, index, size):
        super().__init__(f"Territory {index!r} does not exist (choose 0-{size - 1}).")
        self.index = index


class NotYourTerritory(AttackError):
    def __init__(self, territory_name, player_color):
        super().__init__(f"You do not control {territory_name} (your army is {player_color.label}).")
        self.territory_name = territory_name


class SelfAttack(AttackError):
    def __init__(self, territory_name):
        super().__init__(f"{territory_name} cannot attack itself.")
        self.territory_name = territory_name


class GameOverError(GameError):
    """Raised when a command reaches a session that has already been won or quit."""
