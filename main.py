# main.py
# Main application entry point and game loop.
# The console drives the game; a board visualiser may optionally watch over a websocket.

import asyncio
import json
import logging

import websockets

import war_config
from game_engine.errors import GameError
from game_engine.gamestate import GameSession
from cli.parser import MenuChoice, parse_menu_choice, parse_territory_index
from cli.display import (display_welcome, display_board_state, display_mission, display_menu,
                         display_attack_phase, display_attack_outcome, display_error,
                         display_victory, display_mission_pending, display_goodbye)

logger = logging.getLogger(__name__)


class Game:
    """
    Runs one GameSession from the console and mirrors every change to any
    connected visualiser. Visualisers only watch; commands come from the
    console alone.
    """
    def __init__(self, session, input_fn=input):
        self.session = session
        self.input_fn = input_fn
        self.connected_clients = set()

    async def register(self, websocket):
        """Registers a visualiser, sends it the current board and waits until it disconnects."""
        self.connected_clients.add(websocket)
        logger.info("Visualiser connected. Total connections: %d", len(self.connected_clients))
        try:
            await websocket.send(json.dumps(
                {"type": "initial_state", "state": self.session.snapshot().to_dict()}))
            await websocket.wait_closed()
        finally:
            self.connected_clients.discard(websocket)
            logger.info("Visualiser disconnected. Total connections: %d", len(self.connected_clients))

    async def broadcast(self, message):
        """Sends a message to every connected visualiser."""
        if not self.connected_clients:
            return
        payload = json.dumps(message)
        clients = list(self.connected_clients)
        results = await asyncio.gather(*(client.send(payload) for client in clients), return_exceptions=True)
        for client, result in zip(clients, results):
            # A viewer that drops mid-send is removed by its own register() call.
            if isinstance(result, Exception):
                logger.warning("Could not send %s to visualiser %r: %s", message.get("type"), client, result)

    async def prompt(self, text):
        # input() blocks, so it runs in a worker thread to keep the websocket server responsive.
        return await asyncio.to_thread(self.input_fn, text)

    async def pause(self):
        await self.prompt("Press ENTER to continue...")

    async def run_attack(self):
        """Asks for origin and destination, resolves the attack and reports it."""
        session = self.session
        display_attack_phase(session.snapshot(), session.world_map.owned_indices(session.player_color))
        try:
            origin = parse_territory_index(await self.prompt("\nOrigin territory ID (your army): "))
            session.check_origin(origin)
            destination = parse_territory_index(await self.prompt("\nDestination territory ID (enemy): "))
            outcome = session.attack(origin, destination)
        except (GameError, ValueError) as e:
            display_error(e)
            await self.pause()
            return

        display_attack_outcome(outcome)
        await self.broadcast({
            "type": "attack_result",
            "outcome": outcome.to_dict(),
            "state": session.snapshot().to_dict(),
        })
        await self.pause()

    async def run_victory_check(self):
        won = self.session.check_victory()
        await self.broadcast({"type": "victory_check", "won": won})
        if won:
            display_victory()
        else:
            display_mission_pending()
            await self.pause()

    async def handle_choice(self, choice):
        if choice is MenuChoice.ATTACK:
            await self.run_attack()
        elif choice is MenuChoice.CHECK_VICTORY:
            await self.run_victory_check()
        else:
            self.session.quit()
            display_goodbye()

    async def game_loop(self):
        """Main game loop: show the board, read a menu option, act, until the game is won or quit."""
        display_welcome(self.session.snapshot())
        try:
            while not self.session.is_over:
                snapshot = self.session.snapshot()
                display_board_state(snapshot)
                display_mission(snapshot)
                display_menu()
                try:
                    choice = parse_menu_choice(await self.prompt("\nChoose an option: "))
                except ValueError as e:
                    display_error(e)
                    await self.pause()
                    continue
                await self.handle_choice(choice)
        except EOFError:
            # Console input closed: leave as if the player chose to quit.
            self.session.quit()
            display_goodbye()
        await self.broadcast({"type": "game_over", "status": self.session.status.value})


async def main():
    logging.basicConfig(level=war_config.LOG_LEVEL)
    session = GameSession.new_game(seed=war_config.RANDOM_SEED)
    game = Game(session)

    if not war_config.VISUALISER_ENABLED:
        await game.game_loop()
        return

    print(f"WebSocket server started on ws://{war_config.VISUALISER_HOST}:{war_config.VISUALISER_PORT}")
    async with websockets.serve(game.register, war_config.VISUALISER_HOST, war_config.VISUALISER_PORT):
        await game.game_loop()


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")


if __name__ == "__main__":
    # To run the application from the project root:
    #   pip install -e .
    #   python main.py        (or: WAR_VISUALISER=1 python main.py)
    run()
