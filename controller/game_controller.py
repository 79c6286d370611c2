"""Game controller for Gravity Cube.

Drives the turn loop for a session: asks the player to move for an action,
applies it, prints the cube, and starts the next game until the game limit.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from game.actions import action_to_str
from game.constants import DRAW, PLAYER_1_WIN, PLAYER_2_WIN
from game.errors import GravityGameError, NoHistoryToUndoError
from game.game_config import GameConfig
from game.player_config import PlayerConfig
from game.players.human_gravity_player import QUIT, UNDO
from game.utils.board_diagram import format_player_name
from controller.game_session import GameSession

logger = logging.getLogger(__name__)


class GravityGameController:
    def __init__(
        self,
        config: GameConfig | None = None,
        seed=None,
        max_games=1,
        player1_config: PlayerConfig | None = None,
        player2_config: PlayerConfig | None = None,
        input_fn: Callable[[str], str] | None = None,
        status_reporter: Callable[[str], None] | None = None,
        show_board=True,
    ):
        self.max_games = max_games  # None means play indefinitely
        self.show_board = show_board
        self._status_reporter = status_reporter

        # Statistics tracking
        self.game_stats = []  # List of game durations in seconds
        self.win_loss_stats = {PLAYER_1_WIN: 0, PLAYER_2_WIN: 0, DRAW: 0}
        self.current_game_start_time = None
        self.quit_requested = False

        self.session = GameSession(
            config=config,
            seed=seed,
            status_reporter=self._report,
            player1_config=player1_config,
            player2_config=player2_config,
            input_fn=input_fn,
        )

    def run(self):
        """Play games until the game limit is reached or a human quits.

        Returns:
            dict: Win/draw counts keyed by PLAYER_1_WIN, PLAYER_2_WIN and DRAW
        """
        try:
            self.current_game_start_time = time.time()
            if self.show_board:
                self.session.game.print_state(self._report)
            while not self.quit_requested:
                if self.session.game.is_game_over():
                    self._finish_game()
                    if self._games_exhausted():
                        break
                    self.session.init_game()
                    self.current_game_start_time = time.time()
                    continue
                self.play_turn()
        finally:
            self.session.close()
        return dict(self.win_loss_stats)

    def play_turn(self):
        """Ask the player to move for one action and apply it."""
        player = self.session.get_current_player()
        player.on_turn_start()
        try:
            if player.is_ai:
                result = self.session.play_ai_turn()
                if result is None:
                    # The AI had no move in a live position; nothing sensible to continue with
                    self.quit_requested = True
                    return
            else:
                action = player.get_action()
                if action == QUIT or action is None:
                    self._report(f"{player.name} quit the game")
                    self.quit_requested = True
                    return
                if action == UNDO:
                    self._undo()
                    return
                try:
                    result = self.session.apply_action(action)
                except GravityGameError as e:
                    self._report(f"Invalid move: {e}")
                    return
        finally:
            player.clear_context()

        self._report(f"{player.name}: {action_to_str(result.action)}")
        if self.show_board:
            self.session.game.print_state(self._report)

    def _undo(self):
        try:
            self.session.undo()
        except NoHistoryToUndoError as e:
            self._report(str(e))
            return
        self._report("Move undone")
        if self.show_board:
            self.session.game.print_state(self._report)

    def _finish_game(self):
        outcome = self.session.game.outcome
        self.session.increment_games_played()
        self.win_loss_stats[outcome.winner] += 1
        if self.current_game_start_time is not None:
            self.game_stats.append(time.time() - self.current_game_start_time)

        self._report(f"Game over: {outcome}")
        for player, lines in ((1, outcome.player1_lines), (2, outcome.player2_lines)):
            for line in lines:
                self._report(f"  {format_player_name(player)} line: {' '.join(map(str, line))}")
        logger.info("Game %d finished: %s", self.session.get_games_played(), outcome)

    def _games_exhausted(self):
        return self.max_games is not None and self.session.get_games_played() >= self.max_games

    def _report(self, message: str | None) -> None:
        if message is None:
            return
        if self._status_reporter is not None:
            self._status_reporter(message)
        else:
            print(message)
