from __future__ import annotations

import queue
from typing import Callable

from game.actions import Action, str_to_action
from game.gravity_game import GravityGame
from game.players.gravity_player import GravityPlayer

# Sentinel actions understood by the controller, not by the rules engine
UNDO = "UNDO"
QUIT = "QUIT"

PROMPT_HELP = "Commands: place x y z | rotate <roll_left|roll_right|tilt_forward|tilt_back|flip> | undo | quit"


class HumanGravityPlayer(GravityPlayer):
    """Human seat fed either programmatically or from text input.

    Queued actions (``submit_action``) are served first; once the queue is
    empty the player prompts through ``input_fn`` until it reads a command
    that parses.
    """

    def __init__(self, game: GravityGame, n, input_fn: Callable[[str], str] | None = None,
                 reporter: Callable[[str], None] | None = None):
        super().__init__(game, n)
        self._action_queue: queue.Queue = queue.Queue()
        self.input_fn = input_fn if input_fn is not None else input
        self.reporter = reporter if reporter is not None else print

    def submit_action(self, action):
        """Queue an action, a command string, UNDO or QUIT."""
        self._action_queue.put(action)

    def cancel_pending_action(self):
        while True:
            try:
                self._action_queue.get_nowait()
            except queue.Empty:
                break

    def has_pending_action(self) -> bool:
        return not self._action_queue.empty()

    def get_action(self) -> Action | str | None:
        try:
            pending = self._action_queue.get_nowait()
        except queue.Empty:
            pending = None
        if isinstance(pending, str):
            try:
                return parse_command(pending)
            except ValueError as e:
                self._report_bad_command(e)
        elif pending is not None:
            return pending

        while True:
            try:
                line = self.input_fn(f"{self.name}> ")
            except EOFError:
                return QUIT
            try:
                return parse_command(line)
            except ValueError as e:
                self._report_bad_command(e)

    def _report_bad_command(self, error):
        self.reporter(str(error))
        self.reporter(PROMPT_HELP)


def parse_command(text: str) -> Action | str:
    """Parse a typed command into an action, UNDO or QUIT.

    Raises:
        ValueError: If the command is not understood
    """
    words = text.strip().split()
    if not words:
        raise ValueError("Empty command")
    verb = words[0].lower()
    if verb == "undo" and len(words) == 1:
        return UNDO
    if verb in ("quit", "exit") and len(words) == 1:
        return QUIT
    return str_to_action(text)
