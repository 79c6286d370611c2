"""Game session management for Gravity Cube.

Manages a single game's lifecycle including board state, players, seed
management and the background worker that runs AI searches.
"""

import hashlib
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable

import numpy as np

from game.action_result import ActionResult
from game.actions import Action, Placement, Rotation, action_to_str
from game.errors import AiMoveInProgressError, GameAlreadyOverError, NoLegalMovesError
from game.game_config import GameConfig
from game.gravity_game import GravityGame
from game.player_config import PlayerConfig
from game.players import AIGravityPlayer, HumanGravityPlayer
from game.players.ai_gravity_player import fallback_move

logger = logging.getLogger(__name__)

# Extra wait on top of the AI's own time limit before the watchdog fires
WATCHDOG_GRACE = 1.0


class GameSession:
    """Manages a single game's lifecycle (board state, players, current game).

    All mutating calls are serialized by a lock. While an AI turn is pending
    on the worker, human actions are refused with AiMoveInProgressError.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed=None,
        status_reporter: Callable[[str], None] | None = None,
        player1_config: PlayerConfig | None = None,
        player2_config: PlayerConfig | None = None,
        input_fn: Callable[[str], str] | None = None,
    ):
        """Initialize a game session.

        Args:
            config: Game rules (default: classic preset)
            seed: Random seed for reproducibility (auto-generated if None)
            status_reporter: Callback for user-facing status lines (default: print)
            player1_config: Configuration for player 1 (default: human)
            player2_config: Configuration for player 2 (default: medium AI)
            input_fn: Prompt function handed to human players (default: input)
        """
        self.config = config if config is not None else GameConfig.classic()
        self._status_reporter: Callable[[str], None] | None = status_reporter
        self.input_fn = input_fn

        self.player1_config = player1_config if player1_config is not None else PlayerConfig.human()
        self.player2_config = player2_config if player2_config is not None else PlayerConfig.ai()

        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gravity-ai")
        self._pending_ai: Future | None = None
        self._pending_player: int | None = None

        # Seed management
        if seed is None:
            seed = int(time.time())
        self.current_seed = seed
        self._apply_seed(seed)

        self.game: GravityGame | None = None
        self.player1 = None
        self.player2 = None
        self.games_played = 0

        self.init_game()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_game(self, config: GameConfig | None = None):
        """Start a fresh game: empty board, full shift budgets, player 1 to move.

        Every game after the first gets a new seed derived from the previous one.
        """
        with self._lock:
            self._require_no_pending_ai()
            if config is not None:
                self.config = config

            if self.game is not None:
                self.current_seed = self._generate_next_seed()
                self._apply_seed(self.current_seed)

            self._report(f"** New game: {self.config.name} **")
            self.game = GravityGame(self.config)
            self.player1 = self._create_player_from_config(1, self.player1_config)
            self.player2 = self._create_player_from_config(2, self.player2_config)

    def close(self):
        """Stop the AI worker. The session cannot run AI turns afterwards."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _apply_seed(self, seed):
        """Apply a seed to numpy's global random number generator."""
        self._report(f"-- Setting Seed: {seed}")
        np.random.seed(seed % (2**32))

    def _generate_next_seed(self):
        """Generate the next seed deterministically from the current seed using hash.

        Returns:
            int: New seed value
        """
        hash_obj = hashlib.sha256(str(self.current_seed).encode())
        new_seed = int.from_bytes(hash_obj.digest()[:8], byteorder="big")
        return new_seed % (2**32)

    def _create_player_from_config(self, player_num: int, config: PlayerConfig):
        if config.player_type == "human":
            return HumanGravityPlayer(self.game, player_num, input_fn=self.input_fn, reporter=self._report)
        if config.player_type == "ai":
            rng_seed = config.rng_seed
            if rng_seed is None:
                rng_seed = (self.current_seed + player_num) % (2**32)
            return AIGravityPlayer(
                self.game,
                player_num,
                difficulty=config.difficulty,
                depth=config.depth,
                time_limit=config.time_limit,
                rng_seed=rng_seed,
            )
        raise ValueError(f"Unknown player type: {config.player_type}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_config(self) -> GameConfig:
        return self.config

    def get_grid_size(self) -> int:
        return self.config.grid_size

    def get_win_length(self) -> int:
        return self.config.win_length

    def get_board_snapshot(self):
        return self.game.get_board_snapshot()

    def get_gravity_vector(self):
        return self.game.get_gravity_vector()

    def get_cube_orientation(self):
        return self.game.get_cube_orientation()

    def legal_placements_for_current_gravity(self) -> list[Placement]:
        return self.game.legal_placements()

    def get_current_player(self):
        return self.player1 if self.game.current_player == 1 else self.player2

    def is_ai_turn(self) -> bool:
        return not self.game.is_game_over() and self.get_current_player().is_ai

    def is_ai_thinking(self) -> bool:
        return self._pending_ai is not None

    def ai_player_numbers(self) -> frozenset:
        return frozenset(p.n for p in (self.player1, self.player2) if p.is_ai)

    def get_seed(self):
        return self.current_seed

    def get_games_played(self):
        return self.games_played

    def increment_games_played(self):
        self.games_played += 1

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def place(self, x, y, z) -> ActionResult:
        with self._lock:
            self._require_no_pending_ai()
            return self.game.place(x, y, z)

    def rotate(self, rotation=None, axis=None, angle=None) -> ActionResult:
        """Rotate by catalog name (or Rotation), or by axis and angle: ``rotate("z", 90)``."""
        with self._lock:
            self._require_no_pending_ai()
            return self.game.rotate(rotation, axis=axis, angle=angle)

    def apply_action(self, action: Action) -> ActionResult:
        if isinstance(action, Placement):
            return self.place(action.x, action.y, action.z)
        if isinstance(action, Rotation):
            return self.rotate(action)
        raise TypeError(f"Not an action: {action!r}")

    def undo(self):
        """Undo the last move, and the AI's reply before it, so a human is to move."""
        with self._lock:
            self._require_no_pending_ai()
            skip = self.ai_player_numbers()
            # With no human seat there is no one to hand control back to
            if len(skip) == 2:
                skip = frozenset()
            return self.game.undo(skip_players=skip)

    def request_ai_move(self, difficulty: str | None = None) -> Action:
        """Compute, but do not apply, an AI move for the player to move.

        Uses the current player's AI settings when it is an AI seat, otherwise
        a fresh AI with the given difficulty.

        Raises:
            GameAlreadyOverError: If the game has already ended
            NoLegalMovesError: If the player to move has no legal action
        """
        if self.game.is_game_over():
            raise GameAlreadyOverError()
        player = self.get_current_player()
        if not player.is_ai or (difficulty is not None and difficulty != player.difficulty):
            player = AIGravityPlayer(self.game, player.n, difficulty=difficulty or "medium",
                                     rng_seed=self.current_seed)
        return player.choose_move(self.game.state, self.config)

    def start_ai_turn(self) -> Future:
        """Submit the current AI player's search to the worker.

        The search runs on an immutable snapshot; the move is applied by
        finish_ai_turn.
        """
        with self._lock:
            self._require_no_pending_ai()
            if self.game.is_game_over():
                raise GameAlreadyOverError()
            player = self.get_current_player()
            if not player.is_ai:
                raise ValueError(f"{player.name} is not an AI player")
            state = self.game.state
            self._pending_player = player.n
            self._pending_ai = self._executor.submit(player.choose_move, state, self.config)
            return self._pending_ai

    def finish_ai_turn(self, timeout: float | None = None) -> ActionResult | None:
        """Wait for the pending AI search and apply its move.

        If the search outlives ``timeout`` (default: the AI's time limit plus
        a grace period) the first legal placement is played instead.

        Returns:
            The result of the applied move, or None if the AI had no move
        """
        future = self._pending_ai
        if future is None:
            raise ValueError("No AI turn in progress")
        player = self.player1 if self._pending_player == 1 else self.player2
        if timeout is None:
            timeout = player.time_limit + WATCHDOG_GRACE

        try:
            action = future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            action = fallback_move(self.game.state)
            logger.warning("%s did not answer within %.1fs; playing fallback %s",
                           player.name, timeout, action_to_str(action) if action else None)
            self._report(f"{player.name} took too long, playing a fallback move")
            if action is None:
                self._clear_pending_ai()
                logger.error("No fallback move for player %d", player.n)
                return None
        except NoLegalMovesError as e:
            self._clear_pending_ai()
            logger.error("%s", e)
            self._report(f"Error: {e}")
            return None
        except Exception:
            self._clear_pending_ai()
            raise

        with self._lock:
            self._clear_pending_ai()
            return self.apply_action(action)

    def play_ai_turn(self, timeout: float | None = None) -> ActionResult | None:
        """Run one AI turn on the worker and apply it."""
        self.start_ai_turn()
        return self.finish_ai_turn(timeout)

    def _clear_pending_ai(self):
        self._pending_ai = None
        self._pending_player = None

    def _require_no_pending_ai(self):
        if self._pending_ai is not None:
            raise AiMoveInProgressError()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _report(self, message: str | None) -> None:
        if message is None:
            return
        if self._status_reporter is not None:
            self._status_reporter(message)
        else:
            print(message)
