"""Main entry point for Gravity Cube."""

import argparse
import logging

from controller.game_controller import GravityGameController
from game.game_config import GAME_MODES, GameConfig
from game.player_config import parse_player_spec


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Gravity Cube: 3D connect-N with shifting gravity",
        epilog="""
Player Configuration:
  Use --player1 and --player2 to configure each player with the format:
    TYPE[:PARAM=VALUE,PARAM=VALUE,...]

  Types:
    human           - Text commands typed at the prompt
    ai              - Heuristic minimax opponent

  AI Parameters (examples):
    difficulty=X    - easy (random), medium (1 ply) or hard (2 plies)
    depth=N         - Override the search depth
    time_limit=S    - Max thinking time per move (default: 10)
    seed=N          - Random seed for reproducibility

  Human commands:
    place x y z | rotate <roll_left|roll_right|tilt_forward|tilt_back|flip> | undo | quit

  Examples:
    --player1 human --player2 ai:difficulty=hard
    --mode tiny_cube --player1 ai:difficulty=easy --player2 ai --games 10
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--mode",
        choices=sorted(GAME_MODES),
        default="classic",
        help="Game preset (default: classic)",
    )
    parser.add_argument(
        "--player1",
        type=str,
        default="human",
        metavar="SPEC",
        help="Player 1 configuration (default: human). See --help for format."
    )
    parser.add_argument(
        "--player2",
        type=str,
        default="ai",
        metavar="SPEC",
        help="Player 2 configuration (default: ai). See --help for format."
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible games",
    )
    parser.add_argument(
        "--games", type=int, default=1, help="Number of games to play (default: 1, 0 = play indefinitely)"
    )
    parser.add_argument(
        "--no-board",
        action="store_true",
        help="Do not print the cube after every move",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        player1_config = parse_player_spec(args.player1)
        player2_config = parse_player_spec(args.player2)
    except ValueError as e:
        parser.error(str(e))

    controller = GravityGameController(
        config=GameConfig.from_mode(args.mode),
        seed=args.seed,
        max_games=args.games if args.games > 0 else None,
        player1_config=player1_config,
        player2_config=player2_config,
        show_board=not args.no_board,
    )
    stats = controller.run()

    if controller.session.get_games_played() > 1:
        print(f"Player 1 wins: {stats[1]}  Player 2 wins: {stats[2]}  Draws: {stats[0]}")


if __name__ == "__main__":
    main()
