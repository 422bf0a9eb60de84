import argparse
import re

from check10.config import configure_logging
from check10.core.board import BLACK, WHITE, Move
from check10.main import Engine

_MOVE_RE = re.compile(r"^\s*(\d)\D*(\d)\D+(\d)\D*(\d)\s*$")


def parse_move(text: str):
    """Parse "fromRow fromCol toRow toCol", e.g. "6 0 5 0" or "60 50"."""
    m = _MOVE_RE.match(text)
    if not m:
        return None
    return Move(*(int(g) for g in m.groups()))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Check10 against the engine")
    parser.add_argument("--human", choices=["white", "black", "none"], default="white")
    parser.add_argument("--time-ms", type=int, default=2000)
    parser.add_argument("--max-moves", type=int, default=200)
    args = parser.parse_args(argv)

    configure_logging()
    engine = Engine(time_limit_ms=args.time_ms)
    moves_played = 0

    while not engine.state.game_over and moves_played < args.max_moves:
        engine.print_board()
        print("----------------------------")

        if engine.state.current_player == args.human:
            move = parse_move(input("Enter your move (row col row col, e.g. 6 0 5 0): "))
            if move is None or not engine.make_move(move):
                print("Illegal move, try again.")
                continue
        else:
            result = engine.play_best_move()
            if result.move is None:
                break
            print(f"Engine plays: {result.move} | depth {result.depth} | eval {result.value:.2f}")
        moves_played += 1

    engine.print_board()
    print("Game Over")
    state = engine.state
    if state.white_score == state.black_score:
        print(f"Draw {state.white_score}-{state.black_score}")
    else:
        winner = WHITE if state.white_score > state.black_score else BLACK
        print(f"{winner} wins {state.white_score}-{state.black_score}")


if __name__ == "__main__":
    main()
