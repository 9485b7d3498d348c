"""Command line front end for a Geocoin game kept in a JSON state file."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from geocoin import __version__
from geocoin.geocache import format_coin
from geocoin.geocoin_logging import DEBUG, INFO, log_to_stderr
from geocoin.session import DIRECTIONS, GameSession
from geocoin.storage import JSONFileStore

DEFAULT_STATE = Path("geocoin_state.json")


def _open_session(args: argparse.Namespace) -> GameSession:
    return GameSession(storage=JSONFileStore(args.state))


def _flush_notices(session: GameSession) -> None:
    for notice in session.notices:
        print(f"[geocoin] {notice}", file=sys.stderr)
    session.notices.clear()


def cmd_status(args: argparse.Namespace) -> int:
    session = _open_session(args)
    cell = session.player_cell
    out = {
        "geocoin_version": __version__,
        "state": str(args.state),
        "location": session.player_location.to_dict(),
        "cell": cell.key,
        "status": session.status(),
        "moves": len(session.movement_history),
    }
    print(json.dumps(out, indent=2))
    return 0


def cmd_look(args: argparse.Namespace) -> int:
    session = _open_session(args)
    caches = session.visible_caches()
    session.save()
    if not caches:
        print("No caches nearby.")
    for cell, cache in caches:
        coins = ", ".join(format_coin(coin) for coin in cache.coins) or "(empty)"
        print(f"Cache at {cell.key}: {coins}")
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    session = _open_session(args)
    dx, dy = DIRECTIONS[args.direction]
    for _ in range(args.steps):
        session.move_player(dx, dy)
    print(f"Now at cell {session.player_cell.key}")
    return 0


def cmd_collect(args: argparse.Namespace) -> int:
    session = _open_session(args)
    coin = session.collect_coin(session.grid[args.i, args.j], args.coin)
    _flush_notices(session)
    if coin is None:
        return 1
    print(f"Collected {coin}. {session.status()}")
    return 0


def cmd_deposit(args: argparse.Namespace) -> int:
    session = _open_session(args)
    coin = session.deposit_coin(session.grid[args.i, args.j], args.coin)
    _flush_notices(session)
    if coin is None:
        return 1
    print(f"Deposited {format_coin(coin)}. {session.status()}")
    return 0


def cmd_inventory(args: argparse.Namespace) -> int:
    session = _open_session(args)
    print("Inventory")
    for coin_id in session.inventory:
        print(f"  {coin_id}")
    print(session.status())
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    if not args.yes:
        answer = input("Are you sure you want to erase your game state? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            return 1
    session = _open_session(args)
    session.reset()
    print("Game state erased.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="geocoin", description="Geocoin collection game")
    p.add_argument("--version", action="version", version=f"geocoin {__version__}")
    p.add_argument(
        "--state", type=Path, default=DEFAULT_STATE, help="path of the JSON state file"
    )
    p.add_argument(
        "-v", "--verbose", action="count", default=0, help="log to stderr (-vv for debug)"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("status", help="show player location and coin count")
    s.set_defaults(func=cmd_status)

    s = sub.add_parser("look", help="list caches around the player")
    s.set_defaults(func=cmd_look)

    s = sub.add_parser("move", help="move the player one tile per step")
    s.add_argument("direction", choices=sorted(DIRECTIONS))
    s.add_argument("--steps", type=int, default=1)
    s.set_defaults(func=cmd_move)

    for name, func, text in (
        ("collect", cmd_collect, "take a coin from the cache in cell I,J"),
        ("deposit", cmd_deposit, "put a coin into the cache in cell I,J"),
    ):
        s = sub.add_parser(name, help=text)
        s.add_argument("i", type=int)
        s.add_argument("j", type=int)
        s.add_argument("--coin", default=None, help="coin id, defaults to the last one")
        s.set_defaults(func=func)

    s = sub.add_parser("inventory", help="list the coins held")
    s.set_defaults(func=cmd_inventory)

    s = sub.add_parser("reset", help="erase all game state")
    s.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    s.set_defaults(func=cmd_reset)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        log_to_stderr(DEBUG if args.verbose > 1 else INFO)
    return int(args.func(args))
