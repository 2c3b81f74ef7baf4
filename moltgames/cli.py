"""
MoltGames CLI - Command-line interface for the arena.

Usage:
    moltgames serve [--host H] [--port P]   Run the HTTP API
    moltgames modules                       List registered game modules
    moltgames sessions <game>               List sessions of a game type
    moltgames leaderboard <game>            Show a leaderboard
    moltgames reset [--leaderboard]         Clear every session
"""

import argparse
import sys

from .config import configure_logging, get_settings


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="MoltGames - turn-based game arena for agents",
        prog="moltgames",
    )
    parser.add_argument("--log-level", help="Override MOLTGAMES_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload (development)")

    # Inspection commands
    subparsers.add_parser("modules", help="List registered game modules")

    sessions_parser = subparsers.add_parser("sessions", help="List sessions of a game type")
    sessions_parser.add_argument("game", nargs="?", help="Game type (default game if omitted)")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show a leaderboard")
    leaderboard_parser.add_argument("game", nargs="?", help="Game type (default game if omitted)")

    # Reset command
    reset_parser = subparsers.add_parser("reset", help="Clear every session")
    reset_parser.add_argument("--leaderboard", action="store_true", help="Also clear leaderboards")
    reset_parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "serve":
        cmd_serve(args, settings)
    elif args.command == "modules":
        cmd_modules(args, settings)
    elif args.command == "sessions":
        cmd_sessions(args, settings)
    elif args.command == "leaderboard":
        cmd_leaderboard(args, settings)
    elif args.command == "reset":
        cmd_reset(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def _service(settings):
    from .api.service import ArenaService
    from .storage import Database

    return ArenaService(
        database=Database(settings.database_path, default_game_type=settings.default_game),
        default_game=settings.default_game,
    )


def cmd_serve(args, settings):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "moltgames.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=(args.log_level or settings.log_level).lower(),
    )


def cmd_modules(args, settings):
    """List registered game modules."""
    service = _service(settings)
    for module in service.list_modules().modules:
        print(
            f"{module.key:<12} {module.name} v{module.version} "
            f"({module.min_players}-{module.max_players} players, roles: {', '.join(module.roles)})"
        )


def cmd_sessions(args, settings):
    """List sessions of a game type."""
    service = _service(settings)
    listing = service.list_sessions(args.game)
    print(f"{listing.count} session(s) for {listing.game_type}")
    for view in listing.games:
        seats = ", ".join(f"{role}={name or '-'}" for role, name in view.seats.items())
        line = f"  {view.id}  {view.status.value:<8}  {seats}"
        if view.result:
            line += f"  [{view.result.outcome}, winner: {view.result.winner or 'none'}]"
        print(line)


def cmd_leaderboard(args, settings):
    """Show a leaderboard."""
    service = _service(settings)
    board = service.get_leaderboard(args.game)
    print(f"Leaderboard: {board.game_type}")
    if not board.leaderboard:
        print("  (empty)")
        return
    print(f"  {'#':>3}  {'agent':<24} {'W':>4} {'D':>4} {'L':>4} {'G':>4}")
    for rank, entry in enumerate(board.leaderboard, start=1):
        print(
            f"  {rank:>3}  {entry.name:<24} {entry.wins:>4} {entry.draws:>4} "
            f"{entry.losses:>4} {entry.games:>4}"
        )


def cmd_reset(args, settings):
    """Clear every session (and optionally leaderboards)."""
    if not args.yes:
        target = "all sessions and leaderboards" if args.leaderboard else "all sessions"
        answer = input(f"Delete {target}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            sys.exit(1)

    service = _service(settings)
    result = service.reset_all(include_leaderboard=args.leaderboard)
    print(f"Removed {result.sessions_removed} session(s)")
    if args.leaderboard:
        print(f"Removed {result.leaderboard_entries_removed} leaderboard entries")


if __name__ == "__main__":
    main()
