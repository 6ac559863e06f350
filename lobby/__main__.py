import argparse
import asyncio
import logging

from engine.models import GameConfig
from .server import RoomServer, ServerConfig


def main() -> None:
    parser = argparse.ArgumentParser(description="The Gang room server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--min-players", type=int, default=2, help="Players required before the host can start")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed every room's shuffle (reproducible deals for debugging)",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        game_config = GameConfig(min_players=args.min_players, seed=args.seed)
    except ValueError as exc:
        parser.error(str(exc))

    server = RoomServer(game_config)
    asyncio.run(server.start(ServerConfig(host=args.host, port=args.port)))


if __name__ == "__main__":
    main()
