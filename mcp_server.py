"""Battleship MCP server: the game as tools for AI-agent clients.

Run over stdio (default), SSE or streamable HTTP:

    python mcp_server.py --transport stdio
    python mcp_server.py --transport sse              # GET /sse, POST /messages/
    python mcp_server.py --transport streamable-http  # /mcp

Sessions for the HTTP transports are owned by the SDK's session manager.
Every tool returns {"success": true, ...} or {"success": false, "error": ...}.
"""

import argparse
import logging
import sys
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

import config
from models import Coordinate, FireResponse, GameStateResponse, ShipModel
from services import game_service
from stores import BattleshipError, StoreError, get_game_store

# Route logs to stderr so they don't corrupt stdio JSON-RPC
logger = logging.getLogger("battleship_mcp")

mcp = FastMCP("battleship", host=config.MCP_HOST, port=config.MCP_PORT)


def _error(exc: BattleshipError) -> dict[str, Any]:
    if isinstance(exc, StoreError):
        logger.error(f"Store failure: {exc}", exc_info=exc)
    else:
        logger.info(f"Tool call rejected: {exc.__class__.__name__}: {exc}")
    return {"success": False, "error": str(exc)}


@mcp.tool()
async def create_game(name: Annotated[str, Field(description="Your player name")]) -> dict[str, Any]:
    """Create a new battleship game. Returns a game code to share with your opponent and a player token for authentication."""
    store = await get_game_store()
    try:
        game, player = await game_service.create_game(store, name)
    except BattleshipError as exc:
        return _error(exc)
    return {
        "success": True,
        "gameCode": game.code,
        "playerToken": player.token,
        "message": f"Game created! Share code {game.code} with your opponent.",
    }


@mcp.tool()
async def join_game(
    code: Annotated[str, Field(description="The 6-character game code")],
    name: Annotated[str, Field(description="Your player name")],
) -> dict[str, Any]:
    """Join an existing battleship game using a game code."""
    store = await get_game_store()
    try:
        game, player = await game_service.join_game(store, code, name)
    except BattleshipError as exc:
        return _error(exc)
    return {
        "success": True,
        "gameCode": game.code,
        "playerToken": player.token,
        "message": f"Joined game {game.code}. Both players can now place ships.",
    }


@mcp.tool()
async def get_game_state(
    player_token: Annotated[str, Field(description="Your player token from create_game or join_game")],
) -> dict[str, Any]:
    """Get the current state of your battleship game including your board, shots fired, and whether it's your turn."""
    store = await get_game_store()
    try:
        state = await game_service.get_game_state(store, player_token)
    except BattleshipError as exc:
        return _error(exc)
    return {"success": True, **GameStateResponse.from_domain(state).model_dump(by_alias=True, mode="json")}


@mcp.tool()
async def place_ships(
    player_token: Annotated[str, Field(description="Your player token")],
    ships: Annotated[list[ShipModel], Field(description="Array of 5 ships with their positions")],
) -> dict[str, Any]:
    """Place your ships on the board.

    Ships required: Carrier (5), Battleship (4), Cruiser (3), Submarine (3),
    Destroyer (2). Each ship needs positions as {x, y} coordinates (0-9).
    Ships must be in a straight line (horizontal or vertical) and cannot overlap.
    """
    store = await get_game_store()
    try:
        started = await game_service.place_ships(store, player_token, [s.to_domain() for s in ships])
    except BattleshipError as exc:
        return _error(exc)
    message = "Ships placed successfully. The game has started." if started else \
        "Ships placed successfully. Waiting for opponent to place ships."
    return {"success": True, "gameStarted": started, "message": message}


@mcp.tool()
async def fire(
    player_token: Annotated[str, Field(description="Your player token")],
    x: Annotated[int, Field(description="X coordinate to fire at (0-9)")],
    y: Annotated[int, Field(description="Y coordinate to fire at (0-9)")],
) -> dict[str, Any]:
    """Fire at a position on your opponent's board. Coordinates are 0-9 for both x and y."""
    store = await get_game_store()
    try:
        result = await game_service.fire(store, player_token, Coordinate(x, y))
    except BattleshipError as exc:
        return _error(exc)
    return {"success": True, **FireResponse.from_domain(result).model_dump(by_alias=True)}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Battleship MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="MCP transport to serve (default: stdio)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    if args.transport != "stdio":
        logger.info(f"Battleship MCP server ({args.transport}) on {config.MCP_HOST}:{config.MCP_PORT}")
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
