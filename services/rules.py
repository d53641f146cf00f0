"""
Battleship rules: board geometry, fleet placement validation and shot resolution.

Everything here is pure. Sunk ships and game-over are always derived from a
defending board plus the attacker's shot log, never stored.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from models.domain_models import Coordinate, Ship, Shot


BOARD_SIZE = 10

# Canonical fleet, one ship per name
SHIPS: tuple[tuple[str, int], ...] = (
    ("Carrier", 5),
    ("Battleship", 4),
    ("Cruiser", 3),
    ("Submarine", 3),
    ("Destroyer", 2),
)


@dataclass(frozen=True)
class PlacementResult:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class ShotOutcome:
    hit: bool
    sunk: str | None
    game_over: bool


def is_valid_coordinate(coord: Coordinate) -> bool:
    return 0 <= coord.x < BOARD_SIZE and 0 <= coord.y < BOARD_SIZE


def is_straight_line(positions: Sequence[Coordinate]) -> bool:
    """True if `positions` form one horizontal or vertical run with no gaps."""
    if len(positions) <= 1:
        return True

    ordered = sorted(positions, key=lambda p: (p.x, p.y))
    first = ordered[0]
    horizontal = all(p.y == first.y for p in ordered)
    vertical = all(p.x == first.x for p in ordered)
    if not horizontal and not vertical:
        return False

    for prev, curr in zip(ordered, ordered[1:]):
        if horizontal and curr.x != prev.x + 1:
            return False
        if vertical and curr.y != prev.y + 1:
            return False
    return True


def validate_placement(ships: Sequence[Ship]) -> PlacementResult:
    """Check a candidate fleet against the fixed fleet and board geometry.

    Checks run in a fixed order and the first failure is reported:
    fleet size, per-ship size / position count / bounds / shape (largest
    ship first), then overlap across the whole fleet.
    """
    if len(ships) != len(SHIPS):
        return PlacementResult(False, f"Must place exactly {len(SHIPS)} ships")

    expected = sorted(SHIPS, key=lambda s: s[1], reverse=True)
    provided = sorted(ships, key=lambda s: s.size, reverse=True)
    provided_sizes = [s.size for s in provided]

    for (expected_name, expected_size), ship in zip(expected, provided):
        if expected_size not in provided_sizes:
            return PlacementResult(False, f"Missing ship: {expected_name}")

        if ship.size != expected_size:
            return PlacementResult(
                False,
                f"Ship {ship.name} has wrong size. Expected {expected_size}, got {ship.size}",
            )

        if len(ship.positions) != ship.size:
            return PlacementResult(False, f"Ship {ship.name} must have {ship.size} positions")

        for pos in ship.positions:
            if not is_valid_coordinate(pos):
                return PlacementResult(
                    False, f"Ship {ship.name} has invalid position: ({pos.x}, {pos.y})"
                )

        if not is_straight_line(ship.positions):
            return PlacementResult(False, f"Ship {ship.name} must be placed in a straight line")

    all_positions = [p for s in ships for p in s.positions]
    if len(set(all_positions)) != len(all_positions):
        return PlacementResult(False, "Ships cannot overlap")

    return PlacementResult(True)


# -------------------------------------------------
# Shot resolution
# -------------------------------------------------

def _hit_cells(shots: Iterable[Shot]) -> set[Coordinate]:
    return {s.coordinate for s in shots if s.hit}


def is_hit(board: Iterable[Ship], target: Coordinate) -> bool:
    return any(ship.covers(target) for ship in board)


def _is_sunk(ship: Ship, hits: set[Coordinate]) -> bool:
    return all(pos in hits for pos in ship.positions)


def sunk_ship(board: Iterable[Ship], shots: Iterable[Shot], target: Coordinate) -> str | None:
    """Name of the ship containing `target` if `shots` now cover all of it."""
    hits = _hit_cells(shots)
    for ship in board:
        if ship.covers(target) and _is_sunk(ship, hits):
            return ship.name
    return None


def all_ships_sunk(board: Sequence[Ship], shots: Iterable[Shot]) -> bool:
    hits = _hit_cells(shots)
    return all(_is_sunk(ship, hits) for ship in board)


def count_sunk_ships(board: Iterable[Ship], shots: Iterable[Shot]) -> int:
    hits = _hit_cells(shots)
    return sum(1 for ship in board if _is_sunk(ship, hits))


def resolve_shot(board: Sequence[Ship], shots: Sequence[Shot], target: Coordinate) -> ShotOutcome:
    """Resolve `target` against `board`.

    `shots` is the attacker's full history and must already contain the shot
    at `target`.
    """
    return ShotOutcome(
        hit=is_hit(board, target),
        sunk=sunk_ship(board, shots, target),
        game_over=all_ships_sunk(board, shots),
    )


def describe_shot(outcome: ShotOutcome) -> str:
    message = "Hit!" if outcome.hit else "Miss!"
    if outcome.sunk:
        message += f" You sunk their {outcome.sunk}!"
    if outcome.game_over:
        message += " Game over - you win!"
    return message
