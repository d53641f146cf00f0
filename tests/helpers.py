"""Fleet builders shared by the test modules."""

from models.domain_models import Coordinate, Ship


def make_ship(name: str, cells: list[tuple[int, int]], size: int | None = None) -> Ship:
    return Ship(name, len(cells) if size is None else size, tuple(Coordinate(x, y) for x, y in cells))


def standard_fleet() -> list[Ship]:
    """A legal fleet: every ship horizontal, one per row from the top."""
    return [
        make_ship("Carrier", [(x, 0) for x in range(5)]),
        make_ship("Battleship", [(x, 1) for x in range(4)]),
        make_ship("Cruiser", [(x, 2) for x in range(3)]),
        make_ship("Submarine", [(x, 3) for x in range(3)]),
        make_ship("Destroyer", [(x, 4) for x in range(2)]),
    ]


def fleet_cells(fleet: list[Ship]) -> list[Coordinate]:
    return [p for ship in fleet for p in ship.positions]


def fleet_payload(fleet: list[Ship]) -> list[dict]:
    """The fleet as JSON for the REST and MCP surfaces."""
    return [ship.to_dict() for ship in fleet]
