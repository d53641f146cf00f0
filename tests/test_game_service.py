"""Lifecycle and turn-order tests for the game state machine."""

import asyncio

import pytest

from models.domain_models import Coordinate, GameStatus, Slot
from services import game_service
from stores import (
    AlreadyFired,
    CannotPlaceShips,
    GameNotFound,
    GameNotInProgress,
    GameNotJoinable,
    InvalidCoordinate,
    InvalidName,
    InvalidPlacement,
    InvalidState,
    InvalidToken,
    NotYourTurn,
)
from utils.validation import is_valid_code
from tests.helpers import fleet_cells, make_ship, standard_fleet


async def _start_game(store):
    """Create, join and place both fleets. Returns (code, token1, token2)."""
    game, p1 = await game_service.create_game(store, "Alice")
    _, p2 = await game_service.join_game(store, game.code, "Bob")
    await game_service.place_ships(store, p1.token, standard_fleet())
    await game_service.place_ships(store, p2.token, standard_fleet())
    return game.code, p1.token, p2.token


def test_generated_codes_avoid_ambiguous_characters() -> None:
    for _ in range(200):
        code = game_service.generate_game_code()
        assert len(code) == 6
        assert is_valid_code(code)
        assert not set(code) & set("IO01")


def test_create_game(run_with_store) -> None:
    async def scenario(store):
        game, player = await game_service.create_game(store, "  Alice  ")
        return game, player, await store.get_players_by_game(game.id)

    game, player, players = run_with_store(scenario)
    assert game.status is GameStatus.WAITING
    assert is_valid_code(game.code)
    assert player.slot is Slot.PLAYER1
    assert player.name == "Alice"
    assert player.token
    assert [p.id for p in players] == [player.id]


@pytest.mark.parametrize("name", ["", "   ", "x" * 51, "<script>"])
def test_create_game_rejects_bad_names(run_with_store, name) -> None:
    async def scenario(store):
        await game_service.create_game(store, name)

    with pytest.raises(InvalidName):
        run_with_store(scenario)


def test_join_game_moves_to_placing(run_with_store) -> None:
    async def scenario(store):
        game, _ = await game_service.create_game(store, "Alice")
        joined, p2 = await game_service.join_game(store, game.code.lower(), "Bob")
        return game, joined, p2, await store.get_game_by_id(game.id)

    game, joined, p2, stored = run_with_store(scenario)
    assert joined.code == game.code
    assert joined.status is GameStatus.PLACING
    assert stored.status is GameStatus.PLACING
    assert p2.slot is Slot.PLAYER2


def test_join_unknown_code(run_with_store) -> None:
    async def scenario(store):
        await game_service.join_game(store, "ZZZZZZ", "Bob")

    with pytest.raises(GameNotFound):
        run_with_store(scenario)


def test_join_after_start_is_invalid_state(run_with_store) -> None:
    async def scenario(store):
        game, _ = await game_service.create_game(store, "Alice")
        await game_service.join_game(store, game.code, "Bob")
        errors = []
        for _ in range(2):
            try:
                await game_service.join_game(store, game.code, "Carol")
            except InvalidState as exc:
                errors.append(exc)
        return errors, await store.get_players_by_game(game.id)

    errors, players = run_with_store(scenario)
    assert len(errors) == 2
    assert all(isinstance(e, GameNotJoinable) for e in errors)
    assert [p.name for p in players] == ["Alice", "Bob"]


def test_place_ships_before_opponent_joins(run_with_store) -> None:
    async def scenario(store):
        _, p1 = await game_service.create_game(store, "Alice")
        await game_service.place_ships(store, p1.token, standard_fleet())

    with pytest.raises(CannotPlaceShips, match="Cannot place ships at this time"):
        run_with_store(scenario)


def test_place_ships_starts_game_when_both_ready(run_with_store) -> None:
    async def scenario(store):
        game, p1 = await game_service.create_game(store, "Alice")
        _, p2 = await game_service.join_game(store, game.code, "Bob")
        first = await game_service.place_ships(store, p1.token, standard_fleet())
        mid = await store.get_game_by_id(game.id)
        second = await game_service.place_ships(store, p2.token, standard_fleet())
        return first, mid, second, await store.get_game_by_id(game.id)

    first, mid, second, game = run_with_store(scenario)
    assert first is False
    assert mid.status is GameStatus.PLACING
    assert second is True
    assert game.status is GameStatus.PLAYING
    assert game.current_turn is Slot.PLAYER1


def test_invalid_fleet_is_not_stored(run_with_store) -> None:
    async def scenario(store):
        game, p1 = await game_service.create_game(store, "Alice")
        await game_service.join_game(store, game.code, "Bob")
        bad = standard_fleet()[:-1] + [make_ship("Destroyer", [(0, 0), (1, 1)])]
        with pytest.raises(InvalidPlacement, match="straight line"):
            await game_service.place_ships(store, p1.token, bad)
        return await store.get_player_by_token(p1.token)

    player = run_with_store(scenario)
    assert player.board == ()
    assert not player.ready


def test_fleet_cannot_be_replaced(run_with_store) -> None:
    async def scenario(store):
        game, p1 = await game_service.create_game(store, "Alice")
        await game_service.join_game(store, game.code, "Bob")
        await game_service.place_ships(store, p1.token, standard_fleet())
        await game_service.place_ships(store, p1.token, standard_fleet())

    with pytest.raises(CannotPlaceShips, match="already been placed"):
        run_with_store(scenario)


def test_unknown_token(run_with_store) -> None:
    async def scenario(store):
        for call in (
            game_service.get_game_state(store, "nope"),
            game_service.place_ships(store, "nope", standard_fleet()),
            game_service.fire(store, "nope", Coordinate(0, 0)),
        ):
            with pytest.raises(InvalidToken):
                await call

    run_with_store(scenario)


def test_fire_before_playing(run_with_store) -> None:
    async def scenario(store):
        game, p1 = await game_service.create_game(store, "Alice")
        await game_service.fire(store, p1.token, Coordinate(0, 0))

    with pytest.raises(GameNotInProgress):
        run_with_store(scenario)


@pytest.mark.parametrize("x,y", [(10, 0), (-1, 5), (0, 10)])
def test_fire_out_of_bounds(run_with_store, x, y) -> None:
    async def scenario(store):
        _, t1, _ = await _start_game(store)
        await game_service.fire(store, t1, Coordinate(x, y))

    with pytest.raises(InvalidCoordinate):
        run_with_store(scenario)


def test_turns_alternate(run_with_store) -> None:
    async def scenario(store):
        code, t1, t2 = await _start_game(store)
        with pytest.raises(NotYourTurn):
            await game_service.fire(store, t2, Coordinate(9, 9))

        miss = await game_service.fire(store, t1, Coordinate(9, 9))
        after_p1 = await store.get_game_by_code(code)
        with pytest.raises(NotYourTurn):
            await game_service.fire(store, t1, Coordinate(8, 8))

        hit = await game_service.fire(store, t2, Coordinate(0, 0))
        after_p2 = await store.get_game_by_code(code)
        return miss, after_p1, hit, after_p2

    miss, after_p1, hit, after_p2 = run_with_store(scenario)
    assert not miss.hit and miss.message == "Miss!"
    assert after_p1.current_turn is Slot.PLAYER2
    assert hit.hit and hit.sunk is None and hit.message == "Hit!"
    assert after_p2.current_turn is Slot.PLAYER1


def test_duplicate_shot_rejected_without_mutation(run_with_store) -> None:
    async def scenario(store):
        code, t1, t2 = await _start_game(store)
        await game_service.fire(store, t1, Coordinate(5, 5))
        await game_service.fire(store, t2, Coordinate(5, 5))
        before = await store.get_player_by_token(t1)
        with pytest.raises(AlreadyFired):
            await game_service.fire(store, t1, Coordinate(5, 5))
        return before, await store.get_player_by_token(t1), await store.get_game_by_code(code)

    before, after, game = run_with_store(scenario)
    assert after.shots == before.shots
    assert len(after.shots) == 1
    assert game.current_turn is Slot.PLAYER1


def test_full_game(run_with_store) -> None:
    """Player1 sinks every ship while player2 keeps missing."""

    async def scenario(store):
        code, t1, t2 = await _start_game(store)
        fleet = standard_fleet()
        # Destroyer first so its sinking is observed mid-game
        targets = fleet_cells(fleet[-1:]) + fleet_cells(fleet[:-1])
        misses = [Coordinate(x, y) for y in range(5, 10) for x in range(10)]

        results = []
        for i, target in enumerate(targets):
            results.append(await game_service.fire(store, t1, target))
            if i < len(targets) - 1:
                await game_service.fire(store, t2, misses[i])

        state1 = await game_service.get_game_state(store, t1)
        with pytest.raises(GameNotInProgress):
            await game_service.fire(store, t2, misses[-1])
        return results, state1, await store.get_game_by_code(code)

    results, state1, game = run_with_store(scenario)

    destroyer_done = results[1]
    assert (destroyer_done.hit, destroyer_done.sunk, destroyer_done.game_over) == (True, "Destroyer", False)
    assert destroyer_done.winner is None

    sunk = [r.sunk for r in results if r.sunk]
    assert sunk == ["Destroyer", "Carrier", "Battleship", "Cruiser", "Submarine"]
    assert not any(r.game_over for r in results[:-1])

    final = results[-1]
    assert final.game_over
    assert final.winner is Slot.PLAYER1
    assert final.message.endswith("Game over - you win!")

    assert game.status is GameStatus.FINISHED
    assert game.winner is Slot.PLAYER1
    # Winning shot does not pass the turn
    assert game.current_turn is Slot.PLAYER1

    assert state1.opponent.ships_sunk == 5
    assert not state1.is_your_turn


def test_game_state_hides_opponent_fleet(run_with_store) -> None:
    async def scenario(store):
        game, p1 = await game_service.create_game(store, "Alice")
        waiting = await game_service.get_game_state(store, p1.token)
        _, t1, t2 = await _start_game(store)
        await game_service.fire(store, t1, Coordinate(0, 4))
        await game_service.fire(store, t2, Coordinate(9, 9))
        await game_service.fire(store, t1, Coordinate(1, 4))
        return waiting, await game_service.get_game_state(store, t1), await game_service.get_game_state(store, t2)

    waiting, state1, state2 = run_with_store(scenario)

    assert waiting.opponent is None
    assert not waiting.is_your_turn

    assert state1.you.slot is Slot.PLAYER1
    assert state1.you.board == tuple(standard_fleet())
    assert [(s.x, s.y, s.hit) for s in state1.you.shots] == [(0, 4, True), (1, 4, True)]
    assert state1.opponent.name == "Bob"
    assert state1.opponent.ships_sunk == 1
    assert not hasattr(state1.opponent, "board")
    assert not state1.is_your_turn

    assert state2.is_your_turn
    assert state2.opponent.ships_sunk == 0
    assert [(s.x, s.y) for s in state2.opponent.shots] == [(0, 4), (1, 4)]


def test_concurrent_fires_cannot_both_take_the_turn(run_with_store) -> None:
    async def scenario(store):
        code, t1, _ = await _start_game(store)
        results = await asyncio.gather(
            game_service.fire(store, t1, Coordinate(9, 9)),
            game_service.fire(store, t1, Coordinate(8, 8)),
            return_exceptions=True,
        )
        return results, await store.get_player_by_token(t1), await store.get_game_by_code(code)

    results, player, game = run_with_store(scenario)
    errors = [r for r in results if isinstance(r, Exception)]
    assert len(errors) == 1
    assert isinstance(errors[0], NotYourTurn)
    assert len(player.shots) == 1
    assert game.current_turn is Slot.PLAYER2
