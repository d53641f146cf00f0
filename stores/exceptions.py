"""
Shared exception definitions for the game rules, the state machine and the stores.

Hierarchy:
- BattleshipError (base for everything raised on purpose)
  - NotFound       (game/player/opponent missing)
  - InvalidState   (operation outside its legal game status)
  - InvalidInput   (malformed fleet, bad coordinate, bad name)
  - Unauthorized   (unknown player token)
  - Conflict       (duplicate shot, code collision)
  - StoreError     (storage failure; the only retryable branch)

Transports map these classes to status codes / error payloads.
"""


# =========================
# Base exception
# =========================

class BattleshipError(Exception):
    """Base exception for all game and store errors."""
    retryable: bool = False


# =========================
# Categories
# =========================

class NotFound(BattleshipError):
    retryable = False


class InvalidState(BattleshipError):
    retryable = False


class InvalidInput(BattleshipError):
    retryable = False


class Unauthorized(BattleshipError):
    retryable = False


class Conflict(BattleshipError):
    retryable = False


class StoreError(BattleshipError):
    """Base exception for storage failures."""
    retryable = True


# =========================
# NotFound
# =========================

class GameNotFound(NotFound):
    pass


class PlayerNotFound(NotFound):
    pass


class OpponentNotFound(PlayerNotFound):
    pass


# =========================
# InvalidState
# =========================

class GameNotJoinable(InvalidState):
    pass


class CannotPlaceShips(InvalidState):
    pass


class GameNotInProgress(InvalidState):
    pass


class NotYourTurn(InvalidState):
    pass


# =========================
# InvalidInput
# =========================

class InvalidPlacement(InvalidInput):
    pass


class InvalidCoordinate(InvalidInput):
    pass


class InvalidName(InvalidInput):
    pass


# =========================
# Unauthorized / Conflict
# =========================

class InvalidToken(Unauthorized):
    pass


class AlreadyFired(Conflict):
    pass


class GameAlreadyExists(Conflict):
    pass


# =========================
# StoreError
# =========================

class UnexpectedResult(StoreError):
    retryable = True
    #aka, the "how the heck did this happen" exception, such as rows vanishing inside a transaction
