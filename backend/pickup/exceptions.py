"""Domain errors raised by services and mapped to responses by the API layer."""


class PickupError(Exception):
    """Base class for all pickup backend errors."""

    def __init__(self, message=None):
        self.message = message or self.__class__.__doc__
        super().__init__(self.message)


class GameNotFound(PickupError):
    """Game not found"""

    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__('Game not found')


class GameFull(PickupError):
    """Game is full"""

    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__('Game is full')


class InvalidGameRequest(PickupError):
    """Invalid game request"""


class StoreUnavailable(PickupError):
    """Database operation failed"""
