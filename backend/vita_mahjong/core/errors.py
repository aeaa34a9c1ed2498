"""Errors raised by the game core."""


class InsufficientCoinsError(ValueError):
    """A costed action was requested without enough coins."""

    def __init__(self, action: str, cost: int, balance: int):
        self.action = action
        self.cost = cost
        self.balance = balance
        super().__init__(f"Not enough coins for {action}: costs {cost}, balance {balance}")


class SessionNotFoundError(KeyError):
    """No game session exists with the given id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Game session '{self.session_id}' not found"
