from typing import Optional


class NotFoundError(Exception):
    pass


class ValidationError(ValueError):
    """Malformed input to a budget or aggregation calculation.

    ``field`` names the offending input and ``constraint`` the rule it broke
    (e.g. ``"range"``, ``"sum"``, ``"positive"``).
    """

    def __init__(self, message: str, field: Optional[str] = None, constraint: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.constraint = constraint


class DuplicateBudgetError(ValueError):
    pass


class BudgetAllocationWriteError(Exception):
    """The budget row was stored but its allocation rows were not."""

    def __init__(self, budget_id: int, reason: str):
        super().__init__(f"Budget {budget_id} was created, but its allocations could not be saved: {reason}")
        self.budget_id = budget_id
        self.reason = reason
