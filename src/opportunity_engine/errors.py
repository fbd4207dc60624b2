"""
Exceptions raised by the opportunity engine
"""


class OpportunityEngineError(Exception):
    """Base class for engine errors"""


class InvalidInputError(OpportunityEngineError, ValueError):
    """Raised when a value falls outside its documented domain"""

    def __init__(self, field: str, value, allowed=None):
        self.field = field
        self.value = value
        self.allowed = list(allowed) if allowed is not None else None
        message = f"Invalid value for {field}: {value!r}"
        if self.allowed:
            message += f" (expected one of {self.allowed})"
        super().__init__(message)


class InsufficientCandidatesError(OpportunityEngineError, ValueError):
    """Raised when a ranking is requested for fewer than two candidates"""

    def __init__(self, count: int, minimum: int = 2):
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"Need at least {minimum} candidates to compare, got {count}"
        )
