"""Custom exception hierarchy for invest-engine."""


class EngineError(Exception):
    """Base exception for all invest-engine errors."""


class InvalidInputError(EngineError):
    """Raised when an operation's preconditions are violated."""


class NothingToDistributeError(InvalidInputError):
    """Raised when a distribution has a non-positive total or no positions."""


class EntityNotFoundError(EngineError):
    """Raised when a referenced entity does not exist."""


class UnknownCategoryError(EntityNotFoundError):
    """Raised when a property category id has no yield configuration."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(EngineError):
    """Raised when an entity is in an invalid state for the operation."""


class DuplicateBatchError(InvalidEntityStateError):
    """Raised when a distribution batch was already recorded."""


class ConservationError(EngineError):
    """Raised when allocated amounts do not sum to the distributed total."""


class ConfigurationError(EngineError):
    """Raised when configuration is invalid or missing."""
