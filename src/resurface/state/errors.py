"""Item store errors."""


class StateError(Exception):
    """Base exception for item store operations."""


class MissingItemError(StateError):
    """Raised when an item id is not present in the store."""
