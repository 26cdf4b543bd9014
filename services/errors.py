"""Errors raised by the category tree store.

All of them are recoverable and leave the committed collection unchanged.
"""


class CategoryStoreError(Exception):
    """Base class for category store errors."""


class CategoryValidationError(CategoryStoreError):
    """Raised when a draft cannot be saved (empty id or name)."""


class CategoryNotFoundError(CategoryStoreError):
    """Raised when an operation names a category that does not exist."""

    def __init__(self, category_id: str):
        super().__init__(f"Category with ID {category_id} not found")
        self.category_id = category_id


class NotEditingError(CategoryStoreError):
    """Raised when a draft operation is used while no draft is open."""


class CategoryCycleError(CategoryStoreError):
    """Raised when a traversal finds a cyclic parent chain."""

    def __init__(self, path):
        self.path = list(path)
        super().__init__("Cyclic parent chain: " + " -> ".join(self.path))
