"""Category tree store: draft editing and tree views over a flat collection.

The store does not own the committed collection. It reads it through
``get_categories`` and hands every committed change back through
``set_categories``, so the owner (the database service, a test list, ...)
stays the single source of truth. Tree views are derived on demand from the
flat list using category ids as the index.
"""

import random
import time
from dataclasses import replace
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from logger import get_logger
from models.category import Category, TreeNode
from services.errors import (
    CategoryCycleError,
    CategoryNotFoundError,
    CategoryValidationError,
    NotEditingError,
)

logger = get_logger("store")

ROOT = ""


def _is_order(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class EditState(Enum):
    """Editing workflow state."""

    IDLE = "idle"
    EDITING = "editing"


class CategoryTreeStore:
    """Mediates the single-draft editing workflow for categories.

    Args:
        get_categories: Returns the current committed collection.
        set_categories: Receives the complete collection after each commit.
        confirm: Optional callable asked before a deletion; returning False
            aborts it.
        id_prefix: Prefix for generated category ids.
        clock: Returns the current time in seconds.
        rng: Random source for generated colours.
    """

    def __init__(
        self,
        get_categories: Callable[[], Sequence[Category]],
        set_categories: Callable[[List[Category]], None],
        confirm: Optional[Callable[[Category], bool]] = None,
        id_prefix: str = "category",
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self._get_categories = get_categories
        self._set_categories = set_categories
        self._confirm = confirm
        self._id_prefix = id_prefix
        self._clock = clock
        self._rng = rng or random.Random()

        self._draft: Optional[Category] = None
        self._last_millis: Optional[int] = None
        self._expanded_id: Optional[str] = None

    # -- state ---------------------------------------------------------------

    @property
    def categories(self) -> List[Category]:
        """The committed collection as currently held by the owner."""
        return list(self._get_categories())

    @property
    def state(self) -> EditState:
        return EditState.EDITING if self._draft is not None else EditState.IDLE

    @property
    def is_editing(self) -> bool:
        return self._draft is not None

    @property
    def draft(self) -> Optional[Category]:
        """A copy of the open draft, or None when idle.

        Change the draft with update_draft_field().
        """
        if self._draft is None:
            return None
        return replace(self._draft)

    @property
    def expanded_id(self) -> Optional[str]:
        return self._expanded_id

    # -- draft workflow --------------------------------------------------------

    def begin_create(self) -> Category:
        """Open a new draft with a fresh id, placed last among top-level siblings.

        Any draft already open is replaced.

        Returns:
            A copy of the new draft.
        """
        categories = self.categories
        self._draft = Category(
            id=self._generate_id(categories),
            name="",
            description="",
            color=self._random_color(),
            parent_id=ROOT,
            order=len(categories),
        )
        logger.debug(f"Started new category draft {self._draft.id}")
        return self.draft

    def begin_edit(self, category_id: str) -> Category:
        """Open a draft holding a copy of an existing category.

        Args:
            category_id: ID of the category to edit.

        Returns:
            A copy of the new draft.

        Raises:
            CategoryNotFoundError: If no category has this id. The store is
                left unchanged.
        """
        category = self.find(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        self._draft = replace(category)
        logger.debug(f"Editing category {category_id}")
        return self.draft

    def update_draft_field(self, field: str, value) -> None:
        """Set one field on the open draft.

        Values are not validated here; save() checks the draft.

        Raises:
            NotEditingError: If no draft is open.
            ValueError: If field is not a category field.
        """
        draft = self._require_draft()
        if field not in Category.field_names():
            raise ValueError(f"Unknown category field: {field}")
        setattr(draft, field, value)

    def save(self) -> Category:
        """Commit the draft to the collection.

        An entry with the same id is replaced at its current position;
        otherwise the draft is appended.

        Returns:
            The saved category.

        Raises:
            NotEditingError: If no draft is open.
            CategoryValidationError: If the id or name is blank or the order
                is not an integer. The draft is kept so it can be corrected.
        """
        draft = self._require_draft()
        if not str(draft.id or "").strip() or not str(draft.name or "").strip():
            raise CategoryValidationError("ID and name cannot be empty")
        if not _is_order(draft.order):
            raise CategoryValidationError(f"Order must be an integer, got {draft.order!r}")

        categories = self.categories
        saved = replace(draft)
        index = self._index_of(categories, saved.id)
        if index is None:
            categories.append(saved)
            logger.info(f"Created category '{saved.name}' ({saved.id})")
        else:
            categories[index] = saved
            logger.info(f"Updated category '{saved.name}' ({saved.id})")

        self._set_categories(categories)
        self._draft = None
        return replace(saved)

    def cancel_edit(self) -> None:
        """Discard the open draft, if any."""
        if self._draft is not None:
            logger.debug(f"Discarded draft {self._draft.id}")
        self._draft = None

    def delete(self, category_id: str) -> bool:
        """Remove a category from the collection.

        Children that point at the removed category keep their parent_id and
        become orphans.

        Args:
            category_id: ID of the category to delete.

        Returns:
            True if the category was deleted, False if it was not found or
            the confirmation was declined.
        """
        categories = self.categories
        target = self._find_in(categories, category_id)
        if target is None:
            logger.warning(f"Category with ID {category_id} not found")
            return False

        if self._confirm is not None and not self._confirm(replace(target)):
            logger.info(f"Deletion of category {category_id} cancelled")
            return False

        self._set_categories([c for c in categories if c.id != category_id])
        logger.info(f"Deleted category '{target.name}' ({category_id})")

        if self._draft is not None and self._draft.id == category_id:
            self._draft = None
        if self._expanded_id == category_id:
            self._expanded_id = None
        return True

    # -- queries ---------------------------------------------------------------

    def find(self, category_id: str) -> Optional[Category]:
        """Return a copy of the category with this id, or None."""
        category = self._find_in(self.categories, category_id)
        return replace(category) if category is not None else None

    def children_of(self, parent_id: Optional[str] = ROOT) -> List[Category]:
        """Categories whose parent is parent_id, ordered by their order field.

        Ties keep collection order. Pass "" (or None) for top-level categories.
        """
        return self._siblings(self.categories, parent_id or ROOT)

    def has_children(self, category_id: str) -> bool:
        return any((c.parent_id or ROOT) == category_id for c in self.categories)

    def parent_options(self) -> List[Category]:
        """Categories that may be chosen as the draft's parent.

        Excludes the draft itself. Deeper cycles are not filtered out.

        Raises:
            NotEditingError: If no draft is open.
        """
        draft = self._require_draft()
        return [c for c in self.categories if c.id != draft.id]

    def subtree(self, parent_id: Optional[str] = ROOT) -> List[TreeNode]:
        """Build the tree below parent_id.

        Categories whose parent cannot be reached from parent_id are left
        out; an unknown parent_id is not treated as top level.

        Raises:
            CategoryCycleError: If a parent chain loops back on itself.
        """
        parent_id = parent_id or ROOT
        path = [parent_id] if parent_id != ROOT else []
        return self._build(self.categories, parent_id, path)

    def walk(self, parent_id: Optional[str] = ROOT) -> Iterator[Tuple[int, Category]]:
        """Yield (depth, category) pairs depth-first below parent_id.

        Raises:
            CategoryCycleError: If a parent chain loops back on itself.
        """

        def visit(nodes: List[TreeNode], depth: int):
            for node in nodes:
                yield depth, node.category
                yield from visit(node.children, depth + 1)

        yield from visit(self.subtree(parent_id), 0)

    def orphans(self) -> List[Category]:
        """Categories present in the collection but unreachable from the root."""
        reachable = {category.id for _, category in self.walk(ROOT)}
        return [c for c in self.categories if c.id not in reachable]

    def toggle_expanded(self, category_id: str) -> Optional[str]:
        """Expand a category, or collapse it if it is already expanded.

        Only one category is expanded at a time.

        Returns:
            The id of the expanded category, or None if collapsed.
        """
        if self._expanded_id == category_id:
            self._expanded_id = None
        else:
            self._expanded_id = category_id
        return self._expanded_id

    # -- helpers ---------------------------------------------------------------

    def _require_draft(self) -> Category:
        if self._draft is None:
            raise NotEditingError("No category draft is open")
        return self._draft

    def _generate_id(self, categories: Sequence[Category]) -> str:
        taken = {c.id for c in categories}
        millis = int(self._clock() * 1000)
        if self._last_millis is not None and millis <= self._last_millis:
            millis = self._last_millis + 1
        while f"{self._id_prefix}_{millis}" in taken:
            millis += 1
        self._last_millis = millis
        return f"{self._id_prefix}_{millis}"

    def _random_color(self) -> str:
        return "#{:06x}".format(self._rng.randrange(0x1000000))

    def _build(
        self, categories: List[Category], parent_id: str, path: List[str]
    ) -> List[TreeNode]:
        nodes = []
        for category in self._siblings(categories, parent_id):
            if category.id in path:
                cycle = path[path.index(category.id):] + [category.id]
                raise CategoryCycleError(cycle)
            children = self._build(categories, category.id, path + [category.id])
            nodes.append(TreeNode(category=category, children=children))
        return nodes

    @staticmethod
    def _siblings(categories: Sequence[Category], parent_id: str) -> List[Category]:
        # sorted() is stable, so equal orders keep collection order.
        # Orders that are not integers (rows written by other tools) sort as 0.
        return sorted(
            (replace(c) for c in categories if (c.parent_id or ROOT) == parent_id),
            key=lambda c: c.order if _is_order(c.order) else 0,
        )

    @staticmethod
    def _find_in(categories: Sequence[Category], category_id: str) -> Optional[Category]:
        for category in categories:
            if category.id == category_id:
                return category
        return None

    @staticmethod
    def _index_of(categories: Sequence[Category], category_id: str) -> Optional[int]:
        for index, category in enumerate(categories):
            if category.id == category_id:
                return index
        return None
