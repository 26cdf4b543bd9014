"""Category model for organising world content."""

from dataclasses import dataclass, field, fields, asdict
from typing import List


@dataclass
class Category:
    """Represents a user-defined grouping node in a world.

    Categories form a forest through parent_id references into the same flat
    collection.

    Attributes:
        id: Unique identifier across the whole collection.
        name: Human-readable label (must be non-empty to be saved).
        description: Optional free text.
        color: Presentation colour, any value accepted.
        parent_id: ID of the parent category, or "" for a top-level category.
        order: Sort key among siblings sharing the same parent_id.
    """

    id: str
    name: str
    description: str = ""
    color: str = ""
    parent_id: str = ""
    order: int = 0

    @classmethod
    def field_names(cls) -> List[str]:
        """Names of the editable fields, in declaration order."""
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        """Convert category to a plain dictionary for export."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        """Build a category from a dictionary, ignoring unknown keys.

        A missing or null order becomes 0.

        Raises:
            ValueError: If data is not a mapping, has no id, or has an order
                that is not a whole number.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Category entry must be a mapping, got {data!r}")
        if data.get("id") is None:
            raise ValueError(f"Category entry has no id: {data!r}")

        order = data.get("order")
        if order is None:
            order = 0
        elif isinstance(order, bool) or not isinstance(order, (int, str)):
            raise ValueError(f"Category order must be an integer, got {order!r}")

        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            description=data.get("description") or "",
            color=data.get("color") or "",
            parent_id=data.get("parent_id") or "",
            order=int(order),
        )


@dataclass
class TreeNode:
    """A category together with its ordered children.

    Derived view computed from the flat collection; never stored.
    """

    category: Category
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.category.id
