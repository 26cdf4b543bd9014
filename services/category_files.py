"""Loading category seed trees and exporting collections as YAML."""

from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Tuple

import yaml

from logger import get_logger
from models.category import Category

logger = get_logger()


def load_seed_file(seed_file: Path) -> List[Dict[str, Any]]:
    """Load a nested category tree from a YAML file.

    The file holds a list of entries with ``name`` and optional
    ``description``, ``color`` and ``children``.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the top level is not a list.
        yaml.YAMLError: If YAML is invalid.
    """
    if not seed_file.exists():
        raise FileNotFoundError(f"Seed file not found: {seed_file}")

    logger.debug(f"Loading category seed from {seed_file}")
    with open(seed_file, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Seed file must contain a list of categories: {seed_file}")
    return data


def seed_categories(store, entries: List[Dict[str, Any]]) -> Tuple[int, int]:
    """Create the categories of a seed tree that don't exist yet.

    An entry counts as existing when a category with the same name already
    sits under the same parent; its children are then seeded under it.

    Args:
        store: CategoryTreeStore to create categories through.
        entries: Parsed seed entries (see load_seed_file).

    Returns:
        Tuple of (created, skipped) counts.
    """
    created = 0
    skipped = 0

    def seed_level(level: List[Dict[str, Any]], parent_id: str, depth: int):
        nonlocal created, skipped
        indent = "  " * depth
        for entry in level:
            if not isinstance(entry, dict):
                logger.warning(f"{indent}Skipping malformed category entry: {entry!r}")
                continue
            name = str(entry.get("name") or "").strip()
            if not name:
                logger.warning(f"{indent}Skipping category with no name")
                continue

            existing = _find_child_by_name(store, parent_id, name)
            if existing is not None:
                logger.info(f"{indent}⊘ Skipped '{name}' (already exists)")
                skipped += 1
                category_id = existing.id
            else:
                store.begin_create()
                store.update_draft_field("name", name)
                store.update_draft_field("parent_id", parent_id)
                if entry.get("description"):
                    store.update_draft_field("description", entry["description"])
                if entry.get("color"):
                    store.update_draft_field("color", entry["color"])
                category = store.save()
                logger.info(f"{indent}✓ Created '{name}' (ID: {category.id})")
                created += 1
                category_id = category.id

            seed_level(entry.get("children") or [], category_id, depth + 1)

    seed_level(entries, "", 0)
    return created, skipped


def export_categories(categories: List[Category], stream: Optional[TextIO] = None):
    """Dump a flat category collection as YAML.

    Args:
        categories: Collection to export, in collection order.
        stream: Optional text stream to write to.

    Returns:
        The YAML text when no stream is given, otherwise None.
    """
    data = [category.to_dict() for category in categories]
    return yaml.safe_dump(data, stream, sort_keys=False, allow_unicode=True)


def load_export(stream: TextIO) -> List[Category]:
    """Read a collection written by export_categories.

    Raises:
        ValueError: If the top level is not a list or an entry is malformed.
        yaml.YAMLError: If YAML is invalid.
    """
    data = yaml.safe_load(stream)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("Import file must contain a list of categories")
    return [Category.from_dict(item) for item in data]


def _find_child_by_name(store, parent_id: str, name: str) -> Optional[Category]:
    for category in store.children_of(parent_id):
        if category.name == name:
            return category
    return None
