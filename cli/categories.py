#!/usr/bin/env python3

import sys
from pathlib import Path

import yaml

from config import get_seed_dir
from logger import get_logger
from services.category_files import (
    export_categories,
    load_export,
    load_seed_file,
    seed_categories,
)
from services.errors import CategoryCycleError, CategoryStoreError

logger = get_logger()


def confirm_delete(category):
    """Ask on the terminal before a category is deleted."""
    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    if category.description:
        logger.info(f"  Description: {category.description}")

    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    return confirm == "yes"


def _prompt(label, default=""):
    """Read a value, falling back to default on empty input."""
    suffix = f" [{default}]" if default else ""
    value = input(f"{label}{suffix}: ").strip()
    return value or default


def _fill_draft(store):
    """Prompt for each editable field of the open draft."""
    draft = store.draft

    store.update_draft_field("name", _prompt("Category name (e.g., Settlements)", draft.name))
    store.update_draft_field(
        "description",
        _prompt("Description (optional, press Enter to keep)", draft.description),
    )
    store.update_draft_field("color", _prompt("Color", draft.color))

    options = store.parent_options()
    if options:
        logger.info("\nAvailable parents:")
        for category in options:
            logger.info(f"  {category.id}: {category.name}")
    parent_input = _prompt(
        "Parent category ID (optional, '-' for top level)", draft.parent_id
    )
    if parent_input == "-":
        parent_input = ""
    # The current parent stays valid even when it no longer exists
    allowed = {c.id for c in options} | {draft.parent_id}
    if parent_input and parent_input not in allowed:
        raise CategoryStoreError(f"Parent category with ID {parent_input} is not a valid choice")
    store.update_draft_field("parent_id", parent_input)


def _save_draft(store):
    try:
        category = store.save()
    except CategoryStoreError as e:
        logger.error(f"Error saving category: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Category saved with ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    if category.parent_id:
        logger.info(f"  Parent ID: {category.parent_id}")


def cmd_list(args, services):
    """Show the category tree, or the categories unreachable from it."""
    store = services.category_store()
    categories = store.categories

    if not categories:
        logger.info("No categories defined yet. Create your first one!")
        return

    if args.orphans:
        orphans = store.orphans()
        if not orphans:
            logger.info("No orphaned categories.")
            return
        logger.info("\nOrphaned categories:")
        for category in orphans:
            logger.info(f"  {category.name} [{category.id}] -> missing parent {category.parent_id}")
        logger.info(f"\nTotal orphans: {len(orphans)}")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    try:
        for depth, category in store.walk():
            indent = "  " * depth
            logger.info(f"{indent}{category.name} [{category.id}] {category.color}")
            if args.verbose and category.description:
                logger.info(f"{indent}  {category.description}")
    except CategoryCycleError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Interactively create a new category."""
    print("\nCreate New Category")
    print("=" * 80)

    store = services.category_store()
    store.begin_create()
    try:
        _fill_draft(store)
    except CategoryStoreError as e:
        logger.error(str(e))
        sys.exit(1)
    _save_draft(store)


def cmd_edit(args, services):
    """Interactively edit an existing category."""
    store = services.category_store()
    try:
        store.begin_edit(args.category_id)
        print(f"\nEdit Category {args.category_id}")
        print("=" * 80)
        _fill_draft(store)
    except CategoryStoreError as e:
        logger.error(str(e))
        sys.exit(1)
    _save_draft(store)


def cmd_delete(args, services):
    """Delete a category by ID after confirmation."""
    store = services.category_store(confirm=confirm_delete)

    if store.find(args.category_id) is None:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    orphaned = store.children_of(args.category_id)
    if store.delete(args.category_id):
        logger.info(f"✓ Category '{args.category_id}' deleted successfully.")
        if orphaned:
            names = ", ".join(c.name for c in orphaned)
            logger.warning(f"Left without a parent: {names}")
    else:
        logger.info("Deletion cancelled.")


def cmd_seed(args, services):
    """Seed categories from a YAML tree."""
    seed_file = Path(args.file) if args.file else get_seed_dir() / "categories.yaml"

    try:
        entries = load_seed_file(seed_file)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error reading seed file: {e}")
        sys.exit(1)

    logger.info(f"\nSeeding categories from {seed_file}")
    logger.info("=" * 80)

    created, skipped = seed_categories(services.category_store(), entries)

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {created}")
    logger.info(f"Skipped: {skipped}")
    logger.info(f"Total: {created + skipped}")


def cmd_export(args, services):
    """Write the category collection as YAML."""
    categories = services.categories.find_all()
    if args.file:
        with open(args.file, "w") as f:
            export_categories(categories, f)
        logger.info(f"Exported {len(categories)} categories to {args.file}")
    else:
        export_categories(categories, sys.stdout)


def cmd_import(args, services):
    """Replace the category collection with one from a YAML export."""
    try:
        with open(args.file, "r") as f:
            categories = load_export(f)
    except (OSError, KeyError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error reading import file: {e}")
        sys.exit(1)

    ids = [c.id for c in categories]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        logger.error(f"Duplicate category IDs in import file: {', '.join(duplicates)}")
        sys.exit(1)

    services.categories.replace_all(categories)
    logger.info(f"✓ Imported {len(categories)} categories from {args.file}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, edit, list and delete world categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="Show the category tree")
    list_parser.add_argument(
        "--orphans",
        action="store_true",
        help="List categories whose parent no longer exists",
    )
    list_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Include descriptions"
    )
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    edit_parser = categories_subparsers.add_parser(
        "edit", help="Edit a category interactively"
    )
    edit_parser.add_argument("category_id", help="ID of the category to edit")
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument("category_id", help="ID of the category to delete")
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from a YAML tree"
    )
    seed_parser.add_argument(
        "file", nargs="?", help="Seed file (defaults to the bundled starter tree)"
    )
    seed_parser.set_defaults(func=cmd_seed)

    export_parser = categories_subparsers.add_parser(
        "export", help="Export categories as YAML"
    )
    export_parser.add_argument("file", nargs="?", help="Output file (defaults to stdout)")
    export_parser.set_defaults(func=cmd_export)

    import_parser = categories_subparsers.add_parser(
        "import", help="Replace all categories from a YAML export"
    )
    import_parser.add_argument("file", help="File written by 'categories export'")
    import_parser.set_defaults(func=cmd_import)
