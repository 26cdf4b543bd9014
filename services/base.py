"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject test doubles.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If None, one is
            created from config.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService

        self.categories = CategoryService(self.db_manager)

    def category_store(self, confirm=None, **kwargs):
        """Build a tree store over the persisted category collection.

        Args:
            confirm: Optional deletion confirmation callable.
            **kwargs: Passed through to CategoryTreeStore (clock, rng).

        Returns:
            CategoryTreeStore reading from and writing to the database.
        """
        from services.category_tree import CategoryTreeStore

        return CategoryTreeStore(
            get_categories=self.categories.find_all,
            set_categories=self.categories.replace_all,
            confirm=confirm,
            id_prefix=self.config.category_id_prefix,
            **kwargs,
        )
