"""Category domain service."""

from typing import Optional

from finledger.database.base import Database
from finledger.domain.entities import TRANSACTION_TYPES, Category as CategoryEntity
from finledger.domain.errors import NotFoundError, ValidationError, category_not_found
from finledger.domain.validation import require_choice, require_text


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        owner_id: str,
        name: str,
        category_type: str,
        parent_id: Optional[int] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            owner_id: Owner of the category
            name: Category name
            category_type: "income" or "expense"
            parent_id: Optional parent category, which must have the same type
            color: Optional display color
            icon: Optional icon name

        Returns:
            Category ID

        Raises:
            NotFoundError: If the parent category doesn't exist
            ValidationError: If a field is invalid
        """
        name = require_text(name, "name")
        require_choice(category_type, TRANSACTION_TYPES, "category_type")

        with self.db.atomic():
            if parent_id is not None:
                parent = self.require_category(owner_id, parent_id)
                if parent.category_type != category_type:
                    raise ValidationError(
                        f"Parent category '{parent.name}' is an {parent.category_type} category"
                    )
            return self.db.create_category(
                owner_id=owner_id,
                name=name,
                category_type=category_type,
                parent_id=parent_id,
                color=color,
                icon=icon,
            )

    def get_category(self, owner_id: str, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID, or None if missing or owned by someone else."""
        return self.db.get_category(category_id, owner_id)

    def require_category(self, owner_id: str, category_id: int) -> CategoryEntity:
        """Get category by ID.

        Raises:
            NotFoundError: If the category does not exist for this owner
        """
        category = self.db.get_category(category_id, owner_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def list_categories(self, owner_id: str, category_type: Optional[str] = None) -> list[CategoryEntity]:
        """List categories, optionally only income or expense ones."""
        if category_type is not None:
            require_choice(category_type, TRANSACTION_TYPES, "category_type")
        return self.db.list_categories(owner_id, category_type=category_type)

    def delete_category(self, owner_id: str, category_id: int) -> None:
        """Delete a category; transactions, goals and subcategories lose the reference."""
        with self.db.atomic():
            self.require_category(owner_id, category_id)
            self.db.delete_category(category_id)
