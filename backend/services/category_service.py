import logging
from typing import Any, Dict, List, Optional

from backend.ledger.balance import TRANSACTION_TYPES
from backend.ledger.models import Category
from backend.ledger.repos import DjangoCategoriesRepo, ValidationError

from .transaction_service import require_mapping

logger = logging.getLogger(__name__)


class CategoryService():
    """Categories owned by a user plus the shared defaults (user is null)."""

    def __init__(self, repository: Optional[DjangoCategoriesRepo] = None):
        self.repository = repository or DjangoCategoriesRepo()

    def _clean(self, data: Dict[str, Any], partial: bool) -> Dict[str, str]:
        data = require_mapping(data)
        name = str(data.get("name") or "").strip()
        category_type = data.get("category_type")
        if not partial and (not name or not category_type):
            raise ValidationError("Category name and type are required")

        cleaned = {}
        if name:
            cleaned["name"] = name
        if category_type:
            if category_type not in TRANSACTION_TYPES:
                raise ValidationError("Category type must be either Income or Expense")
            cleaned["category_type"] = category_type
        return cleaned

    def create_category(self, user, data: Dict[str, Any]) -> Category:
        category = self.repository.create(user=user, **self._clean(data, partial=False))
        logger.info("Created category %s for %s", category.pk, user)
        return category

    def get_category(self, user, category_id: int) -> Category:
        return self.repository.get_visible(category_id, user)

    def get_all_categories(self, user) -> List[Category]:
        return self.repository.list_visible(user)

    def update_category(self, user, category_id: int, data: Dict[str, Any]) -> Category:
        category = self.repository.get_owned(category_id, user)
        for field, value in self._clean(data, partial=True).items():
            setattr(category, field, value)
        category.save()
        return category

    def delete_category(self, user, category_id: int) -> None:
        # transactions keep existing with category set to null, budgets go with it
        category = self.repository.get_owned(category_id, user)
        category.delete()
        logger.info("Deleted category %s for %s", category_id, user)
