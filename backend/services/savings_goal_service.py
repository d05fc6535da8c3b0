import logging
from typing import Any, Dict, List, Optional

from backend.ledger.models import SavingsGoal
from backend.ledger.repos import DjangoSavingsGoalsRepo, ValidationError

from .transaction_service import is_missing, normalize_amount, parse_date, require_mapping

logger = logging.getLogger(__name__)


class SavingsGoalService():
    """Savings goals are tracked by hand; they do not move account balances."""

    def __init__(self, repository: Optional[DjangoSavingsGoalsRepo] = None):
        self.repository = repository or DjangoSavingsGoalsRepo()

    def _clean(self, data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
        data = require_mapping(data)
        goal_name = str(data.get("goal_name") or "").strip()
        if not partial and (not goal_name or is_missing(data.get("target_amount"))):
            raise ValidationError("Goal name and target amount are required")

        cleaned: Dict[str, Any] = {}
        if goal_name:
            cleaned["goal_name"] = goal_name
        if not is_missing(data.get("target_amount")):
            cleaned["target_amount"] = normalize_amount(data["target_amount"])
        if not is_missing(data.get("current_amount")):
            cleaned["current_amount"] = normalize_amount(data["current_amount"], allow_zero=True)
        if not is_missing(data.get("target_date")):
            cleaned["target_date"] = parse_date(data["target_date"], "target date")
        return cleaned

    def create_goal(self, user, data: Dict[str, Any]) -> SavingsGoal:
        goal = self.repository.create(user=user, **self._clean(data, partial=False))
        logger.info("Created savings goal %s for %s", goal.pk, user)
        return goal

    def get_goal(self, user, goal_id: int) -> SavingsGoal:
        return self.repository.get_owned(goal_id, user)

    def get_all_goals(self, user) -> List[SavingsGoal]:
        return self.repository.list(user)

    def update_goal(self, user, goal_id: int, data: Dict[str, Any]) -> SavingsGoal:
        goal = self.repository.get_owned(goal_id, user)
        for field, value in self._clean(data, partial=True).items():
            setattr(goal, field, value)
        goal.save()
        return goal

    def delete_goal(self, user, goal_id: int) -> Dict[str, str]:
        goal = self.repository.get_owned(goal_id, user)
        goal.delete()
        logger.info("Deleted savings goal %s for %s", goal_id, user)
        return {"message": "Savings goal deleted successfully"}
