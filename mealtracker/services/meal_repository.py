"""
Meal repository: CRUD over meals and their serving / alternative measures.

Every method takes the already-resolved user id and filters on it directly.
A meal owned by someone else behaves exactly like a missing one (NotFoundError);
only the debug log tells them apart.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from mealtracker.core.errors import NotFoundError, StorageError
from mealtracker.models.alt_measure import AltMeasure
from mealtracker.models.meal import Meal
from mealtracker.models.serving import Serving
from mealtracker.schemas.meal import MealIn

logger = logging.getLogger(__name__)


class MealRepository:
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, user_id: int) -> Query:
        return (
            self.db.query(Meal)
            .options(selectinload(Meal.serving), selectinload(Meal.alt_measures))
            .filter(Meal.user_id == user_id)
        )

    def _commit(self, action: str, user_id: int, what: str = "meal") -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[MEALS] Failed to {action} {what} for user {user_id}: {e}", exc_info=True)
            raise StorageError(f"Failed to {action} {what}")

    def _log_miss(self, user_id: int, meal_id: int) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        owner = self.db.query(Meal.user_id).filter(Meal.id == meal_id).scalar()
        if owner is None:
            logger.debug("[MEALS] Meal %s does not exist (requested by user %s)", meal_id, user_id)
        else:
            logger.debug("[MEALS] Meal %s belongs to user %s, not user %s", meal_id, owner, user_id)

    @staticmethod
    def _apply_fields(meal: Meal, fields: MealIn) -> None:
        meal.date = fields.date
        meal.name = fields.name
        meal.original_name = fields.original_name
        meal.calories = fields.calories
        meal.protein = fields.protein
        meal.carbs = fields.carbs
        meal.fat = fields.fat
        meal.meal_type = fields.meal_type.value
        meal.food_id = fields.food_id
        meal.image_url = fields.image_url

    @staticmethod
    def _attach_children(meal: Meal, user_id: int, fields: MealIn) -> None:
        if fields.serving is not None:
            meal.serving = Serving(user_id=user_id, **fields.serving.model_dump())
        for measure in fields.alt_measures or []:
            meal.alt_measures.append(AltMeasure(user_id=user_id, **measure.model_dump()))

    # ---------- queries ----------

    def list(
        self,
        user_id: int,
        date: Optional[str] = None,
        month: Optional[str] = None,
    ) -> List[Meal]:
        """
        Meals of one user, newest first.
        `date` (YYYY-MM-DD) wins over `month` (YYYY-MM) when both are given.
        """
        query = self._scoped(user_id)
        if date:
            query = query.filter(Meal.date == date)
        elif month:
            query = query.filter(Meal.date.startswith(f"{month}-"))

        meals = query.order_by(Meal.date.desc(), Meal.created_at.desc(), Meal.id.desc()).all()
        logger.debug("[MEALS] Found %d meals for user %s", len(meals), user_id)
        return meals

    def list_between(self, user_id: int, start: str, end: str) -> List[Meal]:
        """Meals with start <= date <= end (both YYYY-MM-DD, inclusive), oldest first."""
        return (
            self._scoped(user_id)
            .filter(Meal.date >= start, Meal.date <= end)
            .order_by(Meal.date.asc(), Meal.created_at.asc(), Meal.id.asc())
            .all()
        )

    def get(self, user_id: int, meal_id: int) -> Meal:
        meal = self._scoped(user_id).filter(Meal.id == meal_id).first()
        if meal is None:
            self._log_miss(user_id, meal_id)
            raise NotFoundError("Meal not found")
        return meal

    # ---------- writes ----------

    def create(self, user_id: int, fields: MealIn) -> Meal:
        """Insert the meal with its serving and alt measures as one transaction."""
        meal = Meal(user_id=user_id)
        self._apply_fields(meal, fields)
        self._attach_children(meal, user_id, fields)
        self.db.add(meal)
        self._commit("add", user_id)

        self.db.refresh(meal)
        logger.info("[MEALS] Created meal %s for user %s", meal.id, user_id)
        return meal

    def create_many(self, user_id: int, items: List[MealIn]) -> List[Meal]:
        """
        Bulk import: every meal with its children in a single commit.
        Either all of them are stored or none is.
        """
        meals = []
        for fields in items:
            meal = Meal(user_id=user_id)
            self._apply_fields(meal, fields)
            self._attach_children(meal, user_id, fields)
            self.db.add(meal)
            meals.append(meal)
        self._commit("import", user_id, what="meals")

        for meal in meals:
            self.db.refresh(meal)
        logger.info("[MEALS] Imported %d meals for user %s", len(meals), user_id)
        return meals

    def update(self, user_id: int, meal_id: int, fields: MealIn) -> Meal:
        """
        Overwrite the meal's fields; the serving and alt measures are deleted
        and re-inserted from `fields` rather than diffed. One transaction.
        """
        meal = self.get(user_id, meal_id)
        try:
            self._apply_fields(meal, fields)
            meal.updated_at = func.now()
            meal.serving = None
            meal.alt_measures = []
            self.db.flush()
            self._attach_children(meal, user_id, fields)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[MEALS] Failed to update meal {meal_id} for user {user_id}: {e}", exc_info=True)
            raise StorageError("Failed to update meal")
        self._commit("update", user_id)

        self.db.refresh(meal)
        logger.info("[MEALS] Updated meal %s for user %s", meal_id, user_id)
        return meal

    def delete(self, user_id: int, meal_id: int) -> None:
        """Delete an owned meal; servings and alt measures go with it via ON DELETE CASCADE."""
        try:
            deleted = (
                self.db.query(Meal)
                .filter(Meal.id == meal_id, Meal.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[MEALS] Failed to delete meal {meal_id} for user {user_id}: {e}", exc_info=True)
            raise StorageError("Failed to delete meal")

        if not deleted:
            self.db.rollback()
            self._log_miss(user_id, meal_id)
            raise NotFoundError("Meal not found")

        self._commit("delete", user_id)
        logger.info("[MEALS] Deleted meal %s for user %s", meal_id, user_id)
