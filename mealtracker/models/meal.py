from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    Float,
    String,
    ForeignKey,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from mealtracker.db.base import Base


class Meal(Base):
    __tablename__ = "meals"
    __table_args__ = (
        # target of the (meal_id, user_id) foreign keys on servings/alt_measures
        UniqueConstraint("id", "user_id", name="uq_meals_id_user_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    date = Column(String, nullable=False, index=True)  # YYYY-MM-DD
    name = Column(String, nullable=False)
    original_name = Column(String, nullable=True)

    calories = Column(Float, nullable=False)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fat = Column(Float, nullable=False, default=0)

    meal_type = Column(String, nullable=False)  # Breakfast / Lunch / Dinner / Snack
    food_id = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="meals")
    serving = relationship(
        "Serving",
        back_populates="meal",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    alt_measures = relationship(
        "AltMeasure",
        back_populates="meal",
        order_by="AltMeasure.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
