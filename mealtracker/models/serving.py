from sqlalchemy import Column, Integer, Float, String, ForeignKey, ForeignKeyConstraint
from sqlalchemy.orm import relationship

from mealtracker.db.base import Base


class Serving(Base):
    __tablename__ = "servings"
    __table_args__ = (
        ForeignKeyConstraint(
            ["meal_id", "user_id"],
            ["meals.id", "meals.user_id"],
            ondelete="CASCADE",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    meal_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    original_unit = Column(String, nullable=True)
    weight = Column(Float, nullable=False)  # grams

    meal = relationship("Meal", back_populates="serving")
