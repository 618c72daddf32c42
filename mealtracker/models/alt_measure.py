from sqlalchemy import Column, Integer, Float, String, ForeignKey, ForeignKeyConstraint
from sqlalchemy.orm import relationship

from mealtracker.db.base import Base


class AltMeasure(Base):
    __tablename__ = "alt_measures"
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

    serving_weight = Column(Float, nullable=False)
    measure = Column(String, nullable=False)
    original_measure = Column(String, nullable=True)
    seq = Column(Integer, nullable=True)
    qty = Column(Float, nullable=False)

    meal = relationship("Meal", back_populates="alt_measures")
