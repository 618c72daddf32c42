from typing import Dict, List, Optional

from mealtracker.schemas.base import CamelModel


class DaySummary(CamelModel):
    date: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    entry_count: int
    calories_by_meal_type: Dict[str, float]


class WeeklyReport(CamelModel):
    week_start: str
    week_end: str
    days: List[DaySummary]
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    days_logged: int
    avg_daily_calories: float
    calorie_target: int


class DailyCalories(CamelModel):
    date: str
    calories: float
    target: int


class MacroDistribution(CamelModel):
    protein_pct: float
    carbs_pct: float
    fat_pct: float


class MonthlyReport(CamelModel):
    month: str
    days_in_month: int
    days_logged: int
    meal_count: int
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    avg_calories_per_day: int
    avg_protein_per_day: int
    avg_carbs_per_day: int
    avg_fat_per_day: int
    monthly_calorie_target: int
    adherence_rate: int
    daily_calories: List[DailyCalories]
    macro_distribution: Optional[MacroDistribution] = None


class AvailableMonths(CamelModel):
    months: List[str]
