"""Report generation - pure functions over a user's meals.

Same input always produces the same report; loading the meals and picking
"today" is the caller's job.
"""
import calendar
import math
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

import pytz

from mealtracker.models.meal import Meal
from mealtracker.schemas.meal import MealType
from mealtracker.schemas.report import (
    DailyCalories,
    DaySummary,
    MacroDistribution,
    MonthlyReport,
    WeeklyReport,
)

WEEK_DAYS = 7


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() would give 2 for 2.5)."""
    return int(math.floor(value + 0.5))


def today_in(timezone_name: str) -> date:
    return datetime.now(pytz.timezone(timezone_name)).date()


def calculate_totals(meals: Iterable[Meal]) -> Tuple[float, float, float, float]:
    """Total (calories, protein, carbs, fat) of the given meals."""
    calories = protein = carbs = fat = 0.0
    for meal in meals:
        calories += meal.calories or 0
        protein += meal.protein or 0
        carbs += meal.carbs or 0
        fat += meal.fat or 0
    return calories, protein, carbs, fat


def summarize_day(day: str, meals: Sequence[Meal]) -> DaySummary:
    """Totals for one day. `meals` may contain other days; they are ignored."""
    day_meals = [m for m in meals if m.date == day]
    calories, protein, carbs, fat = calculate_totals(day_meals)

    by_type = {meal_type.value: 0.0 for meal_type in MealType}
    for meal in day_meals:
        by_type[meal.meal_type] = round(by_type.get(meal.meal_type, 0.0) + (meal.calories or 0), 1)

    return DaySummary(
        date=day,
        total_calories=round(calories, 1),
        total_protein=round(protein, 1),
        total_carbs=round(carbs, 1),
        total_fat=round(fat, 1),
        entry_count=len(day_meals),
        calories_by_meal_type=by_type,
    )


def default_week_start(today: date) -> date:
    """The rolling week ends today."""
    return today - timedelta(days=WEEK_DAYS - 1)


def generate_weekly_report(
    meals: Sequence[Meal],
    week_start: date,
    calorie_target: int,
) -> WeeklyReport:
    """
    Seven days starting at week_start, one summary per day (empty days included).
    The daily average is over days that have at least one meal.
    """
    week_end = week_start + timedelta(days=WEEK_DAYS - 1)
    days = [
        summarize_day((week_start + timedelta(days=offset)).isoformat(), meals)
        for offset in range(WEEK_DAYS)
    ]

    total_calories = sum(d.total_calories for d in days)
    days_logged = sum(1 for d in days if d.entry_count > 0)
    avg_daily_calories = total_calories / days_logged if days_logged else 0

    return WeeklyReport(
        week_start=week_start.isoformat(),
        week_end=week_end.isoformat(),
        days=days,
        total_calories=round(total_calories, 1),
        total_protein=round(sum(d.total_protein for d in days), 1),
        total_carbs=round(sum(d.total_carbs for d in days), 1),
        total_fat=round(sum(d.total_fat for d in days), 1),
        days_logged=days_logged,
        avg_daily_calories=round(avg_daily_calories, 1),
        calorie_target=calorie_target,
    )


def _macro_distribution(protein: float, carbs: float, fat: float) -> Optional[MacroDistribution]:
    total = protein + carbs + fat
    if total <= 0:
        return None
    return MacroDistribution(
        protein_pct=round(protein / total * 100, 1),
        carbs_pct=round(carbs / total * 100, 1),
        fat_pct=round(fat / total * 100, 1),
    )


def generate_monthly_report(
    meals: Sequence[Meal],
    month: str,
    calorie_target: int,
) -> MonthlyReport:
    """
    Month summary for `month` (YYYY-MM).

    Averages divide by the number of days that have meals (1 when there are none).
    Adherence is total calories against daily target x days in month, capped at 100.
    """
    year, month_number = (int(part) for part in month.split("-"))
    days_in_month = calendar.monthrange(year, month_number)[1]

    month_meals = [m for m in meals if m.date.startswith(f"{month}-")]
    calories, protein, carbs, fat = calculate_totals(month_meals)

    days_logged = len({m.date for m in month_meals})
    divisor = days_logged or 1

    monthly_target = calorie_target * days_in_month
    adherence = min(100, round_half_up(calories / monthly_target * 100)) if monthly_target > 0 else 0

    daily_calories: List[DailyCalories] = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month_number, day_number).isoformat()
        day_total = sum(m.calories or 0 for m in month_meals if m.date == day)
        daily_calories.append(
            DailyCalories(date=day, calories=round(day_total, 1), target=calorie_target)
        )

    return MonthlyReport(
        month=month,
        days_in_month=days_in_month,
        days_logged=days_logged,
        meal_count=len(month_meals),
        total_calories=round(calories, 1),
        total_protein=round(protein, 1),
        total_carbs=round(carbs, 1),
        total_fat=round(fat, 1),
        avg_calories_per_day=round_half_up(calories / divisor),
        avg_protein_per_day=round_half_up(protein / divisor),
        avg_carbs_per_day=round_half_up(carbs / divisor),
        avg_fat_per_day=round_half_up(fat / divisor),
        monthly_calorie_target=monthly_target,
        adherence_rate=adherence,
        daily_calories=daily_calories,
        macro_distribution=_macro_distribution(protein, carbs, fat),
    )


def available_months(meals: Iterable[Meal]) -> List[str]:
    """Distinct YYYY-MM values that have at least one meal, ascending."""
    return sorted({m.date[:7] for m in meals})
