"""Daily / weekly / monthly nutrition reports for the current user."""
from datetime import date as date_type, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealtracker.api.meals import get_meal_repository
from mealtracker.core.config import settings
from mealtracker.core.errors import ValidationError
from mealtracker.deps import get_current_user
from mealtracker.models.user import User
from mealtracker.schemas.meal import DATE_PATTERN, MONTH_PATTERN
from mealtracker.schemas.report import AvailableMonths, DaySummary, MonthlyReport, WeeklyReport
from mealtracker.services import reports
from mealtracker.services.meal_repository import MealRepository

router = APIRouter(prefix="/reports", tags=["reports"])


def _parse_day(value: str) -> date_type:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


def _parse_month(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month: {value}")
    return value


@router.get("/daily", response_model=DaySummary)
def daily_report(
    date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="Defaults to today"),
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    day = _parse_day(date) if date else reports.today_in(settings.timezone)
    day_str = day.isoformat()
    return reports.summarize_day(day_str, repo.list(user.id, date=day_str))


@router.get("/weekly", response_model=WeeklyReport)
def weekly_report(
    start: Optional[str] = Query(None, pattern=DATE_PATTERN, description="First day; defaults to six days ago"),
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    if start:
        week_start = _parse_day(start)
    else:
        week_start = reports.default_week_start(reports.today_in(settings.timezone))
    try:
        week_end = week_start + timedelta(days=reports.WEEK_DAYS - 1)
    except OverflowError:
        # a week starting in the last days of year 9999 has no end date
        raise ValidationError(f"Invalid date: {start}")

    meals = repo.list_between(user.id, week_start.isoformat(), week_end.isoformat())
    return reports.generate_weekly_report(meals, week_start, settings.daily_calorie_target)


@router.get("/monthly", response_model=MonthlyReport)
def monthly_report(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Defaults to the current month"),
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    if month:
        month = _parse_month(month)
    else:
        month = reports.today_in(settings.timezone).strftime("%Y-%m")

    meals = repo.list(user.id, month=month)
    return reports.generate_monthly_report(meals, month, settings.daily_calorie_target)


@router.get("/months", response_model=AvailableMonths)
def months_with_meals(
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    return AvailableMonths(months=reports.available_months(repo.list(user.id)))
