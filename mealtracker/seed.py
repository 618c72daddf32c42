"""
Create the tables and, optionally, the demo account.

    python -m mealtracker.seed           # tables only
    python -m mealtracker.seed --demo    # tables + demo@example.com / demo123
"""
import argparse
import logging

from mealtracker.core.config import settings
from mealtracker.db.session import SessionLocal, init_db
from mealtracker.services.credentials import DEMO_EMAIL, ensure_demo_user

logger = logging.getLogger(__name__)


def seed(with_demo: bool = False) -> None:
    init_db()
    logger.info("Database ready at %s", settings.database_url)

    if not with_demo:
        return

    with SessionLocal() as db:
        user = ensure_demo_user(db)
    logger.info("Demo user available: %s (id=%s)", DEMO_EMAIL, user.id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Prepare the MealTracker database")
    parser.add_argument("--demo", action="store_true", help="also create the demo account")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    seed(with_demo=args.demo)


if __name__ == "__main__":
    main()
