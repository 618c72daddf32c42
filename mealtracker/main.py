import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mealtracker.api import auth, meals, nutrition, reports
from mealtracker.core.config import settings
from mealtracker.core.errors import register_exception_handlers
from mealtracker.db.session import SessionLocal, init_db
from mealtracker.deps import get_db
from mealtracker.services.sessions import SessionSweeper

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    sweeper = SessionSweeper(SessionLocal, settings.session_sweep_interval_seconds)
    if settings.session_sweep_enabled:
        sweeper.start()
    app.state.session_sweeper = sweeper
    logger.info("MealTracker API started (environment=%s)", settings.environment)
    try:
        yield
    finally:
        await sweeper.stop()


def create_app() -> FastAPI:
    app = FastAPI(title="MealTracker API", lifespan=lifespan)

    if settings.cors_origin_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(meals.router)
    app.include_router(reports.router)
    app.include_router(nutrition.router)

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            db_ok = True
        except SQLAlchemyError as e:
            logger.error(f"Health check: database unavailable: {e}")
            db_ok = False
        return {"status": "ok", "app": "MealTracker", "db": db_ok}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("mealtracker.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
