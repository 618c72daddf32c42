from mealtracker.db.base import Base

# Импорты моделей, чтобы Alembic их видел
from mealtracker.models.user import User  # noqa
from mealtracker.models.session import UserSession  # noqa
from mealtracker.models.meal import Meal  # noqa
from mealtracker.models.serving import Serving  # noqa
from mealtracker.models.alt_measure import AltMeasure  # noqa
