"""Integration tests for /meals and /reports."""

from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.testclient import TestClient

from mealtracker.core.config import settings
from mealtracker.services.meal_repository import MealRepository

from helpers import meal_payload


def _create(client, **overrides):
    response = client.post("/meals", json=meal_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


_LOCKED = SQLAlchemyError("(sqlite3.OperationalError) database is locked")


class TestMealsRequireLogin:
    """Every meal route is closed to anonymous callers."""

    def test_anonymous_requests(self, client):
        for method, path in [
            ("get", "/meals"),
            ("post", "/meals"),
            ("get", "/meals/1"),
            ("put", "/meals/1"),
            ("delete", "/meals/1"),
        ]:
            response = getattr(client, method)(path)
            assert response.status_code == 401, (method, path)
            assert response.json() == {"error": "Not authenticated"}


class TestCreateMeal:
    """Tests for POST /meals."""

    def test_create_returns_camel_case(self, alice):
        """The created meal comes back with ids, children and camelCase keys."""
        meal = _create(alice)

        assert meal["id"] > 0
        assert meal["userId"] > 0
        assert meal["mealType"] == "Lunch"
        assert meal["originalName"] == "white rice"
        assert meal["serving"]["originalUnit"] == "cup"
        assert [m["measure"] for m in meal["altMeasures"]] == ["xícara", "oz"]
        assert meal["altMeasures"][1]["servingWeight"] == 28.35

    def test_user_id_in_body_is_ignored(self, alice, bob):
        """Ownership comes from the session, never from the payload."""
        bob_id = bob.get("/auth/me").json()["user"]["id"]
        meal = _create(alice, userId=bob_id)

        assert meal["userId"] != bob_id
        assert bob.get("/meals").json() == []

    def test_missing_required_field(self, alice):
        payload = meal_payload()
        del payload["calories"]
        response = alice.post("/meals", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: calories"}

    def test_invalid_meal_type(self, alice):
        response = alice.post("/meals", json=meal_payload(mealType="Brunch"))
        assert response.status_code == 400
        assert "mealType" in response.json()["error"]

    def test_impossible_date(self, alice):
        """2024-02-31 matches the pattern but is not a date."""
        response = alice.post("/meals", json=meal_payload(date="2024-02-31"))
        assert response.status_code == 400

    def test_negative_calories(self, alice):
        response = alice.post("/meals", json=meal_payload(calories=-5))
        assert response.status_code == 400


class TestListMeals:
    """Tests for GET /meals."""

    def test_filters(self, alice):
        _create(alice, date="2024-03-15", name="A")
        _create(alice, date="2024-03-20", name="B")
        _create(alice, date="2024-04-01", name="C")

        assert [m["name"] for m in alice.get("/meals").json()] == ["C", "B", "A"]
        assert [m["name"] for m in alice.get("/meals", params={"date": "2024-03-15"}).json()] == ["A"]
        assert [m["name"] for m in alice.get("/meals", params={"month": "2024-03"}).json()] == ["B", "A"]

    def test_bad_filter_format(self, alice):
        assert alice.get("/meals", params={"date": "15/03/2024"}).status_code == 400
        assert alice.get("/meals", params={"month": "2024-3"}).status_code == 400


class TestMealOwnership:
    """Two users, one meal: only the owner can see or touch it."""

    def test_other_user_gets_404(self, alice, bob):
        meal_id = _create(alice)["id"]

        for response in (
            bob.get(f"/meals/{meal_id}"),
            bob.put(f"/meals/{meal_id}", json=meal_payload(name="Hijacked")),
            bob.delete(f"/meals/{meal_id}"),
        ):
            assert response.status_code == 404
            assert response.json() == {"error": "Meal not found"}

        mine = alice.get(f"/meals/{meal_id}")
        assert mine.status_code == 200
        assert mine.json()["name"] == "Arroz branco"

    def test_lists_are_separate(self, alice, bob):
        _create(alice)
        assert len(alice.get("/meals").json()) == 1
        assert bob.get("/meals").json() == []


class TestUpdateMeal:
    """Tests for PUT /meals/{id}."""

    def test_put_replaces_children(self, alice):
        """Serving removed, alt measures replaced by the new list."""
        meal_id = _create(alice)["id"]

        response = alice.put(
            f"/meals/{meal_id}",
            json=meal_payload(
                name="Arroz integral",
                mealType="DINNER",
                serving=None,
                altMeasures=[{"servingWeight": 195, "measure": "tigela", "qty": 1}],
            ),
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == meal_id
        assert updated["name"] == "Arroz integral"
        assert updated["mealType"] == "Dinner"
        assert updated["serving"] is None
        assert [m["measure"] for m in updated["altMeasures"]] == ["tigela"]

        fetched = alice.get(f"/meals/{meal_id}").json()
        assert fetched["altMeasures"] == updated["altMeasures"]

    def test_put_missing_meal(self, alice):
        assert alice.put("/meals/9999", json=meal_payload()).status_code == 404


class TestDeleteMeal:
    """Tests for DELETE /meals/{id}."""

    def test_delete(self, alice):
        meal_id = _create(alice)["id"]

        response = alice.delete(f"/meals/{meal_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Meal deleted successfully"}
        assert alice.get(f"/meals/{meal_id}").status_code == 404

    def test_delete_twice(self, alice):
        meal_id = _create(alice)["id"]
        alice.delete(f"/meals/{meal_id}")
        assert alice.delete(f"/meals/{meal_id}").status_code == 404


class TestImportMeals:
    """Tests for POST /meals/import."""

    def test_anonymous(self, client):
        response = client.post("/meals/import", json={"meals": [meal_payload()]})
        assert response.status_code == 401

    def test_import(self, alice):
        response = alice.post(
            "/meals/import",
            json={"meals": [meal_payload(name="A"), meal_payload(name="B", date="2024-03-16")]},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Successfully imported 2 meals"
        assert [m["name"] for m in data["meals"]] == ["A", "B"]
        assert len(data["meals"][0]["altMeasures"]) == 2
        assert [m["name"] for m in alice.get("/meals").json()] == ["B", "A"]

    def test_import_is_scoped_to_caller(self, alice, bob):
        """Meals land in the caller's account whatever userId the payload names."""
        bob_id = bob.get("/auth/me").json()["user"]["id"]
        response = alice.post("/meals/import", json={"meals": [meal_payload(userId=bob_id)]})

        assert response.status_code == 201
        assert response.json()["meals"][0]["userId"] != bob_id
        assert bob.get("/meals").json() == []
        assert len(alice.get("/meals").json()) == 1

    def test_one_invalid_meal_rejects_all(self, alice):
        bad = meal_payload()
        del bad["calories"]
        response = alice.post("/meals/import", json={"meals": [meal_payload(), bad]})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: meals.1.calories"}
        assert alice.get("/meals").json() == []

    def test_empty_list(self, alice):
        assert alice.post("/meals/import", json={"meals": []}).status_code == 400

    def test_storage_failure_stores_nothing(self, alice):
        with patch.object(Session, "commit", side_effect=_LOCKED):
            response = alice.post(
                "/meals/import", json={"meals": [meal_payload(name="A"), meal_payload(name="B")]}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to import meals"}
        assert alice.get("/meals").json() == []


class TestServerErrors:
    """Failures inside the server never leak details to the client."""

    def test_storage_failure_message_is_generic(self, alice):
        with patch.object(Session, "commit", side_effect=_LOCKED):
            response = alice.post("/meals", json=meal_payload())

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to add meal"}
        assert "sqlite3" not in response.text
        assert alice.get("/meals").json() == []

    def test_unexpected_exception(self, app, alice):
        token = alice.cookies.get(settings.session_cookie_name)
        crashing = TestClient(app, raise_server_exceptions=False)

        with patch.object(MealRepository, "list", side_effect=RuntimeError("boom at 0xdeadbeef")):
            response = crashing.get(
                "/meals", headers={"Cookie": f"{settings.session_cookie_name}={token}"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "boom" not in response.text


class TestReports:
    """Tests for the /reports endpoints."""

    def test_anonymous(self, client):
        assert client.get("/reports/daily").status_code == 401

    def test_daily(self, alice, bob):
        _create(alice, date="2024-03-15", calories=500, mealType="Breakfast")
        _create(alice, date="2024-03-15", calories=700, mealType="Dinner")
        _create(bob, date="2024-03-15", calories=9999)

        report = alice.get("/reports/daily", params={"date": "2024-03-15"}).json()

        assert report["totalCalories"] == 1200
        assert report["entryCount"] == 2
        assert report["caloriesByMealType"]["Dinner"] == 700

    def test_weekly(self, alice):
        _create(alice, date="2024-03-10", calories=2000)
        _create(alice, date="2024-03-16", calories=1000)
        _create(alice, date="2024-03-17", calories=5000)

        report = alice.get("/reports/weekly", params={"start": "2024-03-10"}).json()

        assert report["weekStart"] == "2024-03-10"
        assert report["weekEnd"] == "2024-03-16"
        assert len(report["days"]) == 7
        assert report["totalCalories"] == 3000
        assert report["daysLogged"] == 2
        assert report["avgDailyCalories"] == 1500

    def test_weekly_defaults_to_last_seven_days(self, alice):
        report = alice.get("/reports/weekly").json()
        assert len(report["days"]) == 7

    def test_monthly(self, alice):
        _create(alice, date="2024-02-10", calories=1500)
        report = alice.get("/reports/monthly", params={"month": "2024-02"}).json()

        assert report["daysInMonth"] == 29
        assert report["mealCount"] == 1
        assert report["avgCaloriesPerDay"] == 1500
        assert len(report["dailyCalories"]) == 29

    def test_weekly_start_at_end_of_calendar(self, alice):
        """A week starting on 9999-12-30 has no end date."""
        response = alice.get("/reports/weekly", params={"start": "9999-12-30"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid date: 9999-12-30"}

    def test_invalid_month(self, alice):
        response = alice.get("/reports/monthly", params={"month": "2024-13"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid month: 2024-13"}

    def test_months(self, alice):
        _create(alice, date="2024-03-15")
        _create(alice, date="2023-11-02")
        _create(alice, date="2024-03-01")

        assert alice.get("/reports/months").json() == {"months": ["2023-11", "2024-03"]}


class TestNutritionixRoutes:
    """Tests for the /nutritionix passthrough routes."""

    def test_anonymous(self, client):
        response = client.post("/nutritionix/search", json={"query": "arroz"})
        assert response.status_code == 401

    def test_not_configured(self, alice):
        """Without API credentials the route answers 500 with a readable error."""
        response = alice.post("/nutritionix/search", json={"query": "arroz"})
        assert response.status_code == 500
        assert response.json() == {"error": "API configuration error"}

    def test_search(self, alice):
        result = {"common": [{"food_name": "arroz", "original_food_name": "rice"}], "branded": []}
        with patch(
            "mealtracker.services.food_lookup.search_foods", new=AsyncMock(return_value=result)
        ) as search:
            response = alice.post("/nutritionix/search", json={"query": "arroz"})

        assert response.status_code == 200
        assert response.json() == result
        search.assert_awaited_once_with("arroz")

    def test_measure(self, alice):
        with patch(
            "mealtracker.services.food_lookup.food_measure", new=AsyncMock(return_value={"foods": []})
        ) as measure:
            response = alice.post(
                "/nutritionix/measure",
                json={"foodName": "rice", "measure": "cup", "quantity": 2},
            )

        assert response.status_code == 200
        measure.assert_awaited_once_with("rice", "cup", 2)

    def test_nutrients_requires_food_name(self, alice):
        response = alice.post("/nutritionix/nutrients", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: foodName"}
