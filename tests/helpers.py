"""Payloads and request helpers shared by the test modules."""

SAMPLE_MEAL = {
    "date": "2024-03-15",
    "name": "Arroz branco",
    "originalName": "white rice",
    "calories": 206,
    "protein": 4.3,
    "carbs": 44.5,
    "fat": 0.4,
    "mealType": "lunch",
    "foodId": "rice-001",
    "serving": {"quantity": 1, "unit": "xícara", "originalUnit": "cup", "weight": 158},
    "altMeasures": [
        {"servingWeight": 158, "measure": "xícara", "originalMeasure": "cup", "seq": 1, "qty": 1},
        {"servingWeight": 28.35, "measure": "oz", "originalMeasure": "oz", "seq": 2, "qty": 1},
    ],
}


def meal_payload(**overrides):
    payload = dict(SAMPLE_MEAL)
    payload.update(overrides)
    return payload


def signup(client, email="alice@example.com", password="secret123", name="Alice"):
    return client.post("/auth/signup", json={"email": email, "password": password, "name": name})
