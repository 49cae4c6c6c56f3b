"""Receipt API tests."""

from unittest.mock import patch

from receipt_tracker.exceptions import DataAccessError
from receipt_tracker.services.learned_patterns import LearnedPatternStore


def receipt_payload(categories_by_name, **overrides):
    payload = {
        "merchant": "Rema 1000",
        "receipt_date": "2026-01-10",
        "total_amount": 146.4,
        "ocr_method": "vision",
        "confidence_score": 0.9,
        "items": [
            {
                "item_name": "Kaffe Friele",
                "total_price": 89.9,
                "category_id": categories_by_name["Kaffe"],
                "confirmed": True,
            },
            {
                "item_name": "Melk lettmelk 1L",
                "quantity": 2,
                "unit_price": 12.25,
                "total_price": 24.5,
                "category_id": categories_by_name["Melk"],
            },
            {"item_name": "Pant", "total_price": 32.0},
        ],
    }
    payload.update(overrides)
    return payload


def test_create_receipt_learns_confirmed_items(client, auth_headers, categories_by_name):
    response = client.post(
        "/api/v1/receipts", headers=auth_headers, json=receipt_payload(categories_by_name)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["merchant"] == "Rema 1000"
    assert data["learned_count"] == 1
    assert [item["line_number"] for item in data["items"]] == [1, 2, 3]
    assert data["items"][1]["quantity"] == 2
    assert data["items"][2]["category_id"] is None

    learned = client.get("/api/v1/learned-categories", headers=auth_headers).json()
    assert [lc["item_pattern"] for lc in learned] == ["kaffe friele"]


def test_saved_correction_drives_next_resolution(client, auth_headers, categories_by_name):
    """A category confirmed on one receipt is suggested on the next scan."""
    kaffe = categories_by_name["Kaffe"]
    payload = receipt_payload(
        categories_by_name,
        items=[
            {"item_name": "Kaffe", "total_price": 89.9, "category_id": kaffe, "confirmed": True}
        ],
    )
    client.post("/api/v1/receipts", headers=auth_headers, json=payload)

    response = client.post(
        "/api/v1/learned-categories/resolve",
        headers=auth_headers,
        json={"item_name": "Frokost Kaffe Sort", "suggested_category": "Godteri"},
    )
    assert response.json()["category_id"] == kaffe


def test_learned_count_skips_names_too_short_to_learn(client, auth_headers, categories_by_name):
    payload = receipt_payload(
        categories_by_name,
        items=[
            {
                "item_name": "Øl",
                "total_price": 39.9,
                "category_id": categories_by_name["Annet"],
                "confirmed": True,
            }
        ],
    )

    response = client.post("/api/v1/receipts", headers=auth_headers, json=payload)

    assert response.status_code == 201
    assert response.json()["learned_count"] == 0
    assert client.get("/api/v1/learned-categories", headers=auth_headers).json() == []

def test_create_receipt_rejects_foreign_category(client, auth_headers, categories_by_name):
    payload = receipt_payload(categories_by_name)
    payload["items"][0]["category_id"] = 99999

    response = client.post("/api/v1/receipts", headers=auth_headers, json=payload)

    assert response.status_code == 400
    assert "99999" in response.json()["detail"]


def test_receipt_is_saved_when_learning_fails(client, auth_headers, categories_by_name):
    with patch.object(LearnedPatternStore, "upsert", side_effect=DataAccessError("database down")):
        response = client.post(
            "/api/v1/receipts", headers=auth_headers, json=receipt_payload(categories_by_name)
        )

    assert response.status_code == 201
    assert response.json()["learned_count"] == 0
    assert len(client.get("/api/v1/receipts", headers=auth_headers).json()) == 1


def test_list_get_and_delete_receipts(client, auth_headers, categories_by_name):
    older = client.post(
        "/api/v1/receipts",
        headers=auth_headers,
        json=receipt_payload(categories_by_name, receipt_date="2026-01-02", items=[]),
    ).json()
    newer = client.post(
        "/api/v1/receipts",
        headers=auth_headers,
        json=receipt_payload(categories_by_name, receipt_date="2026-01-09"),
    ).json()

    listed = client.get("/api/v1/receipts", headers=auth_headers).json()
    assert [r["id"] for r in listed] == [newer["id"], older["id"]]

    response = client.get(f"/api/v1/receipts/{newer['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()["items"]) == 3

    assert client.delete(f"/api/v1/receipts/{newer['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/receipts/{newer['id']}", headers=auth_headers).status_code == 404

    # Learned categories outlive the receipt they came from
    assert len(client.get("/api/v1/learned-categories", headers=auth_headers).json()) == 1


def test_deleting_category_uncategorizes_receipt_items(client, auth_headers, categories_by_name):
    created = client.post(
        "/api/v1/receipts", headers=auth_headers, json=receipt_payload(categories_by_name)
    ).json()

    client.delete(f"/api/v1/categories/{categories_by_name['Melk']}", headers=auth_headers)

    items = client.get(f"/api/v1/receipts/{created['id']}", headers=auth_headers).json()["items"]
    assert items[0]["category_id"] == categories_by_name["Kaffe"]
    assert items[1]["category_id"] is None
