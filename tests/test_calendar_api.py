import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from contribution_graph.main import app
from contribution_graph.settings import Settings


client = TestClient(app)


def test_read_root_returns_hello_world() -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello World"}


def test_health_live_returns_ok() -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_reads_layout_defaults_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("WEEK_START", "1")
    monkeypatch.setenv("BLOCK_SIZE", "10")

    options = Settings().default_layout_options()

    assert options.week_start == 1
    assert options.block_size == 10


def test_create_layout_places_monday_after_empty_sunday() -> None:
    response = client.post(
        "/calendar/layout",
        json={
            "activities": [
                {"date": "2024-01-01", "count": 5, "level": 2},
                {"date": "2024-01-03", "count": 0, "level": 0},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["is_empty"] is False
    assert body["available_years"] == [2024]
    week = body["layout"]["weeks"][0]
    assert week[0] is None
    assert week[1] == {"date": "2024-01-01", "count": 5, "level": 2}
    assert week[2] == {"date": "2024-01-02", "count": 0, "level": 0}
    assert body["layout"]["total_count"] == 5
    assert body["layout"]["geometry"]["width"] == 12


def test_create_layout_with_custom_options() -> None:
    response = client.post(
        "/calendar/layout",
        json={
            "activities": [{"date": "2024-01-01", "count": 1, "level": 1}],
            "options": {"block_size": 12, "block_margin": 3, "font_size": 12},
        },
    )

    assert response.status_code == 200
    geometry = response.json()["layout"]["geometry"]
    assert geometry["width"] == 12
    assert geometry["height"] == 20 + 7 * 15 - 3


def test_create_layout_clamps_to_requested_year() -> None:
    response = client.post(
        "/calendar/layout",
        json={
            "activities": [
                {"date": "2023-12-30", "count": 4, "level": 3},
                {"date": "2024-01-02", "count": 1, "level": 1},
                {"date": "2024-01-02", "count": 2, "level": 1},
            ],
            "view": 2024,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["available_years"] == [2024, 2023]
    assert body["layout"]["total_count"] == 2
    assert body["layout"]["year"] == 2024
    assert [cell["activity"]["date"] for cell in body["layout"]["cells"]] == [
        "2024-01-02"
    ]


def test_create_layout_returns_empty_layout_for_no_activities() -> None:
    response = client.post("/calendar/layout", json={"activities": []})

    assert response.status_code == 200
    body = response.json()
    assert body["is_empty"] is True
    assert body["layout"]["weeks"] == []
    assert body["layout"]["month_labels"] == []


def test_create_layout_rejects_out_of_range_level() -> None:
    response = client.post(
        "/calendar/layout",
        json={"activities": [{"date": "2024-01-01", "count": 9, "level": 7}]},
    )

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Activity level 7 for 2024-01-01 is out of range. "
        "It must be between 0 and 4."
    }


@pytest.mark.parametrize(
    "activity",
    [
        {"date": "2024-02-30", "count": 1, "level": 1},
        {"date": "yesterday", "count": 1, "level": 1},
        {"date": "2024-01-01", "count": -1, "level": 0},
    ],
)
def test_create_layout_rejects_malformed_activity(activity: dict[str, object]) -> None:
    response = client.post("/calendar/layout", json={"activities": [activity]})

    assert response.status_code == 422


def test_create_layout_rejects_oversized_range(monkeypatch) -> None:
    monkeypatch.setattr(
        "contribution_graph.api.routes.calendar.settings",
        Settings(max_range_days=30),
    )

    response = client.post(
        "/calendar/layout",
        json={
            "activities": [
                {"date": "2024-01-01", "count": 1, "level": 1},
                {"date": "2024-03-01", "count": 1, "level": 1},
            ]
        },
    )

    assert response.status_code == 422
    assert "limit is 30" in response.json()["detail"]


def test_get_year_options_returns_descending_years() -> None:
    response = client.get("/calendar/years?created=2021&current=2024")

    assert response.status_code == 200
    assert response.json() == {"years": [2024, 2023, 2022, 2021]}


def test_get_year_options_requires_created_year() -> None:
    response = client.get("/calendar/years")

    assert response.status_code == 422


def test_create_layout_rejects_oversized_max_level() -> None:
    response = client.post(
        "/calendar/layout",
        json={
            "activities": [{"date": "2024-01-01", "count": 1, "level": 1}],
            "options": {"max_level": 2_000_000},
        },
    )

    assert response.status_code == 422


def test_create_layout_accepts_max_level_at_limit() -> None:
    response = client.post(
        "/calendar/layout",
        json={
            "activities": [{"date": "2024-01-01", "count": 1, "level": 10}],
            "options": {"max_level": 10},
        },
    )

    assert response.status_code == 200
    assert response.json()["layout"]["legend_levels"] == list(range(11))


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("WEEK_START", "9"),
        ("BLOCK_SIZE", "-1"),
        ("BLOCK_MARGIN", "-2"),
        ("FONT_SIZE", "-3"),
        ("MAX_LEVEL", "11"),
    ],
)
def test_settings_rejects_invalid_layout_defaults(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings()
