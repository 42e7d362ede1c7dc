import pytest


def _names(resp):
    assert resp.status_code == 200
    return [r["name"] for r in resp.get_json()]


def test_list_ordered_by_name(client):
    assert _names(client.get("/api/restaurants")) == ["La Bella Italia", "Sakura Sushi Bar", "The Burger Joint"]


def test_search_matches_name_or_description(client):
    assert _names(client.get("/api/restaurants?search=SUSHI")) == ["Sakura Sushi Bar"]
    assert _names(client.get("/api/restaurants?search=milkshakes")) == ["The Burger Joint"]
    assert _names(client.get("/api/restaurants?search=nothing-like-this")) == []


def test_cuisine_filter_is_case_insensitive(client):
    assert _names(client.get("/api/restaurants?cuisine=italian")) == ["La Bella Italia"]


@pytest.mark.parametrize("band,expected", [
    ("$", ["The Burger Joint"]),
    ("$$", []),
    ("$$$", ["Sakura Sushi Bar"]),
    ("$$$$", []),
])
def test_price_bands_use_average_price(client, band, expected):
    # La Bella Italia has no average price and never matches a band
    assert _names(client.get("/api/restaurants", query_string={"price": band})) == expected


def test_unknown_price_band(client):
    r = client.get("/api/restaurants?price=cheap")
    assert r.status_code == 400


def test_detail_and_menu(client, bella):
    r = client.get(f"/api/restaurants/{bella}")
    assert r.status_code == 200
    data = r.get_json()
    assert data["cuisine"] == "Italian"
    assert data["average_price"] is None

    menu = client.get(f"/api/restaurants/{bella}/menu").get_json()
    assert [(m["category"], m["name"], m["price"]) for m in menu] == [
        ("Pasta", "Spaghetti Carbonara", "18.99"),
        ("Pizza", "Margherita Pizza", "16.99"),
    ]


def test_missing_restaurant(client):
    assert client.get("/api/restaurants/9999").status_code == 404
    assert client.get("/api/restaurants/9999/menu").status_code == 404


def test_menu_items(client):
    r = client.get("/api/menu-items")
    assert r.status_code == 200
    items = r.get_json()
    assert [m["name"] for m in items][:2] == ["Chef's Omakase", "Classic Cheeseburger"]
    assert len(items) == 6

    first = items[0]
    r = client.get(f"/api/menu-items/{first['id']}")
    assert r.status_code == 200
    assert r.get_json() == first
    assert client.get("/api/menu-items/9999").status_code == 404
