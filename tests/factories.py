"""Test doubles and sample data shared across the test modules"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import quote

import httpx
from fastapi.testclient import TestClient

from travelbook.llm.llm_client import LLMClient
from travelbook.schemas.travel_schemas import PackageCreate, TravelCategory, Traveler


class FakeLLM(LLMClient):
    """Answers every prompt with the same canned text"""

    provider = "fake"
    model = "canned"

    def __init__(self, text: str = ""):
        self.text = text
        self.prompts: List[str] = []

    async def complete_json(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


def generated_day(number: int) -> dict:
    return {
        "day": number,
        "title": f"{number}. nap Rómában",
        "description": "Séta a belvárosban",
        "morning": {"activity": f"Colosseum {number}", "description": "Látogatás", "duration": "3 óra",
                    "location": "Colosseum", "tips": "Foglalj jegyet előre"},
        "afternoon": {"activity": "Forum Romanum", "description": "Romok", "duration": "2 óra",
                      "location": "Forum", "cost": "18 EUR"},
        "evening": {"activity": "Trastevere vacsora", "description": "Helyi ízek", "duration": "2 óra",
                    "location": "Trastevere"},
        "accommodation": {"name": "Hotel Roma", "type": "hotel", "priceRange": "40 000 Ft/éj"},
        "meals": [
            {"type": "breakfast", "recommendation": "Cornetto", "cuisine": "olasz", "priceRange": "olcsó"},
            {"type": "lunch", "recommendation": "Pizza al taglio", "cuisine": "olasz", "priceRange": "olcsó"},
            {"type": "dinner", "recommendation": "Cacio e pepe", "cuisine": "római", "priceRange": "közepes"},
        ],
    }


def generated_itinerary(days: int = 3) -> dict:
    return {
        "title": "Örök város",
        "summary": "Róma klasszikusai",
        "days": [generated_day(n) for n in range(1, days + 1)],
        "estimatedBudget": {"min": 150000, "max": 250000, "currency": "HUF"},
        "tips": ["Kényelmes cipő", "Vizes palack"],
        "bestTimeToVisit": "Tavasz",
    }


def photo_api(request: httpx.Request) -> httpx.Response:
    """Unsplash stand-in: URLs are derived from the query"""
    if request.headers.get("Authorization") != "Client-ID test-key":
        return httpx.Response(401, json={"errors": ["OAuth error"]})
    query = request.url.params.get("query", "")
    url = f"https://img.test/{quote(query)}"
    if request.url.path == "/search/photos":
        per_page = int(request.url.params.get("per_page", "1"))
        return httpx.Response(200, json={"results": [{"urls": {"regular": f"{url}?n={i}"}} for i in range(per_page)]})
    if request.url.path == "/photos/random":
        return httpx.Response(200, json={"urls": {"regular": url}})
    return httpx.Response(404)


def make_package(**overrides) -> PackageCreate:
    departure = datetime(2030, 6, 10, 8, 0, tzinfo=timezone.utc)
    data = dict(
        title="Római vakáció",
        description="Egy hét az örök városban",
        destination="Róma",
        country="Olaszország",
        continent="Európa",
        price=50000,
        duration=5,
        max_group_size=10,
        category=TravelCategory.CITY,
        departure_date=departure,
        return_date=departure + timedelta(days=4),
    )
    data.update(overrides)
    return PackageCreate(**data)


def make_travelers(count: int, email: Optional[str] = None) -> List[Traveler]:
    return [Traveler(name=f"Utas {i}", email=email or f"utas{i}@example.hu") for i in range(1, count + 1)]


def register(client: TestClient, email: str, password: str = "titkos-jelszo", name: str = "Teszt Elek") -> dict:
    """
    Register through the API.

    Returns the new user's id and the session id; the client's cookie jar is
    cleared so several users can share one TestClient via headers.
    """
    response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    client.cookies.clear()
    body = response.json()
    return {"session_id": body["sessionId"], "user_id": body["user"]["id"]}
