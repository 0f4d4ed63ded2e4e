# services/image_service.py
"""
Image Service
Photo lookups against the Unsplash API for packages and AI itineraries.

A failed lookup is never an error for the caller: searches return an empty
list and single-photo lookups return None.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import httpx
from loguru import logger

MAX_ACTIVITY_LOOKUPS = 5


class ImageService:

    def __init__(self, client: httpx.AsyncClient, access_key: str,
                 api_url: str = "https://api.unsplash.com", timeout: float = 10.0):
        self.client = client
        self.access_key = access_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.access_key)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Client-ID {self.access_key}"}

    @staticmethod
    def _regular_url(photo: dict) -> Optional[str]:
        urls = photo.get("urls")
        return urls.get("regular") if isinstance(urls, dict) else None

    async def search_photos(self, query: str, count: int = 5) -> List[dict]:
        """Ranked photo results for `query`, landscape only"""
        if not self.enabled:
            return []
        try:
            response = await self.client.get(
                f"{self.api_url}/search/photos",
                params={"query": query, "per_page": count, "orientation": "landscape"},
                headers=self._headers(),
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.warning(f"Image search for '{query}' failed: HTTP {response.status_code}")
                return []
            body = response.json()
            results = body.get("results") if isinstance(body, dict) else None
            if not isinstance(results, list):
                logger.warning(f"Image search for '{query}' returned an unexpected body")
                return []
            return [photo for photo in results if isinstance(photo, dict)]
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Image search error for '{query}': {e}")
            return []

    async def get_destination_images(self, destination: str, country: str) -> List[str]:
        photos = await self.search_photos(f"{destination} {country} travel", 6)
        return [url for url in (self._regular_url(p) for p in photos) if url]

    async def get_random_photo(self, query: str) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            response = await self.client.get(
                f"{self.api_url}/photos/random",
                params={"query": query, "orientation": "landscape"},
                headers=self._headers(),
                timeout=self.timeout,
            )
            if response.status_code != 200:
                return None
            body = response.json()
            return self._regular_url(body) if isinstance(body, dict) else None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Random photo error for '{query}': {e}")
            return None

    async def _first_url(self, query: str) -> Optional[str]:
        photos = await self.search_photos(query, 1)
        return self._regular_url(photos[0]) if photos else None

    async def get_itinerary_images(self, destination: str,
                                   activities: List[str]) -> Tuple[Optional[str], Dict[str, str]]:
        """
        Destination main image plus an image per activity.

        At most five activities are looked up; all lookups run concurrently
        and the ones that fail are simply missing from the result.
        """
        lookups = activities[:MAX_ACTIVITY_LOOKUPS]
        results = await asyncio.gather(
            self._first_url(f"{destination} landmark"),
            *(self._first_url(f"{activity} {destination}") for activity in lookups),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Image lookup for {destination} failed: {result!r}")
        urls = [url if isinstance(url, str) else None for url in results]

        main = urls[0]
        by_activity = {activity: url for activity, url in zip(lookups, urls[1:]) if url}
        logger.info(f"Found {len(by_activity) + bool(main)} images for {destination}")
        return main, by_activity
