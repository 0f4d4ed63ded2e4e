"""
Seed Script for Travelbook
Loads demo travel packages and an admin account into the configured store.

Usage:
    python -m data.seed_packages
    SEED_ADMIN_EMAIL=admin@example.hu SEED_ADMIN_PASSWORD=... python -m data.seed_packages
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import List

from travelbook.config import settings
from travelbook.context import AppContext, build_context
from travelbook.exceptions import DuplicateEmailError
from travelbook.schemas.travel_schemas import (
    Difficulty,
    MealType,
    PackageCreate,
    PackageItineraryDay,
    TravelCategory,
    UserRole,
)
from travelbook.utils.helpers import format_currency

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@utazzvelunk.hu")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin12345")
ADMIN_NAME = os.getenv("SEED_ADMIN_NAME", "Admin")


def _departure(days_from_now: int, duration: int):
    start = datetime.now(timezone.utc).replace(hour=8, minute=0, second=0, microsecond=0) + timedelta(days=days_from_now)
    return start, start + timedelta(days=duration - 1)


def demo_packages() -> List[PackageCreate]:
    """Demo catalogue, departures relative to today"""
    santorini_start, santorini_end = _departure(45, 7)
    kyoto_start, kyoto_end = _departure(80, 10)
    kenya_start, kenya_end = _departure(120, 8)
    alps_start, alps_end = _departure(150, 6)

    return [
        PackageCreate(
            title="Santorini napfényben",
            short_description="Fehér házak, kék kupolák és naplementék az Égei-tengeren.",
            description="Egy hét Santorinin tengerparti pihenéssel, borkóstolással és hajókirándulással.",
            destination="Santorini",
            country="Görögország",
            continent="Európa",
            price=389000,
            original_price=429000,
            duration=7,
            max_group_size=16,
            difficulty=Difficulty.EASY,
            category=TravelCategory.BEACH,
            cover_image="https://images.unsplash.com/photo-1570077188670-e3a8d69ac5ff",
            included=["Repülőjegy", "Szállás reggelivel", "Hajókirándulás"],
            not_included=["Utasbiztosítás", "Vacsorák"],
            highlights=["Oia naplemente", "Vulkáni strandok", "Borkóstoló"],
            itinerary=[
                PackageItineraryDay(day=1, title="Érkezés Firára", description="Transzfer a szállodába.",
                                    activities=["Városnézés Firán"], meals=[MealType.DINNER]),
                PackageItineraryDay(day=2, title="Kaldera hajóút", activities=["Hajóút", "Fürdés a hőforrásban"],
                                    meals=[MealType.BREAKFAST, MealType.LUNCH]),
            ],
            departure_date=santorini_start,
            return_date=santorini_end,
            is_featured=True,
        ),
        PackageCreate(
            title="Japán kulturális körút",
            short_description="Templomok, teaszertartás és gésanegyedek Kiotóban és Tokióban.",
            description="Tíz nap Japánban: Tokió, Hakone, Kiotó és Nara legszebb helyei.",
            destination="Kiotó",
            country="Japán",
            continent="Ázsia",
            price=899000,
            duration=10,
            max_group_size=12,
            difficulty=Difficulty.MODERATE,
            category=TravelCategory.CULTURAL,
            cover_image="https://images.unsplash.com/photo-1493976040374-85c8e12f0c0e",
            included=["Repülőjegy", "JR Pass", "Szállás", "Magyar idegenvezető"],
            not_included=["Ebédek", "Belépők"],
            highlights=["Fushimi Inari", "Teaszertartás", "Gyorsvasút"],
            departure_date=kyoto_start,
            return_date=kyoto_end,
            is_featured=True,
        ),
        PackageCreate(
            title="Kenyai szafari",
            short_description="A Nagy Ötös nyomában a Maszai Mara rezervátumban.",
            destination="Maszai Mara",
            country="Kenya",
            continent="Afrika",
            price=1249000,
            original_price=1390000,
            duration=8,
            max_group_size=8,
            difficulty=Difficulty.MODERATE,
            category=TravelCategory.SAFARI,
            included=["Repülőjegy", "Sátorszállás teljes ellátással", "Vadlesek"],
            not_included=["Vízum", "Borravaló"],
            highlights=["Gnúvándorlás", "Hőlégballon", "Maszai falu"],
            departure_date=kenya_start,
            return_date=kenya_end,
        ),
        PackageCreate(
            title="Síhét az Alpokban",
            short_description="Hat nap síelés Zell am See pályáin.",
            destination="Zell am See",
            country="Ausztria",
            continent="Európa",
            price=249000,
            duration=6,
            max_group_size=20,
            available_spots=14,
            difficulty=Difficulty.CHALLENGING,
            category=TravelCategory.SKI,
            included=["Busz", "Szállás félpanzióval", "Síbérlet"],
            not_included=["Sífelszerelés"],
            highlights=["Kitzsteinhorn gleccser", "Wellness"],
            departure_date=alps_start,
            return_date=alps_end,
        ),
    ]


async def seed_packages(ctx: AppContext) -> int:
    """Create the demo packages unless the catalogue already has some"""
    existing = await ctx.packages.get_all()
    if existing:
        print(f"Skipping packages: {len(existing)} already present")
        return 0

    count = 0
    for data in demo_packages():
        package = await ctx.packages.create(data)
        print(f"  {package.slug}: {package.title} | {format_currency(package.price, package.currency)} "
              f"| {package.available_spots}/{package.max_group_size} spots")
        count += 1
    print(f"Imported {count} packages")
    return count


async def seed_admin(ctx: AppContext) -> bool:
    """Register the admin account and promote it"""
    try:
        session = await ctx.auth.register(ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)
    except DuplicateEmailError:
        print(f"Admin {ADMIN_EMAIL} already registered")
        return False
    await ctx.users.update_role(session.user.id, UserRole.ADMIN)
    await ctx.auth.logout(session.session_id)
    print(f"Created admin {ADMIN_EMAIL}")
    return True


async def run():
    print("=" * 60)
    print("Travelbook Seed Script")
    print("=" * 60)

    ctx = build_context(settings)
    try:
        if ctx.store.backend == "memory":
            print("Warning: document store is in-memory, seeded data will not persist")
        await seed_packages(ctx)
        await seed_admin(ctx)
    finally:
        await ctx.close()

    print("\n" + "=" * 60)
    print("Seed Complete!")
    print("=" * 60)


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
