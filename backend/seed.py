import asyncio
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from versus_api import db
from versus_api.models import Player, Versus
from versus_api.services.creation import create_versus
from versus_api.services.validation import ObjectiveEntry, PlayerEntry, VersusConfig

logger = logging.getLogger("seed")

DEMO_VERSUS_NAME = "Demo Fitness Challenge"


async def seed_demo_data(s: AsyncSession) -> None:
    # sample players
    existing_players = {
        x.id for x in (await s.execute(select(Player))).scalars().all()
    }
    players = [
        Player(id="demo-alex", email="alex@example.com", display_name="Alex Ruiz"),
        Player(id="demo-bella", email="bella@example.com", display_name="Bella Fernandez"),
        Player(id="demo-carlos", email="carlos@example.com", display_name="Carlos Mendez"),
        Player(id="demo-diana", email="diana@example.com"),
    ]
    for p in players:
        if p.id not in existing_players:
            s.add(p)
    await s.commit()

    # sample versus
    existing = (
        await s.execute(select(Versus).where(Versus.name == DEMO_VERSUS_NAME))
    ).scalar_one_or_none()
    if existing is None:
        versus = await create_versus(
            s,
            "demo-alex",
            VersusConfig(name=DEMO_VERSUS_NAME, type="Fitness Challenge"),
            [
                PlayerEntry(player_id="demo-alex", is_commissioner=True),
                PlayerEntry(player_id="demo-bella"),
                PlayerEntry(email="carlos@example.com", nickname="Carlito"),
                PlayerEntry(email="diana@example.com"),
            ],
            [
                ObjectiveEntry(title="Run 5 miles", points=10),
                ObjectiveEntry(title="Do 20 pushups", points=5),
                ObjectiveEntry(title="Skip the gym", points=-3),
            ],
        )
        logger.info("Seeded versus %s", versus.id)


async def main():
    # Shares the app's engine so SQLite seeds get the same foreign-key cascades.
    try:
        async with db.get_sessionmaker()() as s:
            await seed_demo_data(s)
    finally:
        await db.get_engine().dispose()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
