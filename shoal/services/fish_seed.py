"""Seed data: the template fish every new session starts from."""

from sqlalchemy.ext.asyncio import AsyncSession

from shoal.models.fish import Fish

TEMPLATE_FISH = [
    {"name": "Nemo", "species": "Clownfish", "age": 2, "weight_kg": 0.1},
    {"name": "Dory", "species": "Blue Tang", "age": 5, "weight_kg": 0.3},
    {"name": "Sam", "species": "Sockeye Salmon", "age": 5, "weight_kg": 5.2},
    {"name": "Barry", "species": "Great Barracuda", "age": 11, "weight_kg": 8.3},
]


async def seed_templates(db: AsyncSession, templates: list[dict]) -> int:
    """Insert template rows (no owning session), in order.

    Returns count of created rows.
    """
    for fish_data in templates:
        db.add(Fish(session_id=None, **fish_data))
    await db.flush()
    return len(templates)
