"""Fish service: queries scoped to one session, or to the template rows.

A `session_id` of None means the template scope. Callers own the transaction.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shoal.core.errors import NotFoundError
from shoal.models.fish import Fish


def _in_scope(session_id: str | None):
    if session_id is None:
        return Fish.session_id.is_(None)
    return Fish.session_id == session_id


async def list_fish(db: AsyncSession, session_id: str | None) -> list[Fish]:
    """List fish visible in a scope, in insertion order."""
    result = await db.execute(
        select(Fish).where(_in_scope(session_id)).order_by(Fish.id.asc())
    )
    return list(result.scalars().all())


async def get_fish(db: AsyncSession, session_id: str | None, fish_id: int) -> Fish:
    """Get one fish. Raises NotFoundError if it isn't in this scope."""
    result = await db.execute(
        select(Fish).where(Fish.id == fish_id, _in_scope(session_id))
    )
    fish = result.scalar_one_or_none()
    if fish is None:
        raise NotFoundError.fish(fish_id)
    return fish


async def create_fish(
    db: AsyncSession,
    *,
    session_id: str,
    name: str,
    species: str,
    age: int,
    weight_kg: float,
) -> Fish:
    fish = Fish(
        session_id=session_id,
        name=name,
        species=species,
        age=age,
        weight_kg=weight_kg,
    )
    db.add(fish)
    await db.flush()
    return fish


async def update_fish(
    db: AsyncSession, session_id: str, fish_id: int, changes: dict
) -> Fish:
    """Apply a partial update. Keys missing from `changes` keep their value."""
    fish = await get_fish(db, session_id, fish_id)
    for field, value in changes.items():
        setattr(fish, field, value)
    await db.flush()
    return fish


async def delete_fish(db: AsyncSession, session_id: str, fish_id: int) -> Fish:
    """Delete a fish and return it as it was before deletion."""
    fish = await get_fish(db, session_id, fish_id)
    await db.delete(fish)
    await db.flush()
    return fish


async def copy_templates(db: AsyncSession, session_id: str) -> int:
    """Give a session its own copy of every template fish.

    Returns count of copied rows.
    """
    templates = await list_fish(db, None)
    for template in templates:
        db.add(
            Fish(
                session_id=session_id,
                name=template.name,
                species=template.species,
                age=template.age,
                weight_kg=template.weight_kg,
            )
        )
    await db.flush()
    return len(templates)
