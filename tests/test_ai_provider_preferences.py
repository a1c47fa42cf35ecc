import pytest

from foloup.models import User
from foloup.services import ai_provider_preferences as preferences


@pytest.fixture
async def colleague(db, user) -> User:
    colleague = User(
        email="colleague@example.com",
        hashed_password="x",
        organization_id=user.organization_id,
    )
    db.add(colleague)
    await db.commit()
    await db.refresh(colleague)
    return colleague


@pytest.mark.asyncio
async def test_default_provider_without_preferences(db, user) -> None:
    assert await preferences.resolve_provider(db, user.organization_id, user.id) == "openai"


@pytest.mark.asyncio
async def test_user_preference_is_updated_in_place(db, user) -> None:
    first = await preferences.set_user_preference(db, user.organization_id, user.id, "gemini")
    second = await preferences.set_user_preference(db, user.organization_id, user.id, "openai")

    assert first.id == second.id
    assert second.preferred_provider == "openai"


@pytest.mark.asyncio
async def test_rejects_unknown_provider(db, user) -> None:
    with pytest.raises(ValueError):
        await preferences.set_user_preference(db, user.organization_id, user.id, "claude")


@pytest.mark.asyncio
async def test_organization_preference_applies_to_colleagues(db, user, colleague) -> None:
    await preferences.set_user_preference(db, user.organization_id, colleague.id, "gemini")

    assert await preferences.resolve_provider(db, user.organization_id, user.id) == "gemini"


@pytest.mark.asyncio
async def test_user_preference_beats_organization(db, user, colleague) -> None:
    await preferences.set_user_preference(db, user.organization_id, user.id, "openai")
    await preferences.set_user_preference(db, user.organization_id, colleague.id, "gemini")

    assert await preferences.resolve_provider(db, user.organization_id, user.id) == "openai"


@pytest.mark.asyncio
async def test_delete_is_soft(db, user) -> None:
    preference = await preferences.set_user_preference(
        db, user.organization_id, user.id, "gemini")

    assert await preferences.delete_user_preference(db, user.organization_id, user.id)
    assert not await preferences.delete_user_preference(db, user.organization_id, user.id)

    await db.refresh(preference)
    assert preference.is_active is False
    assert await preferences.resolve_provider(db, user.organization_id, user.id) == "openai"


@pytest.mark.asyncio
async def test_other_organizations_are_ignored(db, user) -> None:
    await preferences.set_user_preference(db, "org_other", user.id, "gemini")

    assert await preferences.resolve_provider(db, user.organization_id, user.id) == "openai"
