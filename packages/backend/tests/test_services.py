"""Service-layer tests — UserService and ProjectService without HTTP.

Learn: The services are plain classes over an AsyncSession, so they can
be exercised directly. These tests pin down the return values (User
rows, MutationResult variants) and raised errors that the routes then
translate to HTTP.
"""

import pytest
from sqlalchemy import func, select

from gamehound.db.models import Task
from gamehound.errors import AuthError, ConflictError, NotFoundError, ValidationError
from gamehound.services.project_service import MutationResult, ProjectService
from gamehound.services.user_service import UserService


@pytest.fixture
def users(db_session):
    return UserService(db_session, bcrypt_rounds=4)


@pytest.fixture
def projects(db_session):
    return ProjectService(db_session)


# ═══════════════════════════════════════════════════════════
# UserService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_hashes_password(users):
    user = await users.register("hash@studio.dev", "plain-secret", "Hash")
    assert user.id is not None
    assert user.role == "developer"
    assert user.password_hash.startswith("$2b$")
    assert "plain-secret" not in user.password_hash


@pytest.mark.asyncio
async def test_register_twice_raises_conflict(users):
    await users.register("twice@studio.dev", "pw", "One")
    with pytest.raises(ConflictError):
        await users.register("twice@studio.dev", "pw", "Two")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password,name",
    [(None, "pw", "N"), ("e@studio.dev", None, "N"), ("e@studio.dev", "pw", ""), ("", "", "")],
)
async def test_register_requires_all_fields(users, email, password, name):
    with pytest.raises(ValidationError):
        await users.register(email, password, name)


@pytest.mark.asyncio
async def test_authenticate_messages_match(users):
    await users.register("auth@studio.dev", "right", "Auth")

    with pytest.raises(AuthError) as wrong_pw:
        await users.authenticate("auth@studio.dev", "wrong")
    with pytest.raises(AuthError) as no_user:
        await users.authenticate("missing@studio.dev", "right")

    assert wrong_pw.value.message == no_user.value.message
    assert wrong_pw.value.status_code == no_user.value.status_code


@pytest.mark.asyncio
async def test_authenticate_success(users):
    created = await users.register("ok@studio.dev", "right", "Ok")
    user = await users.authenticate("ok@studio.dev", "right")
    assert user.id == created.id


@pytest.mark.asyncio
async def test_set_role(users):
    await users.register("promote@studio.dev", "pw", "P")
    user = await users.set_role("promote@studio.dev", "lead")
    assert user.role == "lead"


@pytest.mark.asyncio
async def test_set_role_rejects_unknown_role(users):
    await users.register("badrole@studio.dev", "pw", "B")
    with pytest.raises(ValidationError):
        await users.set_role("badrole@studio.dev", "admin")


@pytest.mark.asyncio
async def test_set_role_unknown_user(users):
    with pytest.raises(NotFoundError):
        await users.set_role("nobody@studio.dev", "lead")


# ═══════════════════════════════════════════════════════════
# ProjectService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_sets_owner_to_caller(users, projects):
    owner = await users.register("own@studio.dev", "pw", "Own")
    project = await projects.create_project(owner.id, "Owned")
    assert project.owner_id == owner.id


@pytest.mark.asyncio
async def test_create_requires_title(users, projects):
    owner = await users.register("t@studio.dev", "pw", "T")
    with pytest.raises(ValidationError):
        await projects.create_project(owner.id, "")


@pytest.mark.asyncio
async def test_mutation_results(users, projects):
    owner = await users.register("m1@studio.dev", "pw", "M1")
    stranger = await users.register("m2@studio.dev", "pw", "M2")
    project = await projects.create_project(owner.id, "Guarded")

    assert (
        await projects.update_project(project.id, stranger.id, {"title": "X"})
        == MutationResult.NOT_FOUND_OR_NOT_OWNED
    )
    assert (
        await projects.delete_project(project.id, stranger.id)
        == MutationResult.NOT_FOUND_OR_NOT_OWNED
    )
    assert (
        await projects.update_project(project.id, owner.id, {"title": "Renamed"})
        == MutationResult.APPLIED
    )
    row = await projects.get_project(project.id, owner.id)
    assert row["title"] == "Renamed"


@pytest.mark.asyncio
async def test_update_ignores_unknown_fields(users, projects):
    owner = await users.register("uf@studio.dev", "pw", "UF")
    other = await users.register("uf2@studio.dev", "pw", "UF2")
    project = await projects.create_project(owner.id, "Fixed Owner")

    await projects.update_project(project.id, owner.id, {"owner_id": other.id, "id": 999})
    row = await projects.get_project(project.id, owner.id)
    assert row["owner_id"] == owner.id
    assert row["id"] == project.id


@pytest.mark.asyncio
async def test_update_rejects_empty_title(users, projects):
    owner = await users.register("et@studio.dev", "pw", "ET")
    project = await projects.create_project(owner.id, "Has Title")
    with pytest.raises(ValidationError):
        await projects.update_project(project.id, owner.id, {"title": ""})


@pytest.mark.asyncio
async def test_delete_removes_tasks(db_session, users, projects):
    owner = await users.register("tasks@studio.dev", "pw", "Tasks")
    project = await projects.create_project(owner.id, "With Board")
    db_session.add_all([
        Task(project_id=project.id, title="Boss fight"),
        Task(project_id=project.id, title="Save system", status="done"),
    ])
    await db_session.commit()

    assert await projects.delete_project(project.id, owner.id) == MutationResult.APPLIED
    remaining = await db_session.scalar(
        select(func.count(Task.id)).where(Task.project_id == project.id)
    )
    assert remaining == 0


@pytest.mark.asyncio
async def test_is_lead(users, projects):
    dev = await users.register("isdev@studio.dev", "pw", "Dev")
    lead = await users.register("islead@studio.dev", "pw", "Lead")
    await users.set_role("islead@studio.dev", "lead")

    assert await projects.is_lead(dev.id) is False
    assert await projects.is_lead(lead.id) is True
    assert await projects.is_lead(424242) is False
