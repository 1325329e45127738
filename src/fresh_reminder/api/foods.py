"""Food endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Depends, Header, Request, status

from fresh_reminder.api.models import DeleteAck, FoodIn, FoodOut, InsertAck, UpdateAck
from fresh_reminder.domain.identity import VerifiedIdentity  # noqa: TC001
from fresh_reminder.services.access import AccessResult, Denied, owns

if TYPE_CHECKING:
    from fresh_reminder.containers import AppContainer

router = APIRouter(tags=["foods"])


def _unwrap(result: AccessResult) -> VerifiedIdentity:
    if isinstance(result, Denied):
        raise result.error
    return result.identity


async def require_owner(
    request: Request,
    email: str | None = None,
    authorization: str | None = Header(default=None),
) -> VerifiedIdentity:
    """Verify the bearer token, then that its email claim matches ``email``."""
    container: AppContainer = request.app.state.container
    result = await container.access_service.authorize(authorization, [owns(email)])
    return _unwrap(result)


async def require_writer(
    request: Request,
    authorization: str | None = Header(default=None),
) -> VerifiedIdentity | None:
    """Verify the caller of a mutation unless write ownership is disabled."""
    container: AppContainer = request.app.state.container
    if not container.settings.enforce_write_ownership:
        return None
    return _unwrap(await container.access_service.authorize(authorization))


@router.get("/foods", response_model=list[FoodOut])
async def list_foods(request: Request, email: str | None = None) -> list[FoodOut]:
    """List every food, optionally filtered by owner email (not enforced)."""
    container: AppContainer = request.app.state.container
    foods = await container.food_service.list_foods(email)
    return [FoodOut.from_record(food) for food in foods]


@router.get("/food", response_model=list[FoodOut])
async def list_owned_foods(
    request: Request, identity: VerifiedIdentity = Depends(require_owner)
) -> list[FoodOut]:
    """List the foods owned by the verified caller."""
    container: AppContainer = request.app.state.container
    foods = await container.food_service.list_foods(identity.email)
    return [FoodOut.from_record(food) for food in foods]


@router.get("/food/expiring-soon", response_model=list[FoodOut])
async def list_expiring_soon(request: Request) -> list[FoodOut]:
    """Return the soonest-expiring foods within the rolling window."""
    container: AppContainer = request.app.state.container
    foods = await container.food_service.expiring_soon()
    return [FoodOut.from_record(food) for food in foods]


@router.get("/foods/{food_id}", response_model=FoodOut)
async def get_food(food_id: str, request: Request) -> FoodOut:
    """Return one food by id."""
    container: AppContainer = request.app.state.container
    return FoodOut.from_record(await container.food_service.get_food(food_id))


@router.post(
    "/foods", response_model=InsertAck, status_code=status.HTTP_201_CREATED
)
async def create_food(
    body: FoodIn,
    request: Request,
    identity: VerifiedIdentity | None = Depends(require_writer),
) -> InsertAck:
    """Insert a food; the owner defaults to the caller's email."""
    container: AppContainer = request.app.state.container
    owner = body.user_email
    if identity is not None:
        owner = owner or identity.email
        _check_owner(identity, owner)
    outcome = await container.food_service.create_food(body.to_draft(owner))
    return InsertAck.from_outcome(outcome)


@router.put("/foods/{food_id}", response_model=UpdateAck)
async def replace_food(
    food_id: str,
    body: FoodIn,
    request: Request,
    identity: VerifiedIdentity | None = Depends(require_writer),
) -> UpdateAck:
    """Replace a food's fields, creating it when the id is unused."""
    container: AppContainer = request.app.state.container
    owner = body.user_email
    if identity is not None:
        owner = owner or identity.email
        _check_owner(identity, owner)
        await container.food_service.ensure_owner(identity, food_id)
    outcome = await container.food_service.replace_food(food_id, body.to_draft(owner))
    return UpdateAck.from_outcome(outcome)


@router.patch("/foods/{food_id}", response_model=UpdateAck)
async def patch_food_note(
    food_id: str,
    request: Request,
    note: dict[str, Any] = Body(...),
    identity: VerifiedIdentity | None = Depends(require_writer),
) -> UpdateAck:
    """Overwrite the note attached to a food."""
    container: AppContainer = request.app.state.container
    if identity is not None:
        await container.food_service.ensure_owner(identity, food_id)
    outcome = await container.food_service.patch_note(food_id, note)
    return UpdateAck.from_outcome(outcome)


@router.delete("/foods/{food_id}", response_model=DeleteAck)
async def delete_food(
    food_id: str,
    request: Request,
    identity: VerifiedIdentity | None = Depends(require_writer),
) -> DeleteAck:
    """Delete a food by id."""
    container: AppContainer = request.app.state.container
    if identity is not None:
        await container.food_service.ensure_owner(identity, food_id)
    deleted = await container.food_service.delete_food(food_id)
    return DeleteAck(deleted_count=deleted)


def _check_owner(identity: VerifiedIdentity, email: str | None) -> None:
    error = owns(email)(identity)
    if error is not None:
        raise error
