"""Provider routes: provider CRUD, state licenses, Vesta privileges."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_agent, require_superadmin
from app.dependencies import get_db
from app.models.agent import Agent
from app.schemas.provider import (
    LicenseCreate,
    LicenseRead,
    LicenseUpdate,
    PrivilegeCreate,
    PrivilegeRead,
    PrivilegeUpdate,
    ProviderCreate,
    ProviderRead,
    ProviderUpdate,
)
from app.services import provider_service

router = APIRouter(prefix="/providers", tags=["providers"])


def _parse_id(value: str, name: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")


@router.post("", status_code=201, response_model=ProviderRead)
async def create_provider(
    body: ProviderCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.create_provider(
        db, actor=current_agent, values=body.model_dump()
    )


@router.get("/{provider_id}", response_model=ProviderRead)
async def get_provider(
    provider_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.get_provider(db, _parse_id(provider_id, "provider_id"))


@router.patch("/{provider_id}", response_model=ProviderRead)
async def update_provider(
    provider_id: str,
    body: ProviderUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.update_provider(
        db,
        provider_id=_parse_id(provider_id, "provider_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/{provider_id}")
async def delete_provider(
    provider_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    await provider_service.delete_provider(
        db, provider_id=_parse_id(provider_id, "provider_id"), actor=current_agent
    )
    return {"status": "deleted"}


# ── State licenses ──


@router.get("/{provider_id}/licenses", response_model=list[LicenseRead])
async def list_licenses(
    provider_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.list_licenses(db, _parse_id(provider_id, "provider_id"))


@router.post("/licenses", status_code=201, response_model=LicenseRead)
async def create_license(
    body: LicenseCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.create_license(
        db,
        provider_id=body.provider_id,
        actor=current_agent,
        values=body.model_dump(exclude={"provider_id"}),
    )


@router.patch("/licenses/{license_id}", response_model=LicenseRead)
async def update_license(
    license_id: str,
    body: LicenseUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.update_license(
        db,
        license_id=_parse_id(license_id, "license_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/licenses/{license_id}")
async def delete_license(
    license_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    await provider_service.delete_license(
        db, license_id=_parse_id(license_id, "license_id"), actor=current_agent
    )
    return {"status": "deleted"}


# ── Vesta privileges ──


@router.get("/{provider_id}/privileges", response_model=list[PrivilegeRead])
async def list_privileges(
    provider_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.list_privileges(db, _parse_id(provider_id, "provider_id"))


@router.post("/privileges", status_code=201, response_model=PrivilegeRead)
async def create_privilege(
    body: PrivilegeCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.create_privilege(
        db,
        provider_id=body.provider_id,
        actor=current_agent,
        values=body.model_dump(exclude={"provider_id"}),
    )


@router.patch("/privileges/{privilege_id}", response_model=PrivilegeRead)
async def update_privilege(
    privilege_id: str,
    body: PrivilegeUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await provider_service.update_privilege(
        db,
        privilege_id=_parse_id(privilege_id, "privilege_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/privileges/{privilege_id}")
async def delete_privilege(
    privilege_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    await provider_service.delete_privilege(
        db, privilege_id=_parse_id(privilege_id, "privilege_id"), actor=current_agent
    )
    return {"status": "deleted"}
