"""Facility routes: facility CRUD, contacts, pre-live records, provider credentials."""

import uuid as uuid_mod
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_agent, require_superadmin
from app.dependencies import get_db
from app.models.agent import Agent
from app.schemas.facility import (
    ContactCreate,
    ContactPrimaryToggle,
    ContactRead,
    ContactUpdate,
    FacilityCreate,
    FacilityListParams,
    FacilityPage,
    FacilityRead,
    FacilityUpdate,
    PfcCreate,
    PfcRead,
    PfcUpdate,
    PreliveCreate,
    PreliveRead,
    PreliveUpdate,
)
from app.services import facility_service

router = APIRouter(prefix="/facilities", tags=["facilities"])


def _parse_id(value: str, name: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")


@router.get("", response_model=FacilityPage)
async def list_facilities(
    params: Annotated[FacilityListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.list_facilities(db, **params.model_dump())


@router.post("", status_code=201, response_model=FacilityRead)
async def create_facility(
    body: FacilityCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.create_facility(
        db, actor=current_agent, values=body.model_dump()
    )


@router.get("/{facility_id}", response_model=FacilityRead)
async def get_facility(
    facility_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.get_facility(db, _parse_id(facility_id, "facility_id"))


@router.patch("/{facility_id}", response_model=FacilityRead)
async def update_facility(
    facility_id: str,
    body: FacilityUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.update_facility(
        db,
        facility_id=_parse_id(facility_id, "facility_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/{facility_id}")
async def delete_facility(
    facility_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    await facility_service.delete_facility(
        db, facility_id=_parse_id(facility_id, "facility_id"), actor=current_agent
    )
    return {"status": "deleted"}


# ── Contacts ──


@router.get("/{facility_id}/contacts", response_model=list[ContactRead])
async def list_contacts(
    facility_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.list_contacts(db, _parse_id(facility_id, "facility_id"))


@router.post("/{facility_id}/contacts", status_code=201, response_model=ContactRead)
async def create_contact(
    facility_id: str,
    body: ContactCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.create_contact(
        db,
        facility_id=_parse_id(facility_id, "facility_id"),
        actor=current_agent,
        values=body.model_dump(),
    )


@router.patch("/contacts/{contact_id}", response_model=ContactRead)
async def update_contact(
    contact_id: str,
    body: ContactUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.update_contact(
        db,
        contact_id=_parse_id(contact_id, "contact_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.put("/contacts/{contact_id}/primary", response_model=ContactRead)
async def set_contact_primary(
    contact_id: str,
    body: ContactPrimaryToggle,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.set_contact_primary(
        db,
        contact_id=_parse_id(contact_id, "contact_id"),
        is_primary=body.is_primary,
        actor=current_agent,
    )


@router.delete("/contacts/{contact_id}")
async def delete_contact(
    contact_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    await facility_service.delete_contact(
        db, contact_id=_parse_id(contact_id, "contact_id"), actor=current_agent
    )
    return {"status": "deleted"}


# ── Pre-live ──


@router.get("/{facility_id}/prelive", response_model=list[PreliveRead])
async def list_prelive(
    facility_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.list_prelive(db, _parse_id(facility_id, "facility_id"))


@router.post("/{facility_id}/prelive", status_code=201, response_model=PreliveRead)
async def create_prelive(
    facility_id: str,
    body: PreliveCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.create_prelive(
        db,
        facility_id=_parse_id(facility_id, "facility_id"),
        actor=current_agent,
        values=body.model_dump(),
    )


@router.patch("/prelive/{prelive_id}", response_model=PreliveRead)
async def update_prelive(
    prelive_id: str,
    body: PreliveUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.update_prelive(
        db,
        prelive_id=_parse_id(prelive_id, "prelive_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/prelive/{prelive_id}")
async def delete_prelive(
    prelive_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    await facility_service.delete_prelive(
        db, prelive_id=_parse_id(prelive_id, "prelive_id"), actor=current_agent
    )
    return {"status": "deleted"}


# ── Provider credentials ──


@router.get("/{facility_id}/credentials", response_model=list[PfcRead])
async def list_credentials(
    facility_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.list_credentials(db, _parse_id(facility_id, "facility_id"))


@router.post("/{facility_id}/credentials", status_code=201, response_model=PfcRead)
async def create_credential(
    facility_id: str,
    body: PfcCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.create_credential(
        db,
        facility_id=_parse_id(facility_id, "facility_id"),
        provider_id=body.provider_id,
        actor=current_agent,
        values=body.model_dump(exclude={"provider_id"}),
    )


@router.patch("/credentials/{credential_id}", response_model=PfcRead)
async def update_credential(
    credential_id: str,
    body: PfcUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await facility_service.update_credential(
        db,
        credential_id=_parse_id(credential_id, "credential_id"),
        actor=current_agent,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/credentials/{credential_id}")
async def delete_credential(
    credential_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    await facility_service.delete_credential(
        db, credential_id=_parse_id(credential_id, "credential_id"), actor=current_agent
    )
    return {"status": "deleted"}
