"""Time profile API routes — delegates to the profile service and resolver."""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from time_profiles.config import settings
from time_profiles.database import get_db
from time_profiles.models.time_profile import DEFAULT_TZ
from time_profiles.repository import TimeProfileRepository
from time_profiles.schemas.time_profile import TimeProfileCreate, TimeProfileUpdate, TimeProfileOut
from time_profiles.services import resolver, time_profile_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=TimeProfileOut, status_code=status.HTTP_201_CREATED)
def create_time_profile(payload: TimeProfileCreate, db: Session = Depends(get_db)):
    """Create a profile; rollup-enabled profiles get a rebuild queued."""
    return time_profile_service.create_time_profile(db=db, **payload.model_dump())


@router.get("/", response_model=list[TimeProfileOut])
def list_time_profiles(
    user_key: Optional[str] = Query(None),
    region_number: Optional[int] = Query(None, ge=0),
    tz: Optional[str] = Query(None, description="Only rollup-enabled profiles for this timezone"),
    db: Session = Depends(get_db),
):
    """List profiles; with ``user_key`` only those visible to that user in a region."""
    if tz is not None:
        return resolver.find_all_by_tz(db, tz)
    if user_key is None:
        return TimeProfileRepository(db).find_all()
    region = settings.REGION_NUMBER if region_number is None else region_number
    return resolver.profiles_for_user(db, user_key, region)


@router.get("/timezones", response_model=list[str])
def list_timezones(db: Session = Depends(get_db)):
    return sorted(resolver.all_timezones(db))


@router.get("/entire-tz", response_model=list[TimeProfileOut])
def list_entire_tz(db: Session = Depends(get_db)):
    return resolver.find_all_with_entire_tz(db)


@router.get("/resolve", response_model=TimeProfileOut)
def resolve_for_user(user_key: str = Query(...), tz: str = Query(...), db: Session = Depends(get_db)):
    """The single rollup profile for a user and timezone; 404 when none or ambiguous."""
    profile = resolver.profile_for_user_tz(db, user_key, tz)
    if not profile:
        raise HTTPException(status_code=404, detail="No unique time profile for user and timezone")
    return profile


@router.get("/default", response_model=TimeProfileOut)
def get_default_for_tz(tz: str = Query(DEFAULT_TZ), db: Session = Depends(get_db)):
    """The whole-week rollup profile reports fall back to for ``tz``."""
    profile = resolver.default_time_profile(db, tz)
    if not profile:
        raise HTTPException(status_code=404, detail="No default time profile for timezone")
    return profile


@router.post("/seed", response_model=Optional[TimeProfileOut])
def seed_default(db: Session = Depends(get_db)):
    return time_profile_service.seed(db)


@router.get("/{profile_id}", response_model=TimeProfileOut)
def get_time_profile(profile_id: int, db: Session = Depends(get_db)):
    profile = TimeProfileRepository(db).find_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Time profile not found")
    return profile


@router.get("/{profile_id}/regions", response_model=list[TimeProfileOut])
def list_region_replicas(profile_id: int, db: Session = Depends(get_db)):
    """One rollup-enabled replica per region."""
    profile = TimeProfileRepository(db).find_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Time profile not found")
    return resolver.profile_for_each_region(db, profile)


@router.get("/{profile_id}/covers")
def check_covers(profile_id: int, ts: datetime = Query(...), db: Session = Depends(get_db)):
    """Whether a timestamp falls inside the profile's days and hours."""
    profile = TimeProfileRepository(db).find_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Time profile not found")
    return {"profile_id": profile_id, "ts": ts, "covers": profile.covers(ts)}


@router.patch("/{profile_id}", response_model=TimeProfileOut)
def update_time_profile(profile_id: int, payload: TimeProfileUpdate, db: Session = Depends(get_db)):
    """Partial update; rollup jobs are queued from the attribute diff."""
    return time_profile_service.update_time_profile(
        db=db,
        profile_id=profile_id,
        updates=payload.model_dump(exclude_unset=True),
    )


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_profile(profile_id: int, db: Session = Depends(get_db)):
    time_profile_service.delete_time_profile(db=db, profile_id=profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
