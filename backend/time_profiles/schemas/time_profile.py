"""Pydantic schemas for Time Profiles."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, field_validator


def _check_range(values: Optional[list[int]], upper: int, name: str) -> Optional[list[int]]:
    if values is None:
        return values
    bad = [v for v in values if not 0 <= v < upper]
    if bad:
        raise ValueError(f"{name} must be within 0..{upper - 1}, got {bad}")
    return values


class TimeProfileCreate(BaseModel):
    description: Optional[str] = None
    days: Optional[list[int]] = None
    hours: Optional[list[int]] = None
    tz: Optional[str] = None
    profile_type: Optional[Literal["user", "global"]] = None
    profile_key: Optional[str] = None
    rollup_daily_metrics: bool = False

    @field_validator("days")
    @classmethod
    def _days_in_week(cls, v):
        return _check_range(v, 7, "days")

    @field_validator("hours")
    @classmethod
    def _hours_in_day(cls, v):
        return _check_range(v, 24, "hours")


class TimeProfileUpdate(BaseModel):
    description: Optional[str] = None
    days: Optional[list[int]] = None
    hours: Optional[list[int]] = None
    tz: Optional[str] = None
    profile_type: Optional[Literal["user", "global"]] = None
    profile_key: Optional[str] = None
    rollup_daily_metrics: Optional[bool] = None

    @field_validator("days")
    @classmethod
    def _days_in_week(cls, v):
        return _check_range(v, 7, "days")

    @field_validator("hours")
    @classmethod
    def _hours_in_day(cls, v):
        return _check_range(v, 24, "hours")

    @field_validator("rollup_daily_metrics")
    @classmethod
    def _rollup_not_null(cls, v):
        # Omit the field to leave it unchanged
        if v is None:
            raise ValueError("rollup_daily_metrics cannot be null")
        return v


class TimeProfileOut(BaseModel):
    id: int
    description: Optional[str] = None
    days: list[int]
    hours: list[int]
    tz: Optional[str] = None
    profile_type: Optional[str] = None
    profile_key: Optional[str] = None
    rollup_daily_metrics: bool
    region_number: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("profile_type", mode="before")
    @classmethod
    def _enum_value(cls, v):
        return getattr(v, "value", v)

