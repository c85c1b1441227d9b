"""Persisted gate for the background poster prefetch job."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class PrefetchRunState(SQLModel, table=True):
    __tablename__ = "prefetch_run_state"

    job: str = Field(primary_key=True)
    last_completed_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
