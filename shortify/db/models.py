"""
Database Models for the Shortify Service

This module defines the SQLModel database schemas for:
- Url: Stores the mapping between slugs and long URLs, plus ownership and lifecycle
- Visit: Stores one row per redirect served, the raw material of analytics

Design Decisions:
- Separate Visit table, append-only (can be partitioned/sharded independently)
- slug is denormalized onto Visit so every analytics query is a single-table scan
- Indexes on slug and visited_at for the grouping queries
- All timestamps are written in UTC
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to a timestamp read back from the database.

    SQLite does not keep the offset, so naive values are UTC by construction.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Url(SQLModel, table=True):
    """
    Main table storing slug -> long URL mappings.

    Fields:
    - id: Auto-incrementing primary key
    - slug: Unique public identifier used in short links
    - long_url: The redirect target
    - title: Optional human label
    - created_at / expires_at: Lifecycle timestamps (expires_at optional)
    - disabled: Owner kill switch
    - creator_id: Caller id of the creator, None for anonymous URLs

    Only disabled and expires_at change after creation.
    """
    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        max_length=32
    )
    long_url: str = Field(sa_column=Column(Text, nullable=False))
    title: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    disabled: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False)
    )
    creator_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True, index=True)
    )


class Visit(SQLModel, table=True):
    """
    Visit table, one immutable row per redirect served.

    This table stores:
    - Request facts: IP address, referrer, raw user agent, timestamp
    - Client facts derived from the user agent at ingest time:
      browser, os and device_type (device_type defaults to "desktop")

    Rows are never updated; analytics only ever read them.
    """
    __tablename__ = "visits"

    id: Optional[int] = Field(default=None, primary_key=True)
    url_id: int = Field(
        sa_column=Column(Integer, ForeignKey("urls.id"), nullable=False, index=True)
    )
    slug: str = Field(
        sa_column=Column(String(32), nullable=False, index=True)
    )
    visited_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    ip_address: Optional[str] = Field(
        default=None,
        sa_column=Column(String(45), nullable=True)  # IPv6 max length
    )
    referrer: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True)
    )
    user_agent: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True)
    )
    browser: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True)
    )
    os: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True)
    )
    device_type: str = Field(
        default="desktop",
        sa_column=Column(String(32), nullable=False, default="desktop")
    )
