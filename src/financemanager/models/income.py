"""SQLModel table for monthly income rows."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class IncomeRow(SQLModel, table=True):
    """One persisted month of income by source."""

    __tablename__: ClassVar[str] = "income"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(nullable=False, index=True, max_length=10, description="ISO yyyy-MM-dd")
    salary: float = Field(default=0.0, nullable=False)
    help: float = Field(default=0.0, nullable=False)
    entrepreneur: float = Field(default=0.0, nullable=False)
    passive: float = Field(default=0.0, nullable=False)
    other: float = Field(default=0.0, nullable=False)
