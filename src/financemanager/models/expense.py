"""SQLModel table for monthly expense rows."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class ExpenseRow(SQLModel, table=True):
    """One persisted month of categorized spending."""

    __tablename__: ClassVar[str] = "expense"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(nullable=False, index=True, max_length=10, description="ISO yyyy-MM-dd")
    housing: float = Field(default=0.0, nullable=False)
    food: float = Field(default=0.0, nullable=False)
    going_out: float = Field(default=0.0, nullable=False)
    transportation: float = Field(default=0.0, nullable=False)
    travel: float = Field(default=0.0, nullable=False)
    tax: float = Field(default=0.0, nullable=False)
    other: float = Field(default=0.0, nullable=False)
