from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

SortOrder = Literal["asc", "desc"]

# Keys a caller may sort on; they mirror the Client fields.
CLIENT_SORT_FIELDS = (
    "id",
    "societe_name",
    "email",
    "phone",
    "address",
    "created_at",
    "updated_at",
    "factures_count",
    "contacts_count",
    "entreprises_count",
    "factures_fournisseurs_count",
    "has_legal_unit",
)
DEFAULT_SORT_FIELD = "societe_name"


class Client(BaseModel):
    """A société as exposed by the API, enriched with its counters."""
    id: str = Field(..., description="Société primary key")
    societe_name: str = Field(..., description="Company name")
    email: Optional[str] = Field(default="", description="Primary contact email")
    phone: Optional[str] = Field(default="", description="Primary contact phone")
    address: Optional[str] = Field(default="", description="Street, number, postal code and country")
    created_at: Optional[datetime] = Field(None, description="Creation date")
    updated_at: Optional[datetime] = Field(None, description="Same as created_at; the store keeps one date")
    factures_count: int = Field(0, ge=0)
    contacts_count: int = Field(0, ge=0)
    entreprises_count: int = Field(0, ge=0)
    factures_fournisseurs_count: int = Field(0, ge=0)
    has_legal_unit: bool = Field(False, description="A legal unit exists for this société")


class PaginationParams(BaseModel):
    """Query parameters accepted by the client listing."""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    sortBy: str = Field(DEFAULT_SORT_FIELD, description="Client field to sort on")
    sortOrder: SortOrder = Field("asc")
    search: str = Field("", description="Case-insensitive substring")
    dateFrom: Optional[date] = Field(None, description="Inclusive lower bound on created_at")
    dateTo: Optional[date] = Field(None, description="Inclusive upper bound on created_at")

    @field_validator("sortOrder", mode="before")
    @classmethod
    def _normalize_order(cls, v):
        """Anything other than 'desc' sorts ascending."""
        return "desc" if isinstance(v, str) and v.lower() == "desc" else "asc"

    @field_validator("dateFrom", "dateTo", mode="before")
    @classmethod
    def _empty_date_is_none(cls, v):
        return None if v == "" else v

    @field_validator("search", mode="before")
    @classmethod
    def _normalize_search(cls, v):
        """None is no search; surrounding whitespace is ignored on both listing paths."""
        return "" if v is None else v.strip() if isinstance(v, str) else v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
