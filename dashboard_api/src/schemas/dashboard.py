from __future__ import annotations

from typing import Dict, Optional, Union

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """Aggregate counters, serialized as strings."""
    totalClients: str = Field(...)
    totalFactures: str = Field(...)
    totalContacts: str = Field(...)
    totalEntreprises: str = Field(...)
    totalFacturesFournisseurs: str = Field(...)


class ConnectionStatus(BaseModel):
    """Whether each store currently holds a live engine."""
    store1Connected: bool = Field(..., description="Primary store")
    store2Connected: bool = Field(..., description="Secondary (legal unit) store")


class StoreProbe(BaseModel):
    """Result of one diagnostic round-trip."""
    success: bool = Field(...)
    responseTime: int = Field(..., description="Milliseconds")
    error: Optional[str] = Field(default=None)


class DiagnosticReport(BaseModel):
    """Outcome of the diagnostic probe over both stores."""
    testDuration: int = Field(..., description="Milliseconds")
    connectionStatus: ConnectionStatus
    reconnectionAttempted: bool = Field(False)
    db1Test: StoreProbe
    db2Test: StoreProbe
    envInfo: Dict[str, Dict[str, Union[str, int, bool]]] = Field(
        default_factory=dict, description="Connection target of each store, without secrets"
    )
    timestamp: str = Field(...)
