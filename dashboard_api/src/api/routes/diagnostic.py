from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from src.core.deps import get_current_user, get_db
from src.core.errors import RepositoryError
from src.db.session import DatabaseManager
from src.schemas.common import ApiResponse
from src.schemas.dashboard import ConnectionStatus, DiagnosticReport

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/diagnostic",
    tags=["Diagnostic"],
    dependencies=[Depends(get_current_user)],
)


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


# PUBLIC_INTERFACE
@router.get(
    "/db-status",
    response_model=ApiResponse[ConnectionStatus],
    response_model_exclude_none=True,
    summary="Store connection status",
    description="Which stores currently hold a connection pool. Performs no I/O.",
)
async def db_status(db: DatabaseManager = Depends(get_db)) -> ApiResponse[ConnectionStatus]:
    return ApiResponse.ok(db.connection_status())


# PUBLIC_INTERFACE
@router.get(
    "/db-test",
    response_model=ApiResponse[DiagnosticReport],
    response_model_exclude_none=True,
    summary="Store diagnostic",
    description=(
        "Reconnect when a pool is missing, then time a trivial query on each store. "
        "A failed reconnection answers 500."
    ),
)
async def db_test(db: DatabaseManager = Depends(get_db)) -> ApiResponse[DiagnosticReport]:
    """Probe both stores and report timings."""
    started = time.perf_counter()
    status_before = db.connection_status()
    reconnection_attempted = False
    if not status_before.store1Connected or not status_before.store2Connected:
        logger.info("Diagnostic: attempting reconnection")
        reconnection_attempted = True
        await db.connect()

    db1 = await db.ping_primary()
    db2 = await db.ping_secondary()
    report = DiagnosticReport(
        testDuration=int((time.perf_counter() - started) * 1000),
        connectionStatus=db.connection_status(),
        reconnectionAttempted=reconnection_attempted,
        db1Test=db1,
        db2Test=db2,
        envInfo=db.settings.describe(),
        timestamp=_now_iso(),
    )
    logger.info("Diagnostic finished in %dms", report.testDuration)
    return ApiResponse(success=True, data=report, message="Database diagnostic completed")


# PUBLIC_INTERFACE
@router.post(
    "/db-reconnect",
    response_model=ApiResponse[Dict[str, Any]],
    response_model_exclude_none=True,
    summary="Force reconnection",
    description="Close both pools and connect again.",
)
async def db_reconnect(db: DatabaseManager = Depends(get_db)) -> ApiResponse[Dict[str, Any]]:
    logger.info("Diagnostic: forced reconnection requested")
    await db.disconnect()
    try:
        await db.connect()
    except RepositoryError:
        logger.error("Forced reconnection failed")
        raise
    return ApiResponse(
        success=True,
        data={"connectionStatus": db.connection_status().model_dump(), "timestamp": _now_iso()},
        message="Reconnection succeeded",
    )
