"""Events API router: GET /events (audit trail, newest first)."""

from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from gatekeeper.api.dependencies import get_event_repository
from gatekeeper.config.settings import get_settings
from gatekeeper.domain.models.access import CredentialKind, Decision
from gatekeeper.domain.schemas.access_event import AccessEventResponse
from gatekeeper.infrastructure.database.event_repository_db import DbAccessEventRepository

router = APIRouter()

DEFAULT_PAGE_SIZE = 100


def page_limit(raw: Optional[str], maximum: int) -> int:
    """Unparseable or non-positive -> default page size; otherwise clamp to maximum."""
    try:
        limit = int(raw) if raw is not None else DEFAULT_PAGE_SIZE
    except ValueError:
        limit = DEFAULT_PAGE_SIZE
    if limit <= 0:
        limit = DEFAULT_PAGE_SIZE
    return min(limit, maximum)


@router.get("", response_model=List[AccessEventResponse])
async def list_events(
    repository: Annotated[DbAccessEventRepository, Depends(get_event_repository)],
    result: Optional[Decision] = None,
    credential_type: Optional[CredentialKind] = None,
    since: Annotated[Optional[datetime], Query(alias="from")] = None,
    until: Annotated[Optional[datetime], Query(alias="to")] = None,
    limit: Optional[str] = None,
):
    """List audit events, filtered by result, credential type and time window."""
    rows = await repository.list_events(
        limit=page_limit(limit, get_settings().events_page_limit),
        result=result.value if result else None,
        credential_type=credential_type.value if credential_type else None,
        since=since,
        until=until,
    )
    return [AccessEventResponse.model_validate(row) for row in rows]
