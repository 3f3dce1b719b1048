"""Service hook endpoints called by the crash platform"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from jirasync.schemas import (
    CONFIG_FIELDS,
    ConfigField,
    IssueImpactChangeRequest,
    ServiceHookRequest,
    VerificationResponse,
)
from jirasync.security import require_basic_auth
from jirasync.services.bridge import IssueSyncBridge
from jirasync.services.errors import IssueCreateFailed

router = APIRouter(
    prefix="/api/service-hooks/jira",
    tags=["jira"],
    dependencies=[Depends(require_basic_auth)],
)


def get_bridge() -> IssueSyncBridge:
    return IssueSyncBridge()


@router.get("/schema", response_model=List[ConfigField])
def config_schema():
    """Configuration fields the crash platform must collect"""
    return CONFIG_FIELDS


@router.post("/issue-impact-change")
def issue_impact_change(
    request: IssueImpactChangeRequest,
    timeout: Optional[float] = None,
    bridge: IssueSyncBridge = Depends(get_bridge),
):
    """Create a Jira issue for a new crash issue"""
    try:
        return bridge.create_issue(request.config, request.payload, timeout=timeout)
    except IssueCreateFailed as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/verification", response_model=VerificationResponse)
def verification(
    request: ServiceHookRequest,
    timeout: Optional[float] = None,
    bridge: IssueSyncBridge = Depends(get_bridge),
):
    """Verify Jira settings and register the issue webhook if syncing"""
    ok, message = bridge.verify(request.config, request.payload, timeout=timeout)
    return VerificationResponse(ok=ok, message=message)


@router.post("/issue-integration-request")
def issue_integration_request(
    request: ServiceHookRequest,
    timeout: Optional[float] = None,
    bridge: IssueSyncBridge = Depends(get_bridge),
):
    """Return a snapshot of the linked Jira issue, or false"""
    return bridge.fetch_issue(request.config, request.payload, timeout=timeout)


@router.post("/issue-resolution-change")
def issue_resolution_change(
    request: ServiceHookRequest,
    timeout: Optional[float] = None,
    bridge: IssueSyncBridge = Depends(get_bridge),
):
    """Resolve or reopen the linked Jira issue"""
    return bridge.sync_resolution(request.config, request.payload, timeout=timeout)
