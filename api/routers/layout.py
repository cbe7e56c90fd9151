"""
Layout API - saved {order, hidden} records for editable tab strips.

This router handles:
- Reading one feature's layout (raw, or reconciled against canonical ids)
- Listing all saved layouts
- Replacing a feature's layout
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from api.exceptions import StoreUnavailableError
from api.schemas import LayoutConfig, LayoutListResponse, LayoutResponse, LayoutSaveRequest
from navigation import NavigationClient, get_navigation_client
from utils.logging import get_logger

router = APIRouter(prefix="/api/layout", tags=["layout"])
logger = get_logger("api.layout")


@router.get("", response_model=LayoutListResponse)
async def list_layouts(nav: NavigationClient = Depends(get_navigation_client)) -> LayoutListResponse:
    records = await nav.list_layout_records()
    return LayoutListResponse(data={key: LayoutConfig.from_record(r) for key, r in records.items()})


@router.get("/{feature_key}", response_model=LayoutResponse)
async def get_layout(
    feature_key: str,
    canonical: List[str] = Query(default=[], description="Current item ids, in default order"),
    nav: NavigationClient = Depends(get_navigation_client),
) -> LayoutResponse:
    """
    Get a feature's layout.

    Without canonical ids the stored record is returned as-is (data is null
    when nothing is saved). With canonical ids the record is reconciled.
    """
    if canonical:
        record = await nav.get_layout(feature_key, canonical)
        return LayoutResponse(data=LayoutConfig.from_record(record))

    record = await nav.fetch_layout_record(feature_key)
    return LayoutResponse(data=LayoutConfig.from_record(record) if record is not None else None)


@router.post("/{feature_key}", response_model=LayoutResponse)
async def save_layout(
    feature_key: str,
    request: LayoutSaveRequest,
    nav: NavigationClient = Depends(get_navigation_client),
) -> LayoutResponse:
    record = request.config.to_record()
    if not await nav.save_layout_record(feature_key, record):
        raise StoreUnavailableError("Could not save layout", store=nav.store_name)
    logger.info(f"[LAYOUT] Saved layout '{feature_key}' ({len(record.order)} items, {len(record.hidden)} hidden)")
    return LayoutResponse(data=request.config)
