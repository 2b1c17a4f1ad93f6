from datetime import datetime
from fastapi import APIRouter, Body, Depends, Query

import structlog

from cyberwatch.api.deps import get_feed
from cyberwatch.config import settings
from cyberwatch.constants import SeverityLevel, ThreatCategory
from cyberwatch.schemas.threat import DateRange, FilterSpec, Threat, ThreatPage, ThreatReport
from cyberwatch.services.threat_feed import ThreatFeed, report_threat
from cyberwatch.services.validation import validate_form

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=ThreatPage)
async def list_threats(
    page: int = Query(1),
    search_term: str | None = Query(None, alias="searchTerm"),
    severity: SeverityLevel | None = None,
    categories: list[ThreatCategory] | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    feed: ThreatFeed = Depends(get_feed),
):
    """Filtered, date-sorted page of the feed. Out-of-range pages are clamped."""
    date_range = DateRange(from_=date_from, to=date_to) if (date_from or date_to) else None
    spec = FilterSpec(
        search_term=search_term,
        severity=severity,
        categories=categories,
        date_range=date_range,
    )
    return feed.query(spec, page)


# ─── Stateful feed view ───────────────────────────────────────────

@router.get("/feed", response_model=ThreatPage)
async def get_feed_page(feed: ThreatFeed = Depends(get_feed)):
    return feed.page()


@router.put("/feed/filters", response_model=ThreatPage)
async def apply_feed_filters(payload: dict | None = Body(None), feed: ThreatFeed = Depends(get_feed)):
    """Replace the active filters; the feed returns to page 1."""
    spec = validate_form(FilterSpec, payload or {}).unwrap()
    return feed.apply_filters(spec)


@router.delete("/feed/filters", response_model=ThreatPage)
async def reset_feed_filters(feed: ThreatFeed = Depends(get_feed)):
    return feed.reset_filters()


@router.post("/feed/page/next", response_model=ThreatPage)
async def next_feed_page(feed: ThreatFeed = Depends(get_feed)):
    return feed.next_page()


@router.post("/feed/page/previous", response_model=ThreatPage)
async def previous_feed_page(feed: ThreatFeed = Depends(get_feed)):
    return feed.previous_page()


@router.put("/feed/page/{page}", response_model=ThreatPage)
async def goto_feed_page(page: int, feed: ThreatFeed = Depends(get_feed)):
    return feed.goto_page(page)


# ─── Single threats ───────────────────────────────────────────────

@router.get("/{threat_id}", response_model=Threat)
async def get_threat(threat_id: str, feed: ThreatFeed = Depends(get_feed)):
    return feed.get(threat_id)


@router.post("", response_model=Threat, status_code=201)
async def create_threat_report(payload: dict = Body(...), feed: ThreatFeed = Depends(get_feed)):
    """Accept a new-threat report. Only added to the live feed when configured to."""
    report = validate_form(ThreatReport, payload).unwrap()
    threat = report_threat(report)
    if settings.persist_reported_threats:
        feed.add_threat(threat)
    else:
        logger.info("Reported threat not added to feed", threat_id=threat.id)
    return threat
