import time
from datetime import datetime, timezone
from typing import Iterable

import structlog

from cyberwatch.config import settings
from cyberwatch.constants import THREAT_FEED_PATH
from cyberwatch.errors import NotFoundError
from cyberwatch.schemas.threat import FilterSpec, Threat, ThreatPage, ThreatReport
from cyberwatch.services.pagination import clamp_page, paginate, total_pages

logger = structlog.get_logger()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sort_by_date_desc(threats: Iterable[Threat]) -> list[Threat]:
    """Most recent first. Stable, so re-sorting never reorders ties."""
    return sorted(threats, key=lambda t: _as_utc(t.date), reverse=True)


def matches_filters(threat: Threat, spec: FilterSpec) -> bool:
    if spec.search_term:
        term = spec.search_term.lower()
        haystacks = (threat.title, threat.description, threat.category, threat.source)
        if not any(term in h.lower() for h in haystacks):
            return False
    if spec.severity and threat.severity != spec.severity:
        return False
    if spec.categories and threat.category not in spec.categories:
        return False
    if spec.date_range:
        date = _as_utc(threat.date)
        if spec.date_range.from_ and date < _as_utc(spec.date_range.from_):
            return False
        if spec.date_range.to and date > _as_utc(spec.date_range.to):
            return False
    return True


def filter_threats(threats: Iterable[Threat], spec: FilterSpec | None) -> list[Threat]:
    """AND-combine every dimension present in ``spec``; order is preserved."""
    if spec is None:
        return list(threats)
    return [t for t in threats if matches_filters(t, spec)]


def build_page(filtered: list[Threat], page: int, page_size: int, spec: FilterSpec | None = None) -> ThreatPage:
    page = clamp_page(page, len(filtered), page_size)
    items, total = paginate(filtered, page, page_size)
    return ThreatPage(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
        is_empty=total == 0,
        filters=spec or FilterSpec(),
    )


class ThreatFeed:
    """Threat feed view state: the sorted collection, active filters and current page."""

    def __init__(self, threats: Iterable[Threat], page_size: int | None = None):
        self.page_size = page_size or settings.threat_page_size
        self._threats = sort_by_date_desc(threats)
        self._spec = FilterSpec()
        self._filtered = list(self._threats)
        self._page = 1

    @property
    def threats(self) -> list[Threat]:
        return list(self._threats)

    @property
    def filters(self) -> FilterSpec:
        return self._spec

    @property
    def filtered(self) -> list[Threat]:
        return list(self._filtered)

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        return total_pages(len(self._filtered), self.page_size)

    def _refilter(self) -> None:
        self._filtered = filter_threats(self._threats, self._spec)
        self._page = 1

    def apply_filters(self, spec: FilterSpec) -> ThreatPage:
        # The whole filter set is swapped in before anything is re-evaluated
        self._spec = spec.model_copy(deep=True)
        self._refilter()
        logger.debug("Threat filters applied", matched=len(self._filtered), total=len(self._threats))
        return self.page()

    def reset_filters(self) -> ThreatPage:
        return self.apply_filters(FilterSpec())

    def replace_threats(self, threats: Iterable[Threat]) -> None:
        self._threats = sort_by_date_desc(threats)
        self._refilter()

    def add_threat(self, threat: Threat) -> None:
        self.replace_threats([*self._threats, threat])

    def goto_page(self, page: int) -> ThreatPage:
        self._page = clamp_page(page, len(self._filtered), self.page_size)
        return self.page()

    def next_page(self) -> ThreatPage:
        return self.goto_page(self._page + 1)

    def previous_page(self) -> ThreatPage:
        return self.goto_page(self._page - 1)

    def page(self) -> ThreatPage:
        return build_page(self._filtered, self._page, self.page_size, self._spec)

    def query(self, spec: FilterSpec, page: int = 1) -> ThreatPage:
        """Stateless variant: filter and page without touching the view state."""
        return build_page(filter_threats(self._threats, spec), page, self.page_size, spec)

    def get(self, threat_id: str) -> Threat:
        for threat in self._threats:
            if threat.id == threat_id:
                return threat
        raise NotFoundError("Threat", threat_id, back_to=THREAT_FEED_PATH)


def report_threat(report: ThreatReport, now: datetime | None = None) -> Threat:
    """Turn a new-threat form submission into a Threat record.

    The record is returned to the caller only. Inserting it into the live
    feed is the caller's decision (see ``settings.persist_reported_threats``).
    """
    now = now or datetime.now(timezone.utc)
    threat = Threat(
        id=f"threat-{time.time_ns() // 1_000_000}",
        title=report.title,
        severity=report.severity,
        category=report.category,
        date=now,
        description=report.description,
        source=report.source,
        details_for_summary=report.description,
        tags=report.tags,
        status="New",
    )
    logger.info("Threat reported", threat_id=threat.id, title=threat.title, severity=threat.severity)
    return threat
