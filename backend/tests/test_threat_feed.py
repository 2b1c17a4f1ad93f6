"""Tests for threat filtering, sorting and pagination."""
import math
from datetime import datetime, timedelta, timezone

import pytest

from cyberwatch.errors import NotFoundError
from cyberwatch.schemas.threat import DateRange, FilterSpec, ThreatReport
from cyberwatch.services.pagination import clamp_page, paginate, total_pages
from cyberwatch.services.threat_feed import (
    ThreatFeed, filter_threats, report_threat, sort_by_date_desc,
)

SPECS = [
    FilterSpec(),
    FilterSpec(search_term="variant"),
    FilterSpec(search_term="HONEYPOT"),
    FilterSpec(severity="Critical"),
    FilterSpec(categories=["Phishing", "Malware"]),
    FilterSpec(severity="High", categories=["Ransomware", "APT", "DDoS"]),
    FilterSpec(search_term="no-such-text-anywhere"),
]


class TestSorting:

    def test_feed_is_date_descending(self, feed):
        dates = [t.date for t in feed.threats]
        assert dates == sorted(dates, reverse=True)

    def test_resort_is_idempotent(self, threats):
        once = sort_by_date_desc(threats)
        twice = sort_by_date_desc(once)
        assert [t.id for t in once] == [t.id for t in twice]

    def test_naive_and_aware_dates_compare(self, threats):
        naive = threats[0].model_copy(update={"id": "naive", "date": datetime(2099, 1, 1)})
        ordered = sort_by_date_desc([*threats, naive])
        assert ordered[0].id == "naive"


class TestFiltering:

    @pytest.mark.parametrize("spec", SPECS)
    def test_result_is_subset_without_duplicates(self, feed, spec):
        result = filter_threats(feed.threats, spec)
        ids = [t.id for t in result]
        assert len(ids) == len(set(ids))
        assert set(ids) <= {t.id for t in feed.threats}

    @pytest.mark.parametrize("spec", SPECS)
    def test_result_keeps_feed_order(self, feed, spec):
        result = filter_threats(feed.threats, spec)
        order = {t.id: i for i, t in enumerate(feed.threats)}
        positions = [order[t.id] for t in result]
        assert positions == sorted(positions)

    def test_categories_membership(self, feed):
        result = filter_threats(feed.threats, FilterSpec(categories=["Phishing", "Ransomware"]))
        assert all(t.category in ("Phishing", "Ransomware") for t in result)
        expected = [t for t in feed.threats if t.category in ("Phishing", "Ransomware")]
        assert len(result) == len(expected)

    def test_empty_categories_is_no_constraint(self, feed):
        assert len(filter_threats(feed.threats, FilterSpec(categories=[]))) == 25

    def test_search_is_case_insensitive_over_four_fields(self, feed):
        target = feed.threats[3]
        for needle in (target.title.upper(), target.source.lower(), target.category.swapcase()):
            result = filter_threats(feed.threats, FilterSpec(search_term=needle))
            assert target.id in {t.id for t in result}

    def test_search_does_not_match_details_for_summary(self, feed):
        # Only the details paragraph carries "Organizations are advised"
        assert filter_threats(feed.threats, FilterSpec(search_term="organizations are advised")) == []

    def test_filters_are_anded(self, feed):
        spec = FilterSpec(severity="High", categories=["Malware"], search_term="variant")
        for t in filter_threats(feed.threats, spec):
            assert t.severity == "High" and t.category == "Malware"

    def test_date_range_is_inclusive(self, feed):
        pivot = feed.threats[5]
        spec = FilterSpec(date_range=DateRange(from_=pivot.date, to=pivot.date))
        result = filter_threats(feed.threats, spec)
        assert pivot.id in {t.id for t in result}
        assert all(t.date == pivot.date for t in result)

    def test_date_range_bounds(self, feed, now):
        cutoff = now - timedelta(days=10)
        newer = filter_threats(feed.threats, FilterSpec(date_range=DateRange(from_=cutoff)))
        older = filter_threats(feed.threats, FilterSpec(date_range=DateRange(to=cutoff)))
        assert all(t.date >= cutoff for t in newer)
        assert all(t.date <= cutoff for t in older)

    def test_date_range_accepts_wire_alias(self):
        spec = FilterSpec.model_validate({"dateRange": {"from": "2025-01-01T00:00:00Z"}})
        assert spec.date_range.from_ == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestPagination:

    @pytest.mark.parametrize("count,size", [(0, 9), (1, 9), (9, 9), (10, 9), (25, 9), (27, 9), (25, 5)])
    def test_page_count_and_last_page_size(self, count, size):
        items = list(range(count))
        pages = total_pages(count, size)
        assert pages == math.ceil(count / size)
        if count:
            last, total = paginate(items, pages, size)
            assert total == count
            assert len(last) == (count % size or size)

    def test_clamp_page(self):
        assert clamp_page(0, 25, 9) == 1
        assert clamp_page(-4, 25, 9) == 1
        assert clamp_page(99, 25, 9) == 3
        assert clamp_page(5, 0, 9) == 1


class TestThreatFeedState:

    def test_initial_page(self, feed):
        page = feed.page()
        assert page.page == 1
        assert page.total == 25
        assert page.total_pages == 3
        assert len(page.items) == 9
        assert page.is_empty is False

    def test_navigation_is_clamped(self, feed):
        assert feed.previous_page().page == 1
        feed.next_page()
        feed.next_page()
        last = feed.next_page()
        assert last.page == 3
        assert len(last.items) == 25 % 9
        assert feed.goto_page(42).page == 3

    @pytest.mark.parametrize("spec", SPECS)
    def test_filter_change_resets_page(self, feed, spec):
        feed.goto_page(3)
        page = feed.apply_filters(spec)
        assert page.page == 1
        assert feed.current_page == 1

    def test_critical_then_cleared_returns_full_sorted_set(self, feed):
        critical = feed.apply_filters(FilterSpec(severity="Critical"))
        assert all(t.severity == "Critical" for t in feed.filtered)
        assert critical.total == sum(1 for t in feed.threats if t.severity == "Critical")

        page = feed.apply_filters(FilterSpec(severity=None))
        assert page.total == 25
        dates = [t.date for t in feed.filtered]
        assert dates == sorted(dates, reverse=True)

    def test_empty_result_is_signalled(self, feed):
        page = feed.apply_filters(FilterSpec(search_term="no-such-text-anywhere"))
        assert page.is_empty is True
        assert page.items == []
        assert page.total_pages == 0
        assert page.page == 1

    def test_applied_spec_is_a_copy(self, feed):
        spec = FilterSpec(categories=["Phishing"])
        feed.apply_filters(spec)
        spec.categories.append("Malware")
        assert feed.filters.categories == ["Phishing"]

    def test_query_does_not_touch_state(self, feed):
        feed.goto_page(2)
        feed.query(FilterSpec(severity="Low"), page=1)
        assert feed.current_page == 2
        assert feed.filters.is_empty()

    def test_get_unknown_raises_not_found(self, feed):
        assert feed.get("threat-1").id == "threat-1"
        with pytest.raises(NotFoundError) as exc:
            feed.get("threat-999")
        assert exc.value.back_to == "/dashboard/threat-feed"


class TestReportThreat:

    def test_report_builds_new_threat(self, feed, now):
        report = ThreatReport.model_validate({
            "title": "Suspicious VPN logins",
            "description": "Multiple failed VPN logins followed by a success from a new country.",
            "severity": "High",
            "category": "Insider Threat",
            "source": "Internal SOC",
            "tags": "vpn, , identity ",
        })
        threat = report_threat(report, now=now)
        assert threat.status == "New"
        assert threat.date == now
        assert threat.tags == ["vpn", "identity"]
        assert threat.id.startswith("threat-")

    def test_feed_add_threat_keeps_order(self, feed, now):
        report = ThreatReport(
            title="Fresh zero-day",
            description="A freshly disclosed zero-day in a VPN appliance.",
            severity="Critical",
            category="Zero-day Exploit",
            source="Vendor advisory",
        )
        feed.add_threat(report_threat(report, now=now + timedelta(minutes=1)))
        assert feed.threats[0].title == "Fresh zero-day"
        assert len(feed.threats) == 26
