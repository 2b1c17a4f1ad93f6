from cyberwatch.constants import SEVERITY_LEVELS
from cyberwatch.schemas.analytics import ChartData, Overview, TimeSeriesData
from cyberwatch.services.alert_store import AlertStore
from cyberwatch.services.mock_data import DashboardData
from cyberwatch.services.threat_feed import ThreatFeed


class AnalyticsService:
    def __init__(self, data: DashboardData, feed: ThreatFeed, alerts: AlertStore):
        self.data = data
        self.feed = feed
        self.alerts = alerts

    def common_threats(self) -> list[ChartData]:
        return list(self.data.common_threats)

    def severity_distribution(self) -> list[ChartData]:
        return list(self.data.severity_distribution)

    def threat_trends(self) -> list[TimeSeriesData]:
        return list(self.data.threat_trends)

    def overview(self) -> Overview:
        """Dashboard landing numbers, computed from the live feed rather than the chart mocks."""
        threats = self.feed.threats
        by_severity = {level: 0 for level in SEVERITY_LEVELS}
        for t in threats:
            by_severity[t.severity] += 1
        return Overview(
            total_threats=len(threats),
            by_severity=by_severity,
            latest_threat=threats[0] if threats else None,
            enabled_alerts=sum(1 for a in self.alerts.list_alerts() if a.is_enabled),
        )
