"""Synthetic dashboard dataset.

Everything here is pure with respect to the injected ``random.Random`` and
``now``: two generators built with the same seed and clock produce the same
dataset.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence, TypeVar

import structlog

from cyberwatch.config import load_yaml_config
from cyberwatch.constants import SEVERITY_LEVELS, THREAT_CATEGORIES, THREAT_STATUSES
from cyberwatch.schemas.alert import AlertSetting
from cyberwatch.schemas.analytics import ChartData, TimeSeriesData
from cyberwatch.schemas.profile import UserProfile
from cyberwatch.schemas.threat import Threat

logger = structlog.get_logger()

T = TypeVar("T")

SOURCES = ["DarkNet Forums", "Security Vendor X", "Internal Honeypot", "Government Agency"]
TARGETS = ["financial institutions", "healthcare providers", "critical infrastructure", "e-commerce platforms"]
VECTORS = ["spear-phishing emails", "exploit kits", "compromised software updates", "social engineering"]
CHARACTERISTICS = ["polymorphic behavior", "fileless execution", "data exfiltration capabilities", "anti-sandbox mechanisms"]
IMPACTS = ["widespread disruption", "significant data loss", "financial damage", "reputational harm"]
TAG_POOL = ["APT", "0-day", "SpearPhishing", "Cloud", "Mobile"]
SYSTEM_POOL = ["Windows Servers", "Linux Endpoints", "iOS Devices", "Cloud Storage", "Databases"]

DEFAULT_AVATAR_URL = "https://placehold.co/100x100.png"


@dataclass
class DashboardData:
    threats: list[Threat]
    alert_settings: list[AlertSetting]
    user_profile: UserProfile
    common_threats: list[ChartData]
    severity_distribution: list[ChartData]
    threat_trends: list[TimeSeriesData]
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockDataGenerator:
    def __init__(self, rng: random.Random | None = None, now: datetime | None = None):
        self.rng = rng or random.Random()
        self.now = now or datetime.now(timezone.utc)

    def _pick(self, items: Sequence[T]) -> T:
        return items[self.rng.randrange(len(items))]

    def _subset(self, items: Sequence[T], max_count: int = 3) -> list[T]:
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        return shuffled[: self.rng.randint(0, max_count)]

    # ─── Threats ──────────────────────────────────────────────────

    def threat(self, index: int) -> Threat:
        date = self.now - timedelta(days=index * 2 + self.rng.randint(0, 4))
        category = self._pick(THREAT_CATEGORIES)
        severity = self._pick(SEVERITY_LEVELS)
        letter = chr(65 + index % 26)
        number = index + 1

        details = (
            f'Threat ID {number}: A new strain of {category}, codenamed "{letter}-{number}", '
            f"was discovered on {date:%a %b %d %Y}. It targets {self._pick(TARGETS)} "
            f"using {self._pick(VECTORS)}. Key characteristics include {self._pick(CHARACTERISTICS)}. "
            f"The severity is rated {severity} due to its potential for {self._pick(IMPACTS)}. "
            "Organizations are advised to update signatures, patch vulnerabilities, and educate users."
        )
        return Threat(
            id=f"threat-{number}",
            title=f"{category} Variant {letter}.{number} Detected",
            severity=severity,
            category=category,
            date=date,
            description=(
                f"A new variant of {category.lower()} has been identified, exhibiting advanced "
                "evasion techniques. Initial analysis suggests potential impact on unpatched systems."
            ),
            source=self._pick(SOURCES),
            details_for_summary=details,
            tags=self._subset(TAG_POOL, 3),
            status=self._pick(THREAT_STATUSES),
            mitigation=(
                "Apply latest security patches. Monitor network traffic for anomalies. "
                f"Educate users on phishing. Current mitigation score: {self.rng.randint(0, 99)}%"
            ),
            affected_systems=self._subset(SYSTEM_POOL, 2),
        )

    def threats(self, count: int = 25) -> list[Threat]:
        return [self.threat(i) for i in range(count)]

    # ─── Alerts / profile ─────────────────────────────────────────

    def alert_settings(self) -> list[AlertSetting]:
        raw = load_yaml_config("alert_seeds.yaml")
        if raw.get("alerts"):
            seeds = [AlertSetting.model_validate(a) for a in raw["alerts"]]
            logger.info("Loaded alert seeds from config", count=len(seeds))
            return seeds
        return [
            AlertSetting(
                id="alert-1",
                name="Critical Ransomware Alert",
                risk_levels=["Critical"],
                categories=["Ransomware"],
                keywords=["encrypt", "payment"],
                is_enabled=True,
                last_triggered=self.now - timedelta(days=2),
            ),
            AlertSetting(
                id="alert-2",
                name="High Severity Phishing",
                risk_levels=["High", "Critical"],
                categories=["Phishing"],
                keywords=["credentials", "login", "urgent"],
                is_enabled=True,
            ),
            AlertSetting(
                id="alert-3",
                name="All Malware Types (Medium+)",
                risk_levels=["Medium", "High", "Critical"],
                categories=["Malware"],
                keywords=[],
                is_enabled=False,
            ),
        ]

    @staticmethod
    def user_profile() -> UserProfile:
        return UserProfile(
            name="Alex Johnson",
            email="alex.johnson@example.com",
            avatar_url=DEFAULT_AVATAR_URL,
            preferences={"notifications": {"email": True, "in_app": True}},
        )

    # ─── Charts ───────────────────────────────────────────────────

    def common_threats(self) -> list[ChartData]:
        return [
            ChartData(name=category, value=self.rng.randint(20, 119))
            for category in THREAT_CATEGORIES[:5]
        ]

    def severity_distribution(self) -> list[ChartData]:
        return [ChartData(name=level, value=self.rng.randint(10, 59)) for level in SEVERITY_LEVELS]

    def threat_trends(self, points: int = 12) -> list[TimeSeriesData]:
        # Monthly buckets for the past year, oldest first
        return [
            TimeSeriesData(
                date=(self.now - timedelta(days=(points - 1 - i) * 30)).date(),
                count=self.rng.randint(50, 199),
            )
            for i in range(points)
        ]

    def generate(self, threat_count: int = 25) -> DashboardData:
        data = DashboardData(
            threats=self.threats(threat_count),
            alert_settings=self.alert_settings(),
            user_profile=self.user_profile(),
            common_threats=self.common_threats(),
            severity_distribution=self.severity_distribution(),
            threat_trends=self.threat_trends(),
            generated_at=self.now,
        )
        logger.info(
            "Mock dataset generated",
            threats=len(data.threats),
            alerts=len(data.alert_settings),
        )
        return data
