from typing import Literal, get_args

APP_NAME = "CyberWatch"

SeverityLevel = Literal["Low", "Medium", "High", "Critical"]
ThreatCategory = Literal[
    "Malware",
    "Phishing",
    "Ransomware",
    "DDoS",
    "Data Breach",
    "Insider Threat",
    "APT",
    "Zero-day Exploit",
    "IoT Vulnerability",
]
ThreatStatus = Literal["New", "Investigating", "Resolved"]

SEVERITY_LEVELS: tuple[str, ...] = get_args(SeverityLevel)
THREAT_CATEGORIES: tuple[str, ...] = get_args(ThreatCategory)
THREAT_STATUSES: tuple[str, ...] = get_args(ThreatStatus)

# Route gating
PROTECTED_PREFIX = "/dashboard"
LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
THREAT_FEED_PATH = "/dashboard/threat-feed"

# Persisted blob keys
AUTH_STORAGE_KEY = "cyberwatch_auth"
PROFILE_STORAGE_PREFIX = "userProfile_"
