from fastapi import Request

from cyberwatch.agents.flows import AIFlows
from cyberwatch.services.alert_store import AlertStore
from cyberwatch.services.analytics_service import AnalyticsService
from cyberwatch.services.profile_service import ProfileService
from cyberwatch.services.session_service import SessionService
from cyberwatch.services.threat_feed import ThreatFeed


def get_feed(request: Request) -> ThreatFeed:
    return request.app.state.feed


def get_alert_store(request: Request) -> AlertStore:
    return request.app.state.alerts


def get_session(request: Request) -> SessionService:
    return request.app.state.session


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profiles


def get_analytics(request: Request) -> AnalyticsService:
    return request.app.state.analytics


def get_ai_flows(request: Request) -> AIFlows:
    return request.app.state.ai_flows
