from cyberwatch.schemas.common import CamelModel, PaginatedResponse, ErrorResponse, HealthResponse
from cyberwatch.schemas.threat import Threat, FilterSpec, DateRange, ThreatReport, ThreatPage
from cyberwatch.schemas.alert import AlertSetting, AlertSettingForm, AlertToggle, PendingDelete
from cyberwatch.schemas.profile import UserProfile, ProfileUpdate, NotificationsUpdate, AvatarUpdate
from cyberwatch.schemas.auth import AuthUser, AuthState, SessionStatus, LoginRequest, RouteDecision
from cyberwatch.schemas.ai import (
    SummarizeThreatInput, SummarizeThreatOutput, SummaryFormInput,
    GenerateReportInput, GenerateReportOutput, ReportDraft,
)
from cyberwatch.schemas.analytics import ChartData, TimeSeriesData, Overview
