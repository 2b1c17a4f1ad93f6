from fastapi import APIRouter, Depends

from cyberwatch.api.deps import get_analytics
from cyberwatch.schemas.analytics import ChartData, Overview, TimeSeriesData
from cyberwatch.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/common-threats", response_model=list[ChartData])
async def common_threats(service: AnalyticsService = Depends(get_analytics)):
    return service.common_threats()


@router.get("/severity-distribution", response_model=list[ChartData])
async def severity_distribution(service: AnalyticsService = Depends(get_analytics)):
    return service.severity_distribution()


@router.get("/trends", response_model=list[TimeSeriesData])
async def threat_trends(service: AnalyticsService = Depends(get_analytics)):
    return service.threat_trends()


@router.get("/overview", response_model=Overview)
async def overview(service: AnalyticsService = Depends(get_analytics)):
    return service.overview()
