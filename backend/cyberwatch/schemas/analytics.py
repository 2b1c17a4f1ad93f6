import datetime
from pydantic import Field

from cyberwatch.schemas.common import CamelModel
from cyberwatch.schemas.threat import Threat


class ChartData(CamelModel):
    name: str
    value: int = Field(ge=0)
    fill: str | None = None


class TimeSeriesData(CamelModel):
    date: datetime.date
    count: int = Field(ge=0)


class Overview(CamelModel):
    total_threats: int
    by_severity: dict[str, int]
    latest_threat: Threat | None = None
    enabled_alerts: int = 0
