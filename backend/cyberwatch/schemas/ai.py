from datetime import datetime
from pydantic import Field, field_validator

from cyberwatch.schemas.common import CamelModel


class SummarizeThreatInput(CamelModel):
    threat_details: str = Field(description="Detailed description of the cybersecurity threat.")


class SummarizeThreatOutput(CamelModel):
    summary: str = Field(description="A concise summary of the cybersecurity threat.")


class SummaryFormInput(SummarizeThreatInput):
    """AI summary page form; bounds the text before the adapter is called."""

    @field_validator("threat_details")
    @classmethod
    def _details_length(cls, v: str) -> str:
        if len(v) < 50:
            raise ValueError("Threat details must be at least 50 characters.")
        if len(v) > 5000:
            raise ValueError("Threat details must not exceed 5000 characters.")
        return v


class GenerateReportInput(CamelModel):
    request_details: str | None = Field(
        default=None, description="Optional specific details or focus areas for the report."
    )


class ReportDraft(CamelModel):
    """What the model is asked to produce; the date is stamped afterwards."""

    report_title: str = Field(description="A plausible title for the generated report.")
    report_summary: str = Field(description="A concise summary of the cybersecurity report.")


class GenerateReportOutput(ReportDraft):
    generated_date: datetime
