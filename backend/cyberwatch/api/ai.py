from fastapi import APIRouter, Body, Depends

from cyberwatch.agents.flows import AIFlows
from cyberwatch.api.deps import get_ai_flows, get_feed
from cyberwatch.schemas.ai import GenerateReportOutput, SummarizeThreatOutput, SummaryFormInput
from cyberwatch.services.threat_feed import ThreatFeed
from cyberwatch.services.validation import validate_form

router = APIRouter()


@router.post("/summarize", response_model=SummarizeThreatOutput)
async def summarize(payload: dict = Body(...), flows: AIFlows = Depends(get_ai_flows)):
    """AI summary form: 50-5000 characters of threat details."""
    form = validate_form(SummaryFormInput, payload).unwrap()
    return await flows.summarize_threat(form)


@router.post("/summarize/{threat_id}", response_model=SummarizeThreatOutput)
async def summarize_threat(
    threat_id: str,
    feed: ThreatFeed = Depends(get_feed),
    flows: AIFlows = Depends(get_ai_flows),
):
    """Summarize a feed entry from its full details."""
    threat = feed.get(threat_id)
    return await flows.summarize_threat({"threatDetails": threat.details_for_summary})


@router.post("/reports", response_model=GenerateReportOutput)
async def generate_report(payload: dict | None = Body(None), flows: AIFlows = Depends(get_ai_flows)):
    return await flows.generate_report(payload or {})
