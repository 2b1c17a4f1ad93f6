"""
AI Flows: summarize a threat and draft a report.

Each flow validates its input before any outbound call, renders its
contract's prompt, waits at most ``timeout`` seconds for the model, and
validates the reply against the contract's output model. Nothing is retried.
"""

import asyncio
import json
import re
from datetime import datetime, timezone
from typing import Any, Protocol

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cyberwatch.agents.contracts import (
    GENERATE_REPORT_CONTRACT, SUMMARIZE_THREAT_CONTRACT, FlowContract, report_focus,
)
from cyberwatch.agents.llm_backend import LLMBackend, LLMMessage, LLMResponse
from cyberwatch.config import settings
from cyberwatch.errors import GenerationFailure, GenerationTimeout
from cyberwatch.schemas.ai import (
    GenerateReportInput, GenerateReportOutput, SummarizeThreatInput, SummarizeThreatOutput,
)
from cyberwatch.services.validation import validate_form

logger = structlog.get_logger()

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class CompletionBackend(Protocol):
    async def complete(
        self, messages: list[LLMMessage], temperature: float = 0.3, json_output: bool = False
    ) -> LLMResponse: ...


def extract_json_object(text: str) -> dict | None:
    """Pull the first JSON object out of a model reply, tolerating code fences and chatter."""
    if not text or not text.strip():
        return None
    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        value = json.loads(cleaned)
        return value if isinstance(value, dict) else None
    except json.JSONDecodeError:
        pass
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        value = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def format_report_date(now: datetime) -> str:
    """e.g. 'March 5, 2025'."""
    return f"{now:%B} {now.day}, {now.year}"


class AIFlows:
    def __init__(self, backend: CompletionBackend | None = None, timeout: float | None = None):
        self.backend = backend or LLMBackend()
        self.timeout = timeout or settings.ai_timeout

    async def _generate(self, contract: FlowContract, **variables) -> BaseModel:
        messages = contract.render(**variables)
        try:
            response = await asyncio.wait_for(
                self.backend.complete(messages, json_output=True),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("AI flow timed out", flow=contract.name, timeout=self.timeout)
            raise GenerationTimeout(f"{contract.name} timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            logger.error("AI backend request failed", flow=contract.name, error=str(e), exc_info=True)
            raise GenerationFailure(f"{contract.name} failed: {e}") from e

        payload = extract_json_object(response.content if response else "")
        if payload is None:
            logger.error("AI flow returned no usable output", flow=contract.name)
            raise GenerationFailure(f"{contract.name} returned no usable output")
        try:
            return contract.output_model.model_validate(payload)
        except PydanticValidationError as e:
            logger.error("AI output failed schema validation", flow=contract.name, error=str(e))
            raise GenerationFailure(f"{contract.name} returned malformed output") from e

    async def summarize_threat(self, data: Any) -> SummarizeThreatOutput:
        request = validate_form(SummarizeThreatInput, data).unwrap()
        output = await self._generate(SUMMARIZE_THREAT_CONTRACT, threat_details=request.threat_details)
        logger.info("Threat summarized", input_chars=len(request.threat_details))
        return SummarizeThreatOutput.model_validate(output.model_dump())

    async def generate_report(self, data: Any = None) -> GenerateReportOutput:
        request = validate_form(GenerateReportInput, data or {}).unwrap()
        current_date = format_report_date(datetime.now(timezone.utc))
        draft = await self._generate(
            GENERATE_REPORT_CONTRACT,
            current_date=current_date,
            focus=report_focus(request.request_details),
        )
        report = GenerateReportOutput(
            **draft.model_dump(),
            generated_date=datetime.now(timezone.utc),
        )
        logger.info("Report generated", title=report.report_title)
        return report
