"""
Flow Contracts: each AI flow pairs a prompt template with the JSON shape it must return.
"""

import json
from dataclasses import dataclass

from pydantic import BaseModel

from cyberwatch.agents.llm_backend import LLMMessage
from cyberwatch.schemas.ai import ReportDraft, SummarizeThreatOutput


@dataclass
class FlowContract:
    name: str
    system_prompt: str
    prompt_template: str
    output_model: type[BaseModel]

    def output_instructions(self) -> str:
        fields = {
            field.alias or name: field.description or "string"
            for name, field in self.output_model.model_fields.items()
        }
        return (
            "Respond with a single JSON object and nothing else, using exactly these keys:\n"
            f"{json.dumps(fields, indent=2)}"
        )

    def render(self, **variables) -> list[LLMMessage]:
        """Build the message list: system prompt with output rules, then the filled-in prompt."""
        return [
            LLMMessage(role="system", content=f"{self.system_prompt}\n\n{self.output_instructions()}"),
            LLMMessage(role="user", content=self.prompt_template.format(**variables)),
        ]


# ------------------------------------------------------------------
# Pre-defined contracts
# ------------------------------------------------------------------

SUMMARIZE_THREAT_CONTRACT = FlowContract(
    name="summarizeThreat",
    system_prompt="You are an expert cybersecurity analyst.",
    prompt_template=(
        "Please provide a concise summary of the following cybersecurity threat details:\n\n"
        "{threat_details}"
    ),
    output_model=SummarizeThreatOutput,
)

GENERATE_REPORT_CONTRACT = FlowContract(
    name="generateReport",
    system_prompt="You are a cybersecurity analyst tasked with generating a report.",
    prompt_template=(
        "Today's date is {current_date}.\n\n"
        "Based on general cybersecurity knowledge and the following optional request, "
        "create a plausible report title and a concise summary (2-3 paragraphs).\n\n"
        "{focus}\n\n"
        "Output only the title and summary in the specified format."
    ),
    output_model=ReportDraft,
)

DEFAULT_REPORT_FOCUS = "The report should cover recent general threat trends and mitigation advice."


def report_focus(request_details: str | None) -> str:
    if request_details:
        return f"Specific request focus: {request_details}"
    return DEFAULT_REPORT_FOCUS
