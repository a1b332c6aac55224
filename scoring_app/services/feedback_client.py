from __future__ import annotations

import logging
from typing import Any

import httpx
from django.conf import settings

from scoring_app.services.task_math import EvaluationResult


logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "AI analysis is unavailable because no API key is configured."
EMPTY_RESPONSE_MESSAGE = "The AI analysis could not be generated."
FAILURE_MESSAGE = "An error occurred during AI analysis. Please try again shortly."


def build_feedback_prompt(result: EvaluationResult) -> str:
    breakdown_text = "\n".join(
        f"- {m.rule.name} ({m.rule.category.label}): input {m.input_value:g} {m.rule.unit}, "
        f"score {m.raw_score:g} (weighted: {m.weighted_score:g})"
        for m in result.breakdown
    )
    summary_text = "\n".join(
        f"- {s.task_name}: final {s.final_score:.1f} "
        f"(quantitative {s.quant_converted:.1f}, qualitative {s.qual_converted:.1f})"
        for s in result.task_summaries
    )
    opinion_text = (
        f'\n[Evaluator opinion]\n"{result.qualitative_opinion}"\n'
        if result.qualitative_opinion else ""
    )
    detail_title = "[Per-task results]" if result.is_comprehensive else "[Metric details]"
    detail_text = summary_text if result.is_comprehensive else breakdown_text

    return f"""You are a thorough and fair performance review expert.
Below is one employee's performance evaluation data. Write roughly 300 characters of
overall feedback that covers:

1. A summary of the quantitative results (strengths and weaknesses)
2. The qualitative evaluation and the evaluator's opinion
3. An interpretation of the current score ({result.final_score:.1f})
4. Concrete advice for improving performance

[Evaluation data]
- Quantitative converted score (out of 70): {result.quant_converted:.1f}
- Qualitative converted score (out of 30): {result.qual_converted:.1f}
- Final total: {result.final_score:.1f} (grade {result.grade})
{opinion_text}
{detail_title}
{detail_text}
"""


class FeedbackClient:
    """
    Thin client for the Gemini generateContent endpoint. Always returns a
    string: failures are logged and turned into a fixed message.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, **kwargs) -> "FeedbackClient":
        conf = settings.SCORING
        return cls(
            api_key=conf.get("GEMINI_API_KEY", ""),
            model=conf.get("GEMINI_MODEL", ""),
            base_url=conf.get("GEMINI_BASE_URL", ""),
            timeout=conf.get("GEMINI_TIMEOUT", 20.0),
            **kwargs,
        )

    @staticmethod
    def _extract_text(body: Any) -> str:
        """Text of the first candidate; anything off-shape reads as empty."""
        if not isinstance(body, dict):
            return ""
        candidates = body.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        texts = [part.get("text") for part in parts if isinstance(part, dict)]
        return "".join(text for text in texts if isinstance(text, str)).strip()

    def generate(self, result: EvaluationResult) -> str:
        if not self.api_key:
            logger.warning("Gemini API key is missing.")
            return MISSING_KEY_MESSAGE

        payload = {
            "contents": [{"parts": [{"text": build_feedback_prompt(result)}]}],
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload, headers=self.headers)
            if response.status_code >= 400:
                logger.error("Gemini feedback request failed: %s", response.text)
                response.raise_for_status()
            text = self._extract_text(response.json())
        except (httpx.HTTPError, ValueError):
            logger.exception("Gemini API error")
            return FAILURE_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE
