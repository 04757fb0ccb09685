"""AI reviewer adapter: ask an OpenAI-compatible chat model to review code and parse its JSON answer."""

import json
import logging
import math
import re
import time
from typing import TYPE_CHECKING, Any

import httpx

from codeguard.schemas.analysis import AIReview
from codeguard.schemas.findings import (
    ISSUE_KINDS,
    SEVERITY_VALUES,
    ExplanationLevel,
    Finding,
    IssueKind,
    SeverityLevel,
)
from codeguard.services.errors import (
    ModelQuotaExhaustedError,
    ModelRateLimitedError,
    ModelUnavailableError,
)
from codeguard.services.rules import OWASP_CATEGORIES

if TYPE_CHECKING:
    from codeguard.core.config import Settings

logger = logging.getLogger(__name__)

# Score used when the model gives none or its answer cannot be parsed.
NEUTRAL_SCORE = 50

_DEFAULT_AI_KIND: IssueKind = "vulnerability"
_DEFAULT_AI_SEVERITY: SeverityLevel = "medium"

EXPLANATION_PROFILES: dict[str, str] = {
    "junior": "Explain issues in simple terms for a junior developer. Use analogies.",
    "senior": "Provide concise, technical explanations. Include CWE references.",
    "lead": (
        "Provide detailed analysis with threat modeling, "
        "compliance implications (OWASP, PCI-DSS)."
    ),
}

# First fenced block, optionally tagged json; content captured non-greedily.
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_OWASP_ID = re.compile(r"A(\d{1,2})", re.IGNORECASE)
_CWE_NUMBER = re.compile(r"(\d+)")

_OWASP_NAMES_BY_ID: dict[str, str] = {cid: name for cid, name in OWASP_CATEGORIES.values()}


def build_system_prompt(level: ExplanationLevel | str, known_titles: list[str]) -> str:
    """Instruction profile for the audience plus the list of titles the static pass already found."""
    profile = EXPLANATION_PROFILES.get(level, "")
    already = ""
    if known_titles:
        already = f"Already detected: {', '.join(known_titles)}. Don't repeat these.\n"
    return f"""You are a security expert. {profile}

Analyze the code for security vulnerabilities, bugs, and poor practices.
{already}
For each NEW issue, provide: type (vulnerability|bug|code_smell|performance), severity (critical|high|medium|low), title, line, description, fix, owasp_id (A01-A10), cwe_id.

Respond in JSON: {{ "summary": "...", "issues": [...], "fixed_code": "...", "score": 0-100 }}"""


def build_user_prompt(code: str, language: str) -> str:
    return f"Analyze this {language} code:\n```{language}\n{code}\n```"


def _coerce_score(value: Any) -> int | None:
    """Model scores arrive as int, float, or numeric string; anything else counts as absent."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return int(round(value))
    return None


def _coerce_line(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        line = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return line if line >= 1 else None


def _coerce_kind(value: Any) -> IssueKind:
    if isinstance(value, str):
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        if normalized in ISSUE_KINDS:
            return normalized  # type: ignore[return-value]
    return _DEFAULT_AI_KIND


def _coerce_severity(value: Any) -> SeverityLevel:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in SEVERITY_VALUES:
            return normalized  # type: ignore[return-value]
    return _DEFAULT_AI_SEVERITY


def _coerce_category(value: Any) -> tuple[str, str]:
    """Map 'A3', 'A03', 'A03:2021 - Injection' to a known OWASP (id, name); else the default."""
    if isinstance(value, str):
        match = _OWASP_ID.search(value)
        if match:
            category_id = f"A{int(match.group(1)):02d}"
            if category_id in _OWASP_NAMES_BY_ID:
                return category_id, _OWASP_NAMES_BY_ID[category_id]
    return OWASP_CATEGORIES["default"]


def _coerce_cwe(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    match = _CWE_NUMBER.search(str(value))
    return f"CWE-{match.group(1)}" if match else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _issue_to_finding(item: Any) -> Finding | None:
    """Convert one model-reported issue; returns None for entries without a usable title."""
    if not isinstance(item, dict):
        return None
    title = _text(item.get("title")).strip()
    if not title:
        return None
    category_id, category_name = _coerce_category(item.get("owasp_id") or item.get("category_id"))
    return Finding(
        kind=_coerce_kind(item.get("type") or item.get("kind")),
        severity=_coerce_severity(item.get("severity")),
        title=title,
        description=_text(item.get("description")),
        remediation=_text(item.get("fix") or item.get("remediation")),
        line=_coerce_line(item.get("line")),
        category_id=category_id,
        category_name=category_name,
        weakness_id=_coerce_cwe(item.get("cwe_id") or item.get("weakness_id")),
        origin="ai",
    )


def fallback_review(raw_text: str | None) -> AIReview:
    """Zero-issue review carrying the raw model text as summary and a neutral score."""
    return AIReview(summary=raw_text or "", issues=[], fixed_code=None, score=NEUTRAL_SCORE)


def parse_review_content(content: str | None) -> AIReview:
    """
    Parse the model's message content into an AIReview.

    JSON is taken from the first fenced block when present, otherwise from the raw text.
    Unparseable content, or JSON that is not an object, yields fallback_review(content).
    Malformed individual issues are skipped.
    """
    if not content or not isinstance(content, str):
        return fallback_review(content if isinstance(content, str) else None)

    match = _FENCED_BLOCK.search(content)
    json_str = match.group(1).strip() if match else content.strip()
    try:
        parsed = json.loads(json_str)
    except (ValueError, RecursionError):
        logger.info("AI review content is not valid JSON; using fallback result")
        return fallback_review(content)
    if not isinstance(parsed, dict):
        logger.info("AI review content is not a JSON object; using fallback result")
        return fallback_review(content)

    raw_issues = parsed.get("issues")
    issues: list[Finding] = []
    if isinstance(raw_issues, list):
        for item in raw_issues:
            finding = _issue_to_finding(item)
            if finding is not None:
                issues.append(finding)

    fixed_code = parsed.get("fixed_code")
    return AIReview(
        summary=_text(parsed.get("summary")),
        issues=issues,
        fixed_code=fixed_code if isinstance(fixed_code, str) and fixed_code else None,
        score=_coerce_score(parsed.get("score")),
    )


def _log_failure(elapsed: float, settings: "Settings", code_chars: int) -> None:
    logger.info(
        "AI review request failed",
        extra={
            "llm_latency_seconds": elapsed,
            "code_chars": code_chars,
            "model": settings.AI_MODEL,
            "status": "error",
        },
    )


async def run_ai_review(
    code: str,
    language: str,
    explanation_level: ExplanationLevel | str,
    known_titles: list[str],
    settings: "Settings",
) -> AIReview:
    """
    Send code to the model provider and return the parsed review.

    Raises ModelRateLimitedError (429), ModelQuotaExhaustedError (402), or ModelUnavailableError
    (connection failure, timeout, other non-success status). Unparseable content is not an
    error: it yields the fallback review.
    """
    url = f"{settings.AI_BASE_URL.rstrip('/')}/chat/completions"
    payload = {
        "model": settings.AI_MODEL,
        "messages": [
            {"role": "system", "content": build_system_prompt(explanation_level, known_titles)},
            {"role": "user", "content": build_user_prompt(code, language)},
        ],
        "stream": False,
        "temperature": settings.AI_TEMPERATURE,
        "top_p": settings.AI_TOP_P,
        "seed": settings.AI_SEED,
    }
    headers = {"Content-Type": "application/json"}
    if settings.AI_API_KEY is not None and settings.AI_API_KEY.get_secret_value():
        headers["Authorization"] = f"Bearer {settings.AI_API_KEY.get_secret_value()}"
    timeout = httpx.Timeout(settings.AI_REQUEST_TIMEOUT_SEC)
    start = time.perf_counter()

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(url, json=payload, headers=headers)
        elapsed = time.perf_counter() - start
    except httpx.ConnectError as e:
        _log_failure(time.perf_counter() - start, settings, len(code))
        raise ModelUnavailableError(
            "AI provider is unreachable. Ensure AI_BASE_URL is correct and the service is running.",
            cause=e,
        ) from e
    except httpx.TimeoutException as e:
        _log_failure(time.perf_counter() - start, settings, len(code))
        raise ModelUnavailableError(
            "AI provider request timed out. Try again or increase AI_REQUEST_TIMEOUT_SEC.",
            cause=e,
        ) from e
    except httpx.HTTPError as e:
        _log_failure(time.perf_counter() - start, settings, len(code))
        raise ModelUnavailableError("AI provider request failed.", cause=e) from e

    status = response.status_code
    if status == 429:
        raise ModelRateLimitedError("AI provider rate limit exceeded. Please try again later.")
    if status == 402:
        raise ModelQuotaExhaustedError("AI provider credits exhausted.")
    if status < 200 or status >= 300:
        raise ModelUnavailableError(
            f"AI provider returned status {status}.",
            retryable=status >= 500,
            upstream_status=status,
        )

    logger.info(
        "AI review request completed",
        extra={
            "llm_latency_seconds": elapsed,
            "code_chars": len(code),
            "model": settings.AI_MODEL,
        },
    )

    try:
        body = response.json()
    except ValueError:
        return fallback_review(response.text)

    content: Any = None
    if isinstance(body, dict):
        choices = body.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                content = message.get("content")
    return parse_review_content(content if isinstance(content, str) else None)
