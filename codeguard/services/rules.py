"""Rule catalog: fixed line-level pattern detectors with finding templates and OWASP category mapping."""

import re
from dataclasses import dataclass

from codeguard.schemas.findings import IssueKind, SeverityLevel

# OWASP Top 10 (2021) lookup keyed by detector kind; "default" is the catch-all.
OWASP_CATEGORIES: dict[str, tuple[str, str]] = {
    "sql_injection": ("A03", "Injection"),
    "command_injection": ("A03", "Injection"),
    "xss": ("A03", "Injection"),
    "eval": ("A03", "Injection"),
    "hardcoded_secret": ("A07", "Identification and Authentication Failures"),
    "weak_crypto": ("A02", "Cryptographic Failures"),
    "ssl_disabled": ("A02", "Cryptographic Failures"),
    "sensitive_data_logging": ("A09", "Security Logging and Monitoring Failures"),
    "default": ("A05", "Security Misconfiguration"),
}

# Rule key whose severity is decided by the secret classifier.
SECRET_RULE_KEY = "hardcoded_secret"


def category_for(key: str | None) -> tuple[str, str]:
    """Return (category_id, category_name) for a detector kind, falling back to the default."""
    if key and key in OWASP_CATEGORIES:
        return OWASP_CATEGORIES[key]
    return OWASP_CATEGORIES["default"]


@dataclass(frozen=True)
class StaticRule:
    """One pattern detector: a compiled line regex plus the finding it emits."""

    key: str
    pattern: re.Pattern[str]
    kind: IssueKind
    severity: SeverityLevel
    title: str
    description: str
    remediation: str
    weakness_id: str
    category_key: str


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


RULES: tuple[StaticRule, ...] = (
    StaticRule(
        key=SECRET_RULE_KEY,
        pattern=_compile(
            r"(?:api[_-]?key|apikey|key|secret|password|passwd|pwd|token|auth)"
            r"\s*[:=]\s*[\"'][\w\-]{16,}[\"']"
        ),
        kind="vulnerability",
        severity="critical",
        title="Hardcoded Secret Detected",
        description="Credentials or API keys are hardcoded in the source code.",
        remediation="Move secrets to environment variables or a secure secret management service.",
        weakness_id="CWE-798",
        category_key="hardcoded_secret",
    ),
    StaticRule(
        key="sql_injection",
        pattern=_compile(
            # query/execute call with interpolated literal
            r"(?:execute|query|exec)\s*\(\s*[\"'`].*\$\{"
            r"|\.query\s*\(\s*`[^`]*\$\{"
            # SQL statement literal concatenated with a value
            r"|\b(?:select\b.*\bfrom|insert\s+into|update\b.*\bset|delete\s+from)\b.*[\"']\s*\+"
            # Python f-string / %-format SQL
            r"|\bf[\"'][^\"']*\b(?:select|insert|update|delete)\b[^\"']*\{"
            r"|(?:execute|query)\s*\(\s*[\"'][^\"']*%s[^\"']*[\"']\s*%"
            # string built from request input
            r"|[\"'].*\+.*(?:req|request|params|query|body)\."
        ),
        kind="vulnerability",
        severity="critical",
        title="Potential SQL Injection",
        description="User input appears to be directly concatenated into SQL queries.",
        remediation="Use parameterized queries or prepared statements.",
        weakness_id="CWE-89",
        category_key="sql_injection",
    ),
    StaticRule(
        key="command_injection",
        pattern=_compile(
            r"(?:exec|spawn|execSync|spawnSync|execFile|system|popen)\s*\([^)]*"
            # concatenated or interpolated argument (JS template or Python f-string)
            r"(?:\+|`|\$\{|\bf[\"'][^\"']*\{)"
        ),
        kind="vulnerability",
        severity="critical",
        title="Potential Command Injection",
        description="User input may be passed to shell commands without proper sanitization.",
        remediation="Avoid shell commands with user input. Use allowlists and escape all input.",
        weakness_id="CWE-78",
        category_key="command_injection",
    ),
    StaticRule(
        key="xss",
        pattern=_compile(
            r"\.(?:inner|outer)HTML\s*=(?!=)|dangerouslySetInnerHTML|document\.write\s*\("
        ),
        kind="vulnerability",
        severity="high",
        title="Potential XSS Vulnerability",
        description="Direct HTML injection can lead to Cross-Site Scripting attacks.",
        remediation="Use textContent instead of innerHTML, or sanitize HTML with DOMPurify.",
        weakness_id="CWE-79",
        category_key="xss",
    ),
    StaticRule(
        key="eval",
        pattern=_compile(r"\beval\s*\(|new\s+Function\s*\("),
        kind="vulnerability",
        severity="high",
        title="Dangerous eval() Usage",
        description="eval() can execute arbitrary code and is a security risk.",
        remediation="Avoid eval(). Use JSON.parse() for JSON data.",
        weakness_id="CWE-95",
        category_key="eval",
    ),
    StaticRule(
        key="weak_crypto",
        pattern=_compile(
            r"\b(?:md5|sha1)\s*\("
            r"|createHash\s*\(\s*[\"'](?:md5|sha1)[\"']\s*\)"
            r"|hashlib\.new\s*\(\s*[\"'](?:md5|sha1)[\"']"
        ),
        kind="vulnerability",
        severity="medium",
        title="Weak Cryptographic Hash",
        description="MD5 and SHA1 are cryptographically weak.",
        remediation="Use SHA-256 or stronger. For passwords, use bcrypt or Argon2.",
        weakness_id="CWE-328",
        category_key="weak_crypto",
    ),
    StaticRule(
        key="sensitive_data_logging",
        pattern=_compile(
            r"(?:console\.(?:log|info|warn|error|debug)|\bprint|\blog(?:ger|ging)?\."
            r"(?:debug|info|warn|warning|error|critical))"
            r"\s*\([^)]*(?:password|secret|token|key|auth|credential)"
        ),
        kind="code_smell",
        severity="medium",
        title="Sensitive Data in Logs",
        description="Logging sensitive information can expose credentials.",
        remediation="Remove or mask sensitive data before logging.",
        weakness_id="CWE-532",
        category_key="sensitive_data_logging",
    ),
    StaticRule(
        key="ssl_disabled",
        pattern=_compile(
            r"rejectUnauthorized\s*:\s*false"
            r"|NODE_TLS_REJECT_UNAUTHORIZED\s*=\s*[\"']?0"
            r"|\bverify\s*=\s*False"
            r"|\bssl\s*=\s*False"
            r"|InsecureSkipVerify\s*:\s*true"
            r"|CERT_NONE"
        ),
        kind="vulnerability",
        severity="high",
        title="SSL Verification Disabled",
        description="Disabling SSL verification makes the application vulnerable to MITM attacks.",
        remediation="Enable SSL verification. Fix certificate issues properly.",
        weakness_id="CWE-295",
        category_key="ssl_disabled",
    ),
    StaticRule(
        key="security_todo",
        pattern=_compile(
            r"(?://|#|/\*)\s*(?:TODO|FIXME|HACK|XXX).*(?:security|auth|password|encrypt)"
        ),
        kind="code_smell",
        severity="low",
        title="Security-Related TODO",
        description="There are unresolved security-related tasks.",
        remediation="Address the security concern before deploying.",
        weakness_id="CWE-546",
        category_key="default",
    ),
    StaticRule(
        key="hardcoded_localhost",
        pattern=_compile(
            r"[\"'](?:https?://)?(?:localhost|127\.0\.0\.1|0\.0\.0\.0):\d+(?:/[^\"']*)?[\"']"
        ),
        kind="code_smell",
        severity="low",
        title="Hardcoded Localhost",
        description="Hardcoded localhost addresses may cause issues in production.",
        remediation="Use environment variables for host configuration.",
        weakness_id="CWE-1188",
        category_key="default",
    ),
)
