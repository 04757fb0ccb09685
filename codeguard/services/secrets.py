"""Secret classifier: infer credential type, privilege, liveness, and rotation steps for a secret-bearing line."""

import re

from codeguard.schemas.findings import SecretContext, SeverityLevel

# Only the start of the file is inspected for test-fixture vocabulary.
FILE_HEADER_CHARS = 500

_TEST_VOCABULARY = re.compile(
    r"test|demo|sample|example|fake|mock|dummy|sandbox|dev", re.IGNORECASE
)
_LIVE_VOCABULARY = re.compile(r"live|prod|production", re.IGNORECASE)

GENERIC_SECRET = "Generic Secret"

# (key type, provider pattern, high-privilege pattern or True for always) in priority order.
# Rotation steps are literal and ordered; they are shown to users verbatim.
_PROVIDERS: tuple[tuple[str, re.Pattern[str], re.Pattern[str] | bool, tuple[str, ...]], ...] = (
    (
        "Stripe API Key",
        re.compile(r"stripe", re.IGNORECASE),
        re.compile(r"sk_live", re.IGNORECASE),
        (
            "1. Go to Stripe Dashboard → Developers → API Keys",
            "2. Roll the compromised key",
            "3. Update all services using the old key",
            "4. Monitor for unauthorized transactions",
        ),
    ),
    (
        "AWS Credentials",
        re.compile(r"aws|amazon", re.IGNORECASE),
        True,
        (
            "1. Immediately deactivate the key in AWS IAM",
            "2. Create a new key pair",
            "3. Update all applications",
            "4. Review CloudTrail for unauthorized access",
        ),
    ),
    (
        "GitHub Token",
        re.compile(r"github", re.IGNORECASE),
        re.compile(r"ghp_|gho_", re.IGNORECASE),
        (
            "1. Revoke token in GitHub Settings → Developer Settings",
            "2. Generate new token with minimal scopes",
            "3. Update CI/CD configurations",
        ),
    ),
    (
        "AI API Key",
        re.compile(r"openai|anthropic|gemini", re.IGNORECASE),
        True,
        (
            "1. Revoke key in provider dashboard",
            "2. Generate new key",
            "3. Update environment variables",
            "4. Check usage for unauthorized calls",
        ),
    ),
    (
        "Password",
        re.compile(r"password|passwd|pwd", re.IGNORECASE),
        re.compile(r"admin|root|master|super", re.IGNORECASE),
        (
            "1. Change the password immediately",
            "2. Review access logs",
            "3. Enable MFA if available",
            "4. Audit affected accounts",
        ),
    ),
    (
        "Database Credentials",
        re.compile(r"database|db_|mongodb|postgres|mysql", re.IGNORECASE),
        True,
        (
            "1. Rotate database credentials",
            "2. Update connection strings",
            "3. Review database access logs",
            "4. Consider IP whitelisting",
        ),
    ),
)

_GENERIC_ROTATION_STEPS = (
    "1. Identify the service this key belongs to",
    "2. Revoke and regenerate the key",
    "3. Update all dependent services",
)


def _identify_key_type(line: str) -> tuple[str, bool, list[str]]:
    """Return (key_type, is_high_privilege, rotation_steps) using provider priority."""
    for key_type, provider, privilege, steps in _PROVIDERS:
        if not provider.search(line):
            continue
        if isinstance(privilege, bool):
            is_high_privilege = privilege
        else:
            is_high_privilege = privilege.search(line) is not None
        return key_type, is_high_privilege, list(steps)
    return GENERIC_SECRET, False, list(_GENERIC_ROTATION_STEPS)


def _risk_level(is_live: bool, is_high_privilege: bool, is_test: bool) -> SeverityLevel:
    if is_live and is_high_privilege:
        return "critical"
    if is_live:
        return "high"
    if is_test:
        return "low"
    return "medium"


def classify_secret(code: str, line: str) -> SecretContext:
    """
    Classify a hardcoded secret found on `line` of `code`.

    Test vocabulary in the line or in the first FILE_HEADER_CHARS of the file marks a test key.
    A key is live when it is not a test key and is either high-privilege or the line mentions
    live/prod. The resulting risk_level replaces the rule's default severity.
    """
    line = line or ""
    code = code or ""
    is_test_key = bool(
        _TEST_VOCABULARY.search(line) or _TEST_VOCABULARY.search(code[:FILE_HEADER_CHARS])
    )
    key_type, is_high_privilege, rotation_steps = _identify_key_type(line)
    is_live_key = not is_test_key and (
        is_high_privilege or _LIVE_VOCABULARY.search(line) is not None
    )
    return SecretContext(
        risk_level=_risk_level(is_live_key, is_high_privilege, is_test_key),
        is_test_key=is_test_key,
        is_live_key=is_live_key,
        is_high_privilege=is_high_privilege,
        key_type=key_type,
        rotation_steps=rotation_steps,
    )
