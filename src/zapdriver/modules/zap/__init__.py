"""OWASP ZAP scan orchestration."""

from .har import Har, HarEntry, HarParseError, HarRequest
from .login import (
    AuthenticationSettings,
    FormBasedLogin,
    LoginMethod,
    LoginTemplateError,
    ScriptBasedLogin,
)
from .models import (
    ANONYMOUS_USER,
    CONTEXT_NAME,
    SESSION_NAME,
    Finding,
    RateLimitConfig,
    Reference,
    ReplacerRule,
    ReplayReport,
    ReplayResult,
    ScanJob,
    ScanKind,
    ScanReport,
    SitemapEntry,
    Status,
    StatusDetail,
    Target,
    TargetAttributes,
)
from .polling import ScanIncompleteError, WaitOutcome, wait_for_completion
from .replacer import ReplacerConfigurator
from .service import EngineBusyError, ZapService
from .workflow import ScanWorkflow

__all__ = [
    "ANONYMOUS_USER",
    "AuthenticationSettings",
    "CONTEXT_NAME",
    "EngineBusyError",
    "Finding",
    "FormBasedLogin",
    "Har",
    "HarEntry",
    "HarParseError",
    "HarRequest",
    "LoginMethod",
    "LoginTemplateError",
    "RateLimitConfig",
    "Reference",
    "ReplacerConfigurator",
    "ReplacerRule",
    "ReplayReport",
    "ReplayResult",
    "SESSION_NAME",
    "ScanIncompleteError",
    "ScanJob",
    "ScanKind",
    "ScanReport",
    "ScanWorkflow",
    "ScriptBasedLogin",
    "SitemapEntry",
    "Status",
    "StatusDetail",
    "Target",
    "TargetAttributes",
    "WaitOutcome",
    "ZapService",
    "wait_for_completion",
]
