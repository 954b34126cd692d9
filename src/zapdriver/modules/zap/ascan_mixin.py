"""Active scan orchestration for ZapService."""

import logging
import threading
from collections.abc import Callable, Iterable

from zapdriver.modules.engine import flag

from .models import ANONYMOUS_USER, Finding, RateLimitConfig, ReplacerRule, ScanJob, ScanKind
from .polling import ScanIncompleteError, WaitOutcome, wait_for_completion
from .results import alert_finding
from .spider_mixin import is_anonymous

logger = logging.getLogger(__name__)


class ActiveScanMixin:
    """Configure, launch and collect the active scanning phase."""

    def start_active_scan(
        self,
        target_url: str,
        context_id: str,
        user_id: str | None = ANONYMOUS_USER,
        delay_in_ms: int | None = None,
        threads_per_host: int | None = None,
        replacer_rules: Iterable[ReplacerRule] | None = None,
    ) -> str:
        """Launch an active scan and return its scan id."""
        logger.info("Starting active scan for target URL '%s' and user %s", target_url, user_id)
        limits = self.rate_limit_defaults.with_overrides(delay_in_ms, threads_per_host)

        self.zap.ascan.enable_all_scanners()
        self.zap.ascan.set_option_handle_anti_csrf_tokens(boolean=flag(True))
        self._apply_rate_limits(limits)

        self.replacer.configure(replacer_rules)

        if is_anonymous(user_id):
            scan_id = self.zap.ascan.scan(
                url=target_url, recurse=flag(True), inscopeonly=flag(False)
            )
        else:
            scan_id = self.zap.ascan.scan_as_user(
                url=target_url, contextid=context_id, userid=user_id, recurse=flag(True)
            )
        return str(scan_id)

    def _apply_rate_limits(self, limits: RateLimitConfig) -> None:
        logger.debug(
            "Setting scan rate limits: delayInMs=%d threadsPerHost=%d",
            limits.delay_in_ms,
            limits.threads_per_host,
        )
        self.zap.ascan.set_option_delay_in_ms(integer=limits.delay_in_ms)
        self.zap.ascan.set_option_thread_per_host(integer=limits.threads_per_host)

    def scanner_progress(self, scan_id: str) -> int:
        return int(self.zap.ascan.status(scanid=scan_id))

    def retrieve_scanner_result(
        self,
        scan_id: str,
        target_url: str,
        cancel: threading.Event | None = None,
        progress: Callable[[ScanJob], None] | None = None,
    ) -> list[Finding]:
        """Block until the active scan finishes and return the target's alerts."""
        job = ScanJob(scan_id=scan_id, kind=ScanKind.ACTIVE_SCAN)

        def report(value: int) -> None:
            job.progress = value
            logger.info("Scanner (ID: %s) progress: %d%%", scan_id, value)
            if progress:
                progress(job)

        outcome = wait_for_completion(
            lambda: self.scanner_progress(scan_id),
            interval=self.settings.scanner_poll_interval,
            timeout=self.settings.scanner_timeout,
            cancel=cancel,
            on_progress=report,
        )
        if outcome is not WaitOutcome.COMPLETED:
            raise ScanIncompleteError(scan_id, outcome)
        logger.info("Scanner (ID: %s) completed", scan_id)

        alerts = self.zap.core.alerts(baseurl=target_url)
        if not isinstance(alerts, list):
            alerts = []
        findings = [
            alert_finding(
                alert, self.get_transaction(str(alert.get("messageId", ""))), target_url
            )
            for alert in alerts
            if isinstance(alert, dict)
        ]
        logger.info("Found %d alerts for target URL %s", len(findings), target_url)
        return findings
