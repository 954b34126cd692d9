"""Per-target scan lifecycle on top of ZapService."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .models import ANONYMOUS_USER, ScanJob, ScanReport, Target
from .service import ZapService

logger = logging.getLogger(__name__)


class ScanWorkflow:
    """Run context setup, login, replay, spider and active scan for one target."""

    def __init__(self, service: ZapService):
        self.service = service

    def run(
        self,
        target: Target,
        spider: bool = True,
        active_scan: bool = True,
        cancel: threading.Event | None = None,
        progress: Callable[[ScanJob], None] | None = None,
        wait_for_slot: bool = False,
    ) -> ScanReport:
        """Execute the enabled phases and collect their findings."""
        service = self.service
        attrs = target.attributes
        report = ScanReport(target=target.location)

        with service.scan_slot(blocking=wait_for_slot):
            service.initialize()
            service.clear_session()
            report.context_id = service.create_context(
                target.location, list(attrs.include_regex), attrs.exclude_regex
            )

            if attrs.authentication is not None:
                report.user_id = service.apply_authentication(
                    report.context_id, attrs.authentication
                )

            report.replay = service.recall_target(target, attrs.replacer_rules)

            if spider:
                report.spider_findings = self._spider(target, report, cancel, progress)

            if active_scan:
                scan_id = service.start_active_scan(
                    target.location,
                    report.context_id,
                    report.user_id,
                    attrs.delay_in_ms,
                    attrs.threads_per_host,
                    attrs.replacer_rules,
                )
                report.scanner_findings = service.retrieve_scanner_result(
                    scan_id, target.location, cancel=cancel, progress=progress
                )

        logger.info(
            "Scan of %s finished: %d spider findings, %d alerts",
            target.location,
            len(report.spider_findings),
            len(report.scanner_findings),
        )
        return report

    def _spider(self, target: Target, report: ScanReport, cancel, progress):
        attrs = target.attributes
        if attrs.sitemap is not None and not attrs.sitemap:
            logger.warning("No crawl seeds for %s; skipping spider phase", target.location)
            return []
        scan_id = self.service.start_spider(
            target.location,
            attrs.api_spec_url,
            attrs.max_depth,
            report.context_id,
            report.user_id or ANONYMOUS_USER,
            attrs.replacer_rules,
        )
        return self.service.retrieve_spider_result(
            scan_id, cancel=cancel, progress=progress, target_url=target.location
        )
