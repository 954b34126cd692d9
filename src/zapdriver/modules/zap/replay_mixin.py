"""Traffic replay (sitemap recall) for ZapService."""

import logging
from collections.abc import Iterable

from zapdriver.modules.engine import ZapApiError, flag

from .models import ReplacerRule, ReplayReport, ReplayResult, Target

logger = logging.getLogger(__name__)


class ReplayMixin:
    """Seed the engine history by resubmitting captured requests."""

    def recall_target(
        self, target: Target, replacer_rules: Iterable[ReplacerRule] | None = None
    ) -> ReplayReport:
        """Replay every sitemap entry of ``target`` through the engine.

        Entries without a method or URL, and entries that cannot be serialized
        or submitted, are logged and reported as skipped. The batch itself
        never fails on a single entry.
        """
        report = ReplayReport()
        sitemap = target.attributes.sitemap
        if sitemap is None:
            logger.warning(
                "Tried to recall an empty sitemap to ZAP. The scan will have no targets to act on."
            )
            return report

        self.replacer.configure(replacer_rules)

        logger.info("Recalling %d requests to ZAP", len(sitemap))
        for entry in sitemap:
            if not entry.method or not entry.url:
                logger.error("Sitemap entry is missing its method or URL: %r", entry)
                report.results.append(
                    ReplayResult(entry.url, False, "invalid: missing method or url")
                )
                continue
            try:
                request_har = entry.to_har_json()
            except (TypeError, ValueError) as exc:
                logger.error("Could not convert HAR request for %s to JSON: %s", entry.url, exc)
                report.results.append(ReplayResult(entry.url, False, f"serialization: {exc}"))
                continue
            try:
                response = self.zap.core.send_har_request(
                    request=request_har, followredirects=flag(False)
                )
            except ZapApiError as exc:
                logger.error("Could not upload HAR request for %s to ZAP: %s", entry.url, exc)
                report.results.append(ReplayResult(entry.url, False, f"submission: {exc}"))
                continue
            logger.debug("Recalled %s with response %s", entry.url, str(response)[:200])
            report.results.append(ReplayResult(entry.url, True))

        if report.skipped:
            logger.warning("Skipped %d of %d recalled requests", len(report.skipped), len(sitemap))
        return report
