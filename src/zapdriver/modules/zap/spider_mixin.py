"""Spider (crawl) orchestration for ZapService."""

import logging
import threading
from collections.abc import Callable, Iterable

from zapdriver.modules.engine import flag

from .models import ANONYMOUS_USER, CONTEXT_NAME, Finding, ReplacerRule, ScanJob, ScanKind
from .polling import ScanIncompleteError, WaitOutcome, wait_for_completion
from .results import crawl_records, spider_finding

logger = logging.getLogger(__name__)


def is_anonymous(user_id: str | None) -> bool:
    return user_id is None or user_id == ANONYMOUS_USER


class SpiderMixin:
    """Configure, launch and collect the spidering phase."""

    def start_spider(
        self,
        target_url: str,
        api_spec_url: str | None,
        max_depth: int,
        context_id: str,
        user_id: str | None = ANONYMOUS_USER,
        replacer_rules: Iterable[ReplacerRule] | None = None,
    ) -> str:
        """Launch a spider scan and return its scan id."""
        logger.info(
            "Starting spider for target URL '%s' with OpenAPI document '%s' and max depth %d",
            target_url,
            api_spec_url,
            max_depth,
        )
        self.replacer.configure(replacer_rules)

        if api_spec_url:
            self.zap.openapi.import_url(url=api_spec_url)

        spider = self.zap.spider
        spider.set_option_max_depth(integer=max_depth)
        spider.set_option_parse_comments(boolean=flag(True))
        spider.set_option_parse_git(boolean=flag(True))
        spider.set_option_parse_svn_entries(boolean=flag(True))
        spider.set_option_parse_sitemap_xml(boolean=flag(True))
        spider.set_option_parse_robots_txt(boolean=flag(True))

        if is_anonymous(user_id):
            scan_id = spider.scan(url=target_url, maxchildren=-1, contextname=CONTEXT_NAME)
        else:
            scan_id = spider.scan_as_user(
                contextid=context_id, userid=user_id, url=target_url, maxchildren=-1
            )
        return str(scan_id)

    def spider_progress(self, scan_id: str) -> int:
        return int(self.zap.spider.status(scanid=scan_id))

    def retrieve_spider_result(
        self,
        scan_id: str,
        cancel: threading.Event | None = None,
        progress: Callable[[ScanJob], None] | None = None,
        target_url: str = "",
    ) -> list[Finding]:
        """Block until the spider finishes and return one finding per crawled message.

        ``target_url`` is the location of last resort for records without a URL.
        """
        job = ScanJob(scan_id=scan_id, kind=ScanKind.SPIDER)

        def report(value: int) -> None:
            job.progress = value
            logger.info("Spider (ID: %s) progress: %d%%", scan_id, value)
            if progress:
                progress(job)

        outcome = wait_for_completion(
            lambda: self.spider_progress(scan_id),
            interval=self.settings.spider_poll_interval,
            timeout=self.settings.spider_timeout,
            cancel=cancel,
            on_progress=report,
        )
        if outcome is not WaitOutcome.COMPLETED:
            raise ScanIncompleteError(scan_id, outcome)
        logger.info("Spider (ID: %s) completed", scan_id)

        records = crawl_records(self.zap.spider.full_results(scanid=scan_id))
        findings = [
            spider_finding(
                record, self.get_request_portion(str(record["messageId"])), target_url
            )
            for record in records
        ]
        logger.info("Found %d spider URLs for scan %s", len(findings), scan_id)
        return findings
