"""Health check and report export for ZapService."""

import logging

from zapdriver.modules.engine import ZapApiError

from .models import Status, StatusDetail

logger = logging.getLogger(__name__)

STATUS_NAME = "ZAP API"


class StatusMixin:
    """Report engine reachability and export raw reports."""

    def status_detail(self) -> StatusDetail:
        """Check whether the ZAP API is reachable. Never raises."""
        try:
            version = self.get_version()
        except ZapApiError as exc:
            logger.debug("ZAP status check failed: %s", exc)
            return StatusDetail(type(self).__name__, Status.ERROR, str(exc))

        if version:
            logger.debug("ZAP status check: ok")
            return StatusDetail(
                STATUS_NAME,
                Status.OK,
                "The ZAP API is up and running",
                {"ZAP Version": version},
            )
        return StatusDetail(
            STATUS_NAME,
            Status.WARNING,
            "Could not find any ZAP version information. Probably an error occurred!",
        )

    def get_version(self) -> str:
        version = self.zap.core.version
        return version if isinstance(version, str) else ""

    def get_raw_report(self) -> str:
        """Export the engine's XML report for the current session."""
        return str(self.zap.core.xmlreport())
