"""Transaction (HAR) enrichment lookups for ZapService."""

import logging

from zapdriver.modules.engine import ZapApiError

from .har import Har, HarParseError, HarRequest

logger = logging.getLogger(__name__)


class HarMixin:
    """Fetch captured transactions by message id."""

    def get_transaction(self, message_id: str) -> Har | None:
        """Return the HAR for a message, or None when it cannot be fetched or parsed."""
        try:
            raw = self.zap.core.message_har(id=message_id)
        except ZapApiError as exc:
            logger.warning("Could not fetch HAR for message %s from ZAP: %s", message_id, exc)
            return None
        try:
            return Har.from_json(raw)
        except HarParseError as exc:
            logger.warning("Could not parse HAR for message %s: %s", message_id, exc)
            return None

    def get_request_portion(self, message_id: str) -> HarRequest | None:
        """Return the first recorded request of a message's HAR."""
        har = self.get_transaction(message_id)
        if har is None:
            return None
        return har.first_request
