"""Session and scope (context) helpers for ZapService."""

import logging
from collections.abc import Iterable

from zapdriver.modules.engine import flag

from .login import literal_pattern
from .models import CONTEXT_NAME, SESSION_NAME

logger = logging.getLogger(__name__)


class SessionMixin:
    """Provide engine session and context management."""

    def create_context(
        self,
        target_url: str,
        include_regex: list[str] | None = None,
        exclude_regex: Iterable[str] | None = None,
    ) -> str:
        """Start a fresh session with a context scoped to ``target_url``.

        The literal target pattern is appended to ``include_regex`` in place.
        Engine failures propagate and leave the session partially configured.
        """
        logger.info(
            "Creating ZAP session '%s' and context '%s'", SESSION_NAME, CONTEXT_NAME
        )
        if include_regex is None:
            include_regex = []
        include_regex.append(f"{literal_pattern(target_url)}.*")

        self.zap.core.new_session(name=SESSION_NAME, overwrite=flag(True))
        context_id = str(self.zap.context.new_context(contextname=CONTEXT_NAME))

        for regex in include_regex:
            if regex:
                self.zap.context.include_in_context(contextname=CONTEXT_NAME, regex=regex)
        for regex in exclude_regex or []:
            self.zap.context.exclude_from_context(contextname=CONTEXT_NAME, regex=regex)

        self.zap.sessionManagement.set_session_management_method(
            contextid=context_id, methodname="cookieBasedSessionManagement"
        )
        self.zap.httpsessions.create_empty_session(site=target_url, session=SESSION_NAME)
        self.zap.httpsessions.set_active_session(site=target_url, session=SESSION_NAME)
        return context_id

    def clear_session(self) -> None:
        """Drop all jobs and replacer rules and start a new session."""
        logger.info("Clearing ZAP session '%s'", SESSION_NAME)
        self.zap.spider.remove_all_scans()
        self.zap.ascan.remove_all_scans()
        self.replacer.reset()
        self.zap.core.new_session(name=SESSION_NAME, overwrite=flag(True))
