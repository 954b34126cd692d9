"""Main ZapService class."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from zapdriver.config import ZapSettings
from zapdriver.modules.engine import ZapClient

from .ascan_mixin import ActiveScanMixin
from .auth_mixin import AuthMixin
from .har_mixin import HarMixin
from .models import RateLimitConfig
from .replacer import ReplacerConfigurator
from .replay_mixin import ReplayMixin
from .session_mixin import SessionMixin
from .spider_mixin import SpiderMixin
from .status_mixin import StatusMixin

logger = logging.getLogger(__name__)


class EngineBusyError(RuntimeError):
    """Another scan lifecycle already holds the engine."""


class ZapService(
    SessionMixin, AuthMixin, ReplayMixin, SpiderMixin, ActiveScanMixin, HarMixin, StatusMixin
):
    """Drives one OWASP ZAP engine through its control API.

    Session and context names are fixed, so only one scan lifecycle may run
    against an engine at a time; hold ``scan_slot()`` around a lifecycle.
    """

    def __init__(
        self,
        zap: ZapClient,
        settings: ZapSettings | None = None,
        replacer: ReplacerConfigurator | None = None,
    ):
        self.zap = zap
        self.settings = settings or ZapSettings()
        self.replacer = replacer or ReplacerConfigurator(zap)
        self._rate_limits: RateLimitConfig | None = None
        self._init_lock = threading.Lock()
        self._slot = threading.Lock()

    @classmethod
    def from_settings(cls, settings: ZapSettings) -> "ZapService":
        return cls(ZapClient.connect(settings.base_url, api_key=settings.api_key), settings)

    def close(self) -> None:
        self.zap.close()

    def initialize(self) -> RateLimitConfig:
        """Capture the engine's default rate limits; later calls reuse them."""
        with self._init_lock:
            if self._rate_limits is None:
                delay = int(self.zap.ascan.option_delay_in_ms)
                threads = int(self.zap.ascan.option_thread_per_host)
                self._rate_limits = RateLimitConfig(delay_in_ms=delay, threads_per_host=threads)
                logger.debug(
                    "Captured default rate limits: delayInMs=%d threadsPerHost=%d",
                    delay,
                    threads,
                )
            return self._rate_limits

    @property
    def rate_limit_defaults(self) -> RateLimitConfig:
        if self._rate_limits is None:
            raise RuntimeError("ZapService.initialize() must run before scans are started")
        return self._rate_limits

    @contextmanager
    def scan_slot(self, blocking: bool = False, timeout: float = -1) -> Iterator[None]:
        """Hold the engine's single scan slot for the duration of a lifecycle."""
        if blocking:
            acquired = self._slot.acquire(timeout=timeout)
        else:
            acquired = self._slot.acquire(blocking=False)
        if not acquired:
            raise EngineBusyError("A scan is already running against this ZAP engine")
        try:
            yield
        finally:
            self._slot.release()
