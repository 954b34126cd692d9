"""Test configuration and fixtures for zapdriver."""

import json
import logging
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import Any

import pytest
import responses

from zapdriver.config import ENV_KEYS, ZapSettings
from zapdriver.modules.engine import ZapClient
from zapdriver.modules.zap import ZapService

# zapv2 exposes parameterless views as properties.
PROPERTY_VIEWS = {
    ("core", "version"),
    ("ascan", "option_delay_in_ms"),
    ("ascan", "option_thread_per_host"),
    ("replacer", "rules"),
    ("script", "list_scripts"),
}

DEFAULT_RESPONSES: dict[tuple[str, str], Any] = {
    ("context", "new_context"): "1",
    ("users", "new_user"): "7",
    ("spider", "scan"): "3",
    ("spider", "scan_as_user"): "4",
    ("spider", "status"): "100",
    ("spider", "full_results"): [],
    ("ascan", "scan"): "5",
    ("ascan", "scan_as_user"): "6",
    ("ascan", "status"): "100",
    ("ascan", "option_delay_in_ms"): "0",
    ("ascan", "option_thread_per_host"): "2",
    ("core", "alerts"): [],
    ("core", "version"): "2.14.0",
    ("core", "message_har"): "",
    ("core", "xmlreport"): "",
    ("replacer", "rules"): [],
    ("script", "list_scripts"): [],
}


def har_document(url: str, method: str = "GET") -> str:
    """Build a minimal HAR document as returned by core/other/messageHar."""
    return json.dumps(
        {
            "log": {
                "version": "1.2",
                "creator": {"name": "ZAP", "version": "2.14.0"},
                "entries": [
                    {
                        "startedDateTime": "2024-01-01T00:00:00.000+00:00",
                        "time": 12,
                        "request": {
                            "method": method,
                            "url": url,
                            "httpVersion": "HTTP/1.1",
                            "cookies": [],
                            "headers": [{"name": "Host", "value": "example.com"}],
                            "queryString": [],
                            "headersSize": 40,
                            "bodySize": 0,
                        },
                        "response": {"status": 200},
                    }
                ],
            }
        }
    )


class FakeComponent:
    def __init__(self, zap: "FakeZap", name: str):
        self._zap = zap
        self._name = name

    def __getattr__(self, method: str) -> Any:
        if method.startswith("_"):
            raise AttributeError(method)
        if (self._name, method) in PROPERTY_VIEWS:
            return self._zap.answer(self._name, method, {})

        def call(**params: Any) -> Any:
            return self._zap.answer(self._name, method, params)

        return call


class FakeSession:
    closed = False

    def close(self) -> None:
        self.closed = True


class FakeZap:
    """Recording stand-in for ``zapv2.ZAPv2``.

    Responses are keyed by ``(component, method)`` using zapv2's snake_case
    names. A value may be a plain response, an exception instance to raise, a
    callable taking the call params, or an iterator yielding successive
    responses. Unknown actions answer ``"OK"``.
    """

    def __init__(self, answers: dict[tuple[str, str], Any] | None = None):
        self.responses: dict[tuple[str, str], Any] = dict(DEFAULT_RESPONSES)
        self.responses.update(answers or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.session = FakeSession()

    def __getattr__(self, component: str) -> FakeComponent:
        if component.startswith("_"):
            raise AttributeError(component)
        return FakeComponent(self, component)

    @property
    def closed(self) -> bool:
        return self.session.closed

    def respond(self, component: str, method: str, value: Any) -> None:
        self.responses[(component, method)] = value

    def answer(self, component: str, method: str, params: dict[str, Any]) -> Any:
        self.calls.append((component, method, params))
        value = self.responses.get((component, method), "OK")
        if isinstance(value, Iterator):
            value = next(value)
        if isinstance(value, BaseException):
            raise value
        if callable(value):
            value = value(**params)
        return value

    def names(self) -> list[str]:
        """Return ``component.method`` for every call, in order."""
        return [f"{component}.{method}" for component, method, _ in self.calls]

    def calls_to(self, component: str, method: str) -> list[dict[str, Any]]:
        return [params for c, m, params in self.calls if (c, m) == (component, method)]


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo CLI logging setup so caplog sees zapdriver records."""
    yield
    logger = logging.getLogger("zapdriver")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def isolated_config(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config source at an empty temp directory."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    monkeypatch.setenv("ZAPDRIVER_ENV_FILE", str(temp_dir / ".env"))
    return temp_dir


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def responses_mock() -> Generator[responses.RequestsMock, None, None]:
    """Intercept the requests made by zapv2."""
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def fake_zap() -> FakeZap:
    return FakeZap()


@pytest.fixture
def settings() -> ZapSettings:
    """Settings with no polling delay."""
    return ZapSettings(spider_poll_interval=0.0, scanner_poll_interval=0.0)


@pytest.fixture
def service(fake_zap: FakeZap, settings: ZapSettings) -> ZapService:
    """A ZapService wired to the fake engine, not yet initialized."""
    return ZapService(ZapClient(fake_zap), settings)


@pytest.fixture
def ready_service(service: ZapService, fake_zap: FakeZap) -> ZapService:
    """A ZapService whose default rate limits have been captured."""
    service.initialize()
    fake_zap.calls.clear()
    return service
