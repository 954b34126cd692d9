"""Tests for the active scan phase."""

import threading

import pytest

from conftest import har_document
from zapdriver.modules.zap import ReplacerRule, ScanIncompleteError, WaitOutcome


class TestRateLimits:
    def test_defaults_applied(self, ready_service, fake_zap):
        ready_service.start_active_scan("http://example.com", "1")

        assert fake_zap.calls_to("ascan", "set_option_delay_in_ms") == [{"integer": 0}]
        assert fake_zap.calls_to("ascan", "set_option_thread_per_host") == [{"integer": 2}]

    def test_overrides_replace_defaults(self, ready_service, fake_zap):
        ready_service.start_active_scan(
            "http://example.com", "1", delay_in_ms=250, threads_per_host=1
        )

        assert fake_zap.calls_to("ascan", "set_option_delay_in_ms") == [{"integer": 250}]
        assert fake_zap.calls_to("ascan", "set_option_thread_per_host") == [{"integer": 1}]

    def test_partial_override(self, ready_service, fake_zap):
        ready_service.start_active_scan("http://example.com", "1", delay_in_ms=100)

        assert fake_zap.calls_to("ascan", "set_option_delay_in_ms") == [{"integer": 100}]
        assert fake_zap.calls_to("ascan", "set_option_thread_per_host") == [{"integer": 2}]

    def test_defaults_captured_once(self, service, fake_zap):
        service.initialize()
        fake_zap.respond("ascan", "option_delay_in_ms", "999")
        service.initialize()

        service.start_active_scan("http://example.com", "1")

        assert len(fake_zap.calls_to("ascan", "option_delay_in_ms")) == 1
        assert fake_zap.calls_to("ascan", "set_option_delay_in_ms") == [{"integer": 0}]

    def test_overrides_do_not_leak_into_next_scan(self, ready_service, fake_zap):
        ready_service.start_active_scan("http://example.com", "1", delay_in_ms=500)
        ready_service.start_active_scan("http://example.com", "1")

        delays = [c["integer"] for c in fake_zap.calls_to("ascan", "set_option_delay_in_ms")]
        assert delays == [500, 0]

    def test_requires_initialize(self, service):
        with pytest.raises(RuntimeError, match="initialize"):
            service.start_active_scan("http://example.com", "1")

    def test_concurrent_initialize_reads_once(self, service, fake_zap):
        threads = [threading.Thread(target=service.initialize) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(fake_zap.calls_to("ascan", "option_thread_per_host")) == 1


class TestStartActiveScan:
    def test_anonymous_scan(self, ready_service, fake_zap):
        assert ready_service.start_active_scan("http://example.com", "1") == "5"
        assert fake_zap.calls_to("ascan", "scan") == [
            {"url": "http://example.com", "recurse": "true", "inscopeonly": "false"}
        ]

    def test_scan_as_user(self, ready_service, fake_zap):
        assert ready_service.start_active_scan("http://example.com", "1", user_id="7") == "6"
        assert fake_zap.calls_to("ascan", "scan_as_user") == [
            {"url": "http://example.com", "contextid": "1", "userid": "7", "recurse": "true"}
        ]

    def test_scanners_and_csrf_handling_enabled(self, ready_service, fake_zap):
        ready_service.start_active_scan("http://example.com", "1")

        names = fake_zap.names()
        assert names[:2] == [
            "ascan.enable_all_scanners",
            "ascan.set_option_handle_anti_csrf_tokens",
        ]
        handling = fake_zap.calls_to("ascan", "set_option_handle_anti_csrf_tokens")
        assert handling == [{"boolean": "true"}]

    def test_replacer_rules_configured(self, ready_service, fake_zap):
        rule = ReplacerRule("auth", "REQ_HEADER", "Authorization", "Bearer x")

        ready_service.start_active_scan("http://example.com", "1", replacer_rules=[rule])

        added = fake_zap.calls_to("replacer", "add_rule")
        assert added[0]["description"] == "auth"
        assert added[0]["matchtype"] == "REQ_HEADER"
        names = fake_zap.names()
        assert names.index("replacer.add_rule") < names.index("ascan.scan")


class TestRetrieveScannerResult:
    def test_polls_until_complete(self, ready_service, fake_zap):
        fake_zap.respond("ascan", "status", iter(["0", "30", "100"]))

        assert ready_service.retrieve_scanner_result("5", "http://example.com") == []
        assert len(fake_zap.calls_to("ascan", "status")) == 3
        assert fake_zap.calls_to("core", "alerts") == [{"baseurl": "http://example.com"}]

    def test_alerts_become_findings(self, ready_service, fake_zap):
        fake_zap.respond(
            "core",
            "alerts",
            [
                {
                    "url": "http://example.com/q",
                    "name": "Cross Site Scripting (Reflected)",
                    "risk": "High",
                    "confidence": "Firm",
                    "cweid": "79",
                    "messageId": "21",
                    "reference": "",
                }
            ],
        )
        fake_zap.respond("core", "message_har", lambda id: har_document("http://example.com/q"))

        [finding] = ready_service.retrieve_scanner_result("5", "http://example.com")

        assert finding.severity == "High"
        assert finding.attributes["CONFIDENCE"] == "Firm"
        assert finding.reference.id == "CVE-79"
        assert finding.reference.source == "https://cwe.mitre.org/data/definitions/79.html"
        assert finding.attributes["HAR"].first_request.url == "http://example.com/q"
        assert fake_zap.calls_to("core", "message_har") == [{"id": "21"}]

    def test_unparseable_har_keeps_finding(self, ready_service, fake_zap):
        fake_zap.respond("core", "alerts", [{"url": "http://example.com/", "messageId": "1"}])
        fake_zap.respond("core", "message_har", "<html>")

        [finding] = ready_service.retrieve_scanner_result("5", "http://example.com")

        assert finding.attributes["HAR"] is None

    def test_alert_without_url_located_at_target(self, ready_service, fake_zap):
        fake_zap.respond("core", "alerts", [{"name": "Header", "risk": "Low", "messageId": "1"}])

        [finding] = ready_service.retrieve_scanner_result("5", "http://example.com")

        assert finding.location == "http://example.com"

    def test_cancelled_wait_raises(self, ready_service, fake_zap):
        fake_zap.respond("ascan", "status", "40")
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ScanIncompleteError) as excinfo:
            ready_service.retrieve_scanner_result("5", "http://example.com", cancel=cancel)

        assert excinfo.value.outcome is WaitOutcome.CANCELLED
        assert fake_zap.calls_to("core", "alerts") == []
