"""Tests for sitemap recall."""

import json
import logging

from zapdriver.modules.engine import ZapApiError
from zapdriver.modules.zap import ReplacerRule, SitemapEntry, Target, TargetAttributes


def _target(sitemap):
    return Target("http://example.com", attributes=TargetAttributes(sitemap=sitemap))


def test_absent_sitemap_warns_and_submits_nothing(service, fake_zap, caplog):
    with caplog.at_level(logging.WARNING):
        report = service.recall_target(_target(None))

    assert report.results == []
    assert fake_zap.calls == []
    assert "empty sitemap" in caplog.text


def test_entries_submitted_in_order(service, fake_zap):
    sitemap = [
        SitemapEntry("GET", "http://example.com/a"),
        SitemapEntry(
            "POST", "http://example.com/b", post_data={"mimeType": "text/plain", "text": "x"}
        ),
    ]

    report = service.recall_target(_target(sitemap))

    calls = fake_zap.calls_to("core", "send_har_request")
    assert [json.loads(c["request"])["url"] for c in calls] == [
        "http://example.com/a",
        "http://example.com/b",
    ]
    assert all(c["followredirects"] == "false" for c in calls)
    assert json.loads(calls[1]["request"])["postData"]["text"] == "x"
    assert [r.url for r in report.submitted] == ["http://example.com/a", "http://example.com/b"]


def test_failed_submission_does_not_stop_batch(service, fake_zap):
    fake_zap.respond("core", "send_har_request", iter(["[]", ZapApiError("bad request"), "[]"]))
    sitemap = [SitemapEntry("GET", f"http://example.com/{i}") for i in range(3)]

    report = service.recall_target(_target(sitemap))

    assert len(fake_zap.calls_to("core", "send_har_request")) == 3
    assert [r.submitted for r in report.results] == [True, False, True]
    assert report.skipped[0].url == "http://example.com/1"
    assert report.skipped[0].reason.startswith("submission:")


def test_unserializable_entry_skipped(service, fake_zap):
    sitemap = [
        SitemapEntry("POST", "http://example.com/bad", post_data={"blob": object()}),
        SitemapEntry("GET", "http://example.com/good"),
    ]

    report = service.recall_target(_target(sitemap))

    assert len(fake_zap.calls_to("core", "send_har_request")) == 1
    assert report.skipped[0].reason.startswith("serialization:")
    assert [r.url for r in report.submitted] == ["http://example.com/good"]


def test_entry_without_method_or_url_skipped(service, fake_zap):
    target = Target.from_dict(
        {
            "location": "http://example.com",
            "attributes": {
                "sitemap": [
                    {"url": "http://example.com/no-method"},
                    {"method": "GET"},
                    {"method": "GET", "url": "http://example.com/ok"},
                ]
            },
        }
    )

    report = service.recall_target(target)

    assert len(fake_zap.calls_to("core", "send_har_request")) == 1
    assert [r.url for r in report.submitted] == ["http://example.com/ok"]
    assert [r.url for r in report.skipped] == ["http://example.com/no-method", ""]
    assert all(r.reason.startswith("invalid:") for r in report.skipped)


def test_replacer_rules_installed_before_replay(service, fake_zap):
    rule = ReplacerRule("auth", "REQ_HEADER", "Authorization", "Bearer x")

    service.recall_target(_target([SitemapEntry("GET", "http://example.com/")]), [rule])

    names = fake_zap.names()
    assert names.index("replacer.add_rule") < names.index("core.send_har_request")
