"""``zapdriver scan`` - run the full scan lifecycle for one target."""

from pathlib import Path

import typer
import yaml
from rich.markup import escape

from zapdriver.modules.engine import ZapApiError
from zapdriver.modules.report import write_findings_report
from zapdriver.modules.zap import (
    AuthenticationSettings,
    EngineBusyError,
    HarParseError,
    LoginTemplateError,
    ScanIncompleteError,
    ScanJob,
    ScanWorkflow,
    Target,
)

from .deps import cli_module
from .shared import app, console


def load_target(url: str | None, target_file: Path | None) -> Target:
    """Build a Target from a YAML/JSON file, a URL, or both."""
    if target_file is not None:
        try:
            data = yaml.safe_load(target_file.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise typer.BadParameter(f"cannot read target file: {exc}") from exc
        if not isinstance(data, dict):
            raise typer.BadParameter("target file must hold a mapping")
        if url:
            data["location"] = url
        if not data.get("location"):
            raise typer.BadParameter("target file has no location; pass a URL")
        try:
            return Target.from_dict(data)
        except (HarParseError, KeyError, TypeError, ValueError, AttributeError) as exc:
            raise typer.BadParameter(f"invalid target file: {exc}") from exc
    if not url:
        raise typer.BadParameter("pass a target URL or --target-file")
    return Target(location=url)


@app.command()
def scan(
    url: str = typer.Argument(None, help="Target URL"),
    target_file: Path = typer.Option(None, "--target-file", "-f", help="YAML/JSON target"),
    include: list[str] = typer.Option(None, "--include", help="Extra in-scope regex"),
    exclude: list[str] = typer.Option(None, "--exclude", help="Out-of-scope regex"),
    max_depth: int = typer.Option(None, "--max-depth", help="Spider max depth"),
    api_spec: str = typer.Option(None, "--api-spec", help="OpenAPI document URL to import"),
    login_url: str = typer.Option(None, "--login-url"),
    username_field: str = typer.Option("username", "--username-field"),
    password_field: str = typer.Option("password", "--password-field"),
    username: str = typer.Option(None, "--username"),
    password: str = typer.Option(None, "--password"),
    csrf_field: str = typer.Option(None, "--csrf-field", help="Use script-based login"),
    logged_in: str = typer.Option(None, "--logged-in", help="Logged-in indicator text"),
    logged_out: str = typer.Option(None, "--logged-out", help="Logged-out indicator text"),
    login_extra: str = typer.Option("", "--login-extra", help="Extra login query, e.g. &a=b"),
    delay: int = typer.Option(None, "--delay", help="Delay between requests in ms"),
    threads: int = typer.Option(None, "--threads", help="Concurrent connections per host"),
    spider: bool = typer.Option(True, "--spider/--no-spider"),
    active: bool = typer.Option(True, "--active/--no-active"),
    output: Path = typer.Option(None, "--output", "-o", help="Write findings JSON here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Crawl and actively scan a target with ZAP."""
    cli = cli_module()
    settings = cli.load_settings()
    cli.configure_logging(verbose or settings.verbose)

    target = load_target(url, target_file)
    attrs = target.attributes
    attrs.include_regex.extend(include or [])
    attrs.exclude_regex.extend(exclude or [])
    if max_depth is not None:
        attrs.max_depth = max_depth
    if api_spec:
        attrs.api_spec_url = api_spec
    if delay is not None:
        attrs.delay_in_ms = delay
    if threads is not None:
        attrs.threads_per_host = threads
    if login_url:
        if not username or password is None:
            raise typer.BadParameter("--login-url requires --username and --password")
        attrs.authentication = AuthenticationSettings(
            login_url=login_url,
            username_field=username_field,
            password_field=password_field,
            username=username,
            password=password,
            extra_login_query=login_extra,
            logged_in_indicator=logged_in,
            logged_out_indicator=logged_out,
            csrf_token_field=csrf_field,
        )

    def show_progress(job: ScanJob) -> None:
        console.print(f"[dim]{job.kind.value} {job.scan_id}: {job.progress}%[/dim]")

    service = cli.build_service(settings)
    try:
        console.print(f"[*] Scanning {target.location}")
        report = ScanWorkflow(service).run(
            target, spider=spider, active_scan=active, progress=show_progress
        )
        version = service.get_version() if output else ""
    except (ZapApiError, LoginTemplateError, ScanIncompleteError, EngineBusyError) as exc:
        console.print(f"[red]Scan failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    finally:
        service.close()

    console.print(
        f"[green]Done:[/green] {len(report.spider_findings)} URLs crawled, "
        f"{len(report.scanner_findings)} alerts"
    )
    for finding in report.scanner_findings:
        console.print(escape(f"  [{finding.severity}] {finding.name} - {finding.location}"))
    if report.replay.skipped:
        console.print(f"[yellow]! {len(report.replay.skipped)} recalled requests skipped[/yellow]")

    if output:
        path = write_findings_report(output, report, version)
        console.print(f"[green]Report written:[/green] {path}")
