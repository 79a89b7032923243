"""CLI application for the Mailchimp Marketing API."""

import json
import logging
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from mailchimp_cli.core.client import MailchimpClient
from mailchimp_cli.core.config import Config
from mailchimp_cli.core.exceptions import ConfigurationError, MailchimpError
from mailchimp_cli.host import HostTokenStore, HostTransport
from mailchimp_cli.models.member import NewMember
from mailchimp_cli.models.results import RequestResult
from mailchimp_cli.utils.formatting import (
    collect_search_members,
    format_campaign,
    format_list,
    format_member,
    format_tag,
    percent,
)

app = typer.Typer(
    name="mailchimp",
    help="Mailchimp CLI - Mailchimp Marketing API access via the host secure token store",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

DC_OPTION = typer.Option(
    None, "--dc", envvar="MAILCHIMP_DC", help="Mailchimp datacenter (e.g., us21)"
)
JSON_OPTION = typer.Option(False, "--json", help="Output as JSON")
COUNT_OPTION = typer.Option(10, "--count", "-n", help="Number of records to return")
OFFSET_OPTION = typer.Option(0, "--offset", help="Number of records to skip")


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def get_client(datacenter: Optional[str], json_output: bool = False) -> MailchimpClient:
    """Build a client wired to the host token store."""
    try:
        config = Config.from_env()
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if datacenter:
        config.datacenter = datacenter

    try:
        config.validate()
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        if not config.datacenter:
            err_console.print("\nThe datacenter is the last part of your API key (after the hyphen).")
            err_console.print('Example: If your API key is "abc123-us21", use --dc us21')
        raise typer.Exit(1)

    configure_logging(config.log_level)

    try:
        store = HostTokenStore.from_files(config.permissions_file, config.tokens_file)
        return MailchimpClient(config.datacenter, store, HostTransport(store), config)
    except ConfigurationError as e:
        if json_output:
            fail(e, json_output)
        err_console.print(f"[red]{e.message}.[/red]\n")
        if e.hint:
            err_console.print(e.hint, markup=False, highlight=False)
        raise typer.Exit(1)
    except MailchimpError as e:
        if json_output:
            fail(e, json_output)
        err_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


def print_json(data: Any) -> None:
    """Print data as indented JSON without rich markup or wrapping."""
    typer.echo(json.dumps(data, indent=2, default=str))


def fail(error: MailchimpError, json_output: bool) -> NoReturn:
    """Report an error and exit with status 1."""
    if json_output:
        err_console.print(json.dumps(error.to_dict(), indent=2, default=str), markup=False, highlight=False)
    else:
        err_console.print(f"[red]Mailchimp Error:[/red] {error.message}")
    raise typer.Exit(1)


def print_fields(title: str, rows: list[tuple[str, Any]]) -> None:
    """Print label/value pairs in a panel."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column()
    for label, value in rows:
        table.add_row(label, "N/A" if value is None else str(value))
    console.print(Panel(table, title=title, border_style="green"))


def _report_failure(label: str, result: RequestResult) -> None:
    err_console.print(f"[red]{label} unavailable:[/red] {result.error.message}")


@app.command("ping")
def ping(dc: Optional[str] = DC_OPTION, json_output: bool = JSON_OPTION) -> None:
    """Verify the API key and show account info."""
    client = get_client(dc, json_output)
    try:
        result = client.get_account_info()
    except MailchimpError as e:
        fail(e, json_output)

    if json_output:
        print_json(result)
        return

    print_fields(
        "Account",
        [
            ("Account", result.get("account_name")),
            ("Email", result.get("email")),
            ("Role", result.get("role")),
            ("Industry", (result.get("industry_stats") or {}).get("industry")),
            ("Total Subscribers", result.get("total_subscribers")),
        ],
    )


@app.command("lists")
def list_lists(
    dc: Optional[str] = DC_OPTION,
    count: int = COUNT_OPTION,
    offset: int = OFFSET_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """List all audiences/lists."""
    client = get_client(dc, json_output)
    try:
        result = client.get_lists(count=count, offset=offset)
    except MailchimpError as e:
        fail(e, json_output)

    lists = [format_list(item) for item in result.get("lists") or []]
    if json_output:
        print_json({"lists": lists, "total": result.get("total_items")})
        return

    table = Table(title=f"Found {result.get('total_items', len(lists))} list(s)")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Members", justify="right")
    table.add_column("Unsub", justify="right")
    table.add_column("Cleaned", justify="right")
    table.add_column("Open Rate", justify="right")
    table.add_column("Click Rate", justify="right")
    table.add_column("Campaigns", justify="right")
    for item in lists:
        table.add_row(
            item["id"],
            item["name"] or "",
            str(item["memberCount"]),
            str(item["unsubscribeCount"]),
            str(item["cleanedCount"]),
            percent(item["openRate"]),
            percent(item["clickRate"]),
            str(item["campaignCount"]),
        )
    console.print(table)


@app.command("list")
def show_list(
    list_id: str = typer.Argument(..., help="List ID"),
    dc: Optional[str] = DC_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Show a specific list/audience."""
    client = get_client(dc, json_output)
    try:
        formatted = format_list(client.get_list(list_id))
    except MailchimpError as e:
        fail(e, json_output)

    if json_output:
        print_json(formatted)
        return

    print_fields(
        f"List: {formatted['name']}",
        [
            ("ID", formatted["id"]),
            ("Members", formatted["memberCount"]),
            ("Unsubscribed", formatted["unsubscribeCount"]),
            ("Cleaned", formatted["cleanedCount"]),
            ("Campaigns Sent", formatted["campaignCount"]),
            ("Open Rate", percent(formatted["openRate"])),
            ("Click Rate", percent(formatted["clickRate"])),
            ("Created", formatted["dateCreated"]),
        ],
    )


def _members_table(title: str, members: list[dict[str, Any]], show_list_id: bool = False) -> Table:
    table = Table(title=title)
    table.add_column("Email", style="cyan")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("List" if show_list_id else "Subscribed")
    table.add_column("Tags")
    for member in members:
        table.add_row(
            member["email"] or "",
            member["fullName"] or "(no name)",
            member["status"] or "",
            (member["listId"] if show_list_id else member["subscribed"]) or "N/A",
            ", ".join(member["tags"]),
        )
    return table


@app.command("members")
def list_members(
    list_id: str = typer.Argument(..., help="List ID"),
    dc: Optional[str] = DC_OPTION,
    count: int = COUNT_OPTION,
    offset: int = OFFSET_OPTION,
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status"),
    since: Optional[str] = typer.Option(None, "--since", help="Opted in after (ISO 8601)"),
    json_output: bool = JSON_OPTION,
) -> None:
    """List members/subscribers of a list."""
    client = get_client(dc, json_output)
    try:
        result = client.get_members(list_id, count=count, offset=offset, status=status, since=since)
    except MailchimpError as e:
        fail(e, json_output)

    members = [format_member(m) for m in result.get("members") or []]
    if json_output:
        print_json({"members": members, "total": result.get("total_items")})
        return

    console.print(_members_table(f"Found {result.get('total_items', len(members))} member(s)", members))


@app.command("member")
def show_member(
    list_id: str = typer.Argument(..., help="List ID"),
    email: str = typer.Argument(..., help="Member email address"),
    dc: Optional[str] = DC_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Show a specific member by email."""
    client = get_client(dc, json_output)
    try:
        formatted = format_member(client.get_member(list_id, email))
    except MailchimpError as e:
        fail(e, json_output)

    if json_output:
        print_json(formatted)
        return

    rows = [
        ("Email", formatted["email"]),
        ("Name", formatted["fullName"] or "(no name)"),
        ("Status", formatted["status"]),
        ("Tags", ", ".join(formatted["tags"]) or "(none)"),
        ("Subscribed", formatted["subscribed"]),
        ("Last Changed", formatted["lastChanged"]),
        ("Source", formatted["source"]),
    ]
    if formatted["mergeFields"]:
        rows.append(("Merge Fields", json.dumps(formatted["mergeFields"])))
    print_fields("Member", rows)


@app.command("add-member")
def add_member(
    list_id: str = typer.Argument(..., help="List ID"),
    email: str = typer.Argument(..., help="Email address to add"),
    dc: Optional[str] = DC_OPTION,
    status: str = typer.Option("subscribed", "--status", "-s", help="subscribed, unsubscribed or pending"),
    fname: str = typer.Option("", "--fname", help="First name"),
    lname: str = typer.Option("", "--lname", help="Last name"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Add a new member to a list."""
    member = NewMember.from_options(email, status=status, fname=fname, lname=lname, tags=tags)

    errors = member.validate()
    if errors:
        err_console.print("[red]Validation errors:[/red]")
        for error in errors:
            err_console.print(f"  - {error}")
        raise typer.Exit(1)

    client = get_client(dc, json_output)
    try:
        formatted = format_member(client.add_member(list_id, member))
    except MailchimpError as e:
        fail(e, json_output)

    if json_output:
        print_json(formatted)
        return

    console.print(f"[green]Added:[/green] {formatted['email']} ({formatted['status']})")
    print_json(formatted)


@app.command("search")
def search_members(
    query: str = typer.Argument(..., help="Search query (email or name)"),
    dc: Optional[str] = DC_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Search members across all lists."""
    client = get_client(dc, json_output)
    try:
        result = client.search_members(query)
    except MailchimpError as e:
        fail(e, json_output)

    members = [format_member(m) for m in collect_search_members(result)]
    if json_output:
        print_json({"members": members, "total": len(members)})
        return

    console.print(_members_table(f"Found {len(members)} match(es)", members, show_list_id=True))


def _campaign_rows(formatted: dict[str, Any]) -> list[tuple[str, Any]]:
    rows = [
        ("Title", formatted["title"]),
        ("Subject", formatted["subject"]),
        ("Preview", formatted["previewText"] or "(none)"),
        ("From", formatted["fromName"]),
        ("Reply To", formatted["replyTo"]),
        ("Status", formatted["status"]),
        ("Type", formatted["type"]),
        ("List", f"{formatted['listName']} ({formatted['listId']})"),
        ("Created", formatted["createTime"]),
        ("Sent", formatted["sendTime"] or "Not sent"),
    ]
    if formatted["status"] == "sent":
        rows.extend(
            [
                ("Emails Sent", formatted["emailsSent"]),
                ("Opens", f"{formatted['uniqueOpens']} ({percent(formatted['openRate'])})"),
                ("Clicks", f"{formatted['subscriberClicks']} ({percent(formatted['clickRate'])})"),
            ]
        )
    return rows


@app.command("campaigns")
def list_campaigns(
    dc: Optional[str] = DC_OPTION,
    count: int = COUNT_OPTION,
    offset: int = OFFSET_OPTION,
    status: Optional[str] = typer.Option(
        None, "--status", "-s", help="save, paused, schedule, sending or sent"
    ),
    campaign_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="regular, plaintext, absplit, rss or variate"
    ),
    since: Optional[str] = typer.Option(None, "--since", help="Created after (ISO 8601)"),
    before: Optional[str] = typer.Option(None, "--before", help="Created before (ISO 8601)"),
    json_output: bool = JSON_OPTION,
) -> None:
    """List campaigns."""
    client = get_client(dc, json_output)
    try:
        result = client.get_campaigns(
            count=count,
            offset=offset,
            status=status,
            campaign_type=campaign_type,
            since=since,
            before=before,
        )
    except MailchimpError as e:
        fail(e, json_output)

    campaigns = [format_campaign(c) for c in result.get("campaigns") or []]
    if json_output:
        print_json({"campaigns": campaigns, "total": result.get("total_items")})
        return

    table = Table(title=f"Found {result.get('total_items', len(campaigns))} campaign(s)")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("Sent")
    table.add_column("Opens", justify="right")
    table.add_column("Clicks", justify="right")
    for c in campaigns:
        sent = c["status"] == "sent"
        table.add_row(
            c["id"],
            c["title"],
            c["subject"],
            c["status"] or "",
            c["type"] or "",
            c["sendTime"] or "Not sent",
            f"{c['uniqueOpens']} ({percent(c['openRate'])})" if sent else "",
            f"{c['subscriberClicks']} ({percent(c['clickRate'])})" if sent else "",
        )
    console.print(table)


@app.command("campaign")
def show_campaign(
    campaign_id: str = typer.Argument(..., help="Campaign ID"),
    dc: Optional[str] = DC_OPTION,
    content: bool = typer.Option(False, "--content", help="Include campaign content (HTML)"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Show a specific campaign."""
    client = get_client(dc, json_output)
    details = client.get_campaign_with_content(campaign_id, content=content)
    if details.campaign.is_failure:
        fail(details.campaign.error, json_output)

    formatted = format_campaign(details.campaign.payload)

    if json_output:
        output: dict[str, Any] = {"campaign": formatted}
        if details.content is not None:
            output["content"] = details.content.to_dict()
        print_json(output)
    else:
        print_fields("Campaign", _campaign_rows(formatted))
        if details.content is not None and details.content.is_success:
            console.print("\n--- HTML Content ---\n")
            console.print(details.content.payload.get("html") or "(no HTML content)", markup=False)

    if details.content is not None and details.content.is_failure:
        _report_failure("Campaign content", details.content)
        raise typer.Exit(1)


@app.command("report")
def show_report(
    campaign_id: str = typer.Argument(..., help="Campaign ID"),
    dc: Optional[str] = DC_OPTION,
    clicks: bool = typer.Option(False, "--clicks", help="Include click details"),
    opens: bool = typer.Option(False, "--opens", help="Include open details"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Show a campaign report, optionally with click and open details."""
    client = get_client(dc, json_output)
    details = client.get_campaign_report_details(
        campaign_id,
        clicks=clicks,
        opens=opens,
        open_count=None if json_output else 20,
    )
    if details.report.is_failure:
        fail(details.report.error, json_output)

    if json_output:
        print_json(details.to_dict())
    else:
        report = details.report.payload
        report_opens = report.get("opens") or {}
        report_clicks = report.get("clicks") or {}
        bounces = report.get("bounces") or {}
        print_fields(
            f"Campaign: {report.get('campaign_title')}",
            [
                ("Subject", report.get("subject_line")),
                ("List", report.get("list_name")),
                ("Sent", report.get("send_time")),
                ("Emails Sent", report.get("emails_sent")),
                (
                    "Opens",
                    f"{report_opens.get('unique_opens') or 0} unique ({percent(report_opens.get('open_rate'))})",
                ),
                (
                    "Clicks",
                    f"{report_clicks.get('unique_clicks') or 0} unique ({percent(report_clicks.get('click_rate'))})",
                ),
                (
                    "Bounces",
                    f"{bounces.get('hard_bounces') or 0} hard, {bounces.get('soft_bounces') or 0} soft",
                ),
                ("Unsubscribes", report.get("unsubscribed") or 0),
                ("Abuse Reports", report.get("abuse_reports") or 0),
            ],
        )

        if details.click_details is not None and details.click_details.is_success:
            table = Table(title="Click Details")
            table.add_column("URL", style="cyan")
            table.add_column("Clicks", justify="right")
            table.add_column("Unique", justify="right")
            for link in details.click_details.payload.get("urls_clicked") or []:
                table.add_row(link.get("url", ""), str(link.get("total_clicks", 0)), str(link.get("unique_clicks", 0)))
            console.print(table)

        if details.open_details is not None and details.open_details.is_success:
            table = Table(title="Recent Opens")
            table.add_column("Email", style="cyan")
            table.add_column("Opens", justify="right")
            for item in details.open_details.payload.get("members") or []:
                table.add_row(item.get("email_address", ""), str(item.get("opens_count", 0)))
            console.print(table)

    failed = False
    for label, result in (("Click details", details.click_details), ("Open details", details.open_details)):
        if result is not None and result.is_failure:
            _report_failure(label, result)
            failed = True
    if failed:
        raise typer.Exit(1)


@app.command("tags")
def list_tags(
    list_id: str = typer.Argument(..., help="List ID"),
    dc: Optional[str] = DC_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """List tags for a list."""
    client = get_client(dc, json_output)
    try:
        result = client.get_tags(list_id)
    except MailchimpError as e:
        fail(e, json_output)

    tags = [format_tag(t) for t in result.get("segments") or []]
    if json_output:
        print_json({"tags": tags, "total": result.get("total_items")})
        return

    table = Table(title=f"Found {result.get('total_items', len(tags))} tag(s)")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Members", justify="right")
    for tag in tags:
        table.add_row(str(tag["id"]), tag["name"] or "", str(tag["memberCount"] or 0))
    console.print(table)


@app.command("automations")
def list_automations(dc: Optional[str] = DC_OPTION, json_output: bool = JSON_OPTION) -> None:
    """List all automations."""
    client = get_client(dc, json_output)
    try:
        result = client.get_automations()
    except MailchimpError as e:
        fail(e, json_output)

    if json_output:
        print_json(result)
        return

    automations = result.get("automations") or []
    table = Table(title=f"Found {result.get('total_items', len(automations))} automation(s)")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Emails Sent", justify="right")
    for auto in automations:
        table.add_row(
            auto.get("id", ""),
            (auto.get("settings") or {}).get("title") or "(no title)",
            auto.get("status", ""),
            str(auto.get("emails_sent") or 0),
        )
    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from mailchimp_cli import __version__
    console.print(f"Mailchimp CLI v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
