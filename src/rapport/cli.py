"""Rapport CLI - calendar events and notifications."""

import json
import logging
import sys

import click

from .config import load_config
from .core.calendar import ExpandedOccurrence, RecurrenceRuleError, sort_occurrences_by_start
from .workflows import (
    CalendarError,
    create_calendar_event,
    delete_calendar_event,
    get_notifier,
    get_store,
    list_calendar_events,
    update_calendar_event,
)


@click.group()
@click.version_option(package_name="rapport")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Rapport - relationship calendar CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.group()
def calendar():
    """Manage calendar events."""
    pass


def _show_occurrences(occurrences: list[ExpandedOccurrence], as_json: bool) -> None:
    """Shared occurrence display logic."""
    if as_json:
        click.echo(json.dumps([o.to_dict() for o in occurrences], indent=2))
        return

    if not occurrences:
        click.echo("No events in range.")
        return

    current_date = None
    for occurrence in occurrences:
        event_date = occurrence.start[:10]
        if event_date != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {event_date}")
            current_date = event_date

        time_str = "All day" if occurrence.is_all_day else occurrence.start[11:]
        click.echo(f"  {time_str:8} {occurrence.title} [{occurrence.calendar_id}]")


@calendar.command("list")
@click.option("--start", required=True, help="Window start (ISO-8601)")
@click.option("--end", required=True, help="Window end (ISO-8601)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--sort", "sort_by_start", is_flag=True, help="Sort chronologically")
def calendar_list(start: str, end: str, as_json: bool, sort_by_start: bool):
    """Show event occurrences between START and END."""
    config = load_config()
    try:
        occurrences = list_calendar_events(
            get_store(config), config.user_id, start, end, config.display_tz()
        )
    except CalendarError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except RecurrenceRuleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if sort_by_start:
        occurrences = sort_occurrences_by_start(occurrences)
    _show_occurrences(occurrences, as_json)


@calendar.command("add")
@click.argument("title")
@click.option("--start", required=True, help="Start (ISO-8601)")
@click.option("--end", default=None, help="End (ISO-8601), defaults to one hour")
@click.option("--all-day", is_flag=True, help="All-day event")
@click.option("--color", default=None, help="Display color")
@click.option("--category", default=None, help="Category label")
@click.option("--rrule", default=None, help="Recurrence rule (iCalendar RRULE)")
@click.option("--description", default=None, help="Description")
@click.option("--timezone", "tz_name", default=None, help="Event timezone name")
def calendar_add(
    title: str,
    start: str,
    end: str | None,
    all_day: bool,
    color: str | None,
    category: str | None,
    rrule: str | None,
    description: str | None,
    tz_name: str | None,
):
    """Create a standalone event."""
    config = load_config()
    payload = {
        "title": title,
        "startAt": start,
        "endAt": end,
        "isAllDay": all_day,
        "color": color,
        "category": category,
        "recurrenceRule": rrule.replace("\\n", "\n") if rrule else None,
        "description": description,
        "timezone": tz_name,
    }
    try:
        event = create_calendar_event(
            get_store(config), get_notifier(config), config.user_id, payload
        )
    except CalendarError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Created {event.id}")


@calendar.command("edit")
@click.argument("event_id")
@click.option("--title", default=None, help="New title")
@click.option("--start", default=None, help="New start (ISO-8601)")
@click.option("--end", default=None, help="New end (ISO-8601)")
@click.option("--clear-end", is_flag=True, help="Remove the end time")
@click.option("--color", default=None, help="New display color")
@click.option("--rrule", default=None, help="New recurrence rule")
@click.option("--description", default=None, help="New description")
def calendar_edit(
    event_id: str,
    title: str | None,
    start: str | None,
    end: str | None,
    clear_end: bool,
    color: str | None,
    rrule: str | None,
    description: str | None,
):
    """Update a standalone event."""
    config = load_config()
    payload = {}
    if title is not None:
        payload["title"] = title
    if start is not None:
        payload["startAt"] = start
    if clear_end:
        payload["endAt"] = None
    elif end is not None:
        payload["endAt"] = end
    if color is not None:
        payload["color"] = color
    if rrule is not None:
        payload["recurrenceRule"] = rrule.replace("\\n", "\n") or None
    if description is not None:
        payload["description"] = description

    try:
        update_calendar_event(get_store(config), config.user_id, event_id, payload)
    except CalendarError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Updated {event_id}")


@calendar.command("delete")
@click.argument("event_id")
def calendar_delete(event_id: str):
    """Delete a standalone event."""
    config = load_config()
    try:
        delete_calendar_event(get_store(config), config.user_id, event_id)
    except CalendarError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Deleted {event_id}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def notifications(as_json: bool):
    """List your notifications."""
    config = load_config()
    items = get_notifier(config).for_user(config.user_id)

    if as_json:
        click.echo(json.dumps([n.to_dict() for n in items], indent=2))
        return

    if not items:
        click.echo("No notifications.")
        return

    for n in items:
        click.echo(f"• {n.created_at.strftime('%Y-%m-%d %H:%M')} {n.message}")


if __name__ == "__main__":
    main()
