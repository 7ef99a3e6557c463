"""Wellplan CLI - recurring activity planner."""

import json
import logging
import sys
from datetime import date

import click

from .config import Config, load_config
from .core.presets import PresetError
from .core.recurrence import expand, format_dates, rule_from_settings, rule_to_settings
from .core.time_slots import SLOTS, DayPart, classify
from .workflows import activate_preset, archive_preset, day_agenda, list_presets


def _parse_date_arg(ctx, param, value):
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")


def recurrence_options(f):
    """Shared recurrence rule options."""
    options = [
        click.option(
            "--type",
            "recurrence_type",
            type=click.Choice(["none", "daily", "weekly", "monthly", "custom"]),
            default="none",
            show_default=True,
            help="Recurrence type",
        ),
        click.option("--count", type=int, default=None, help="Occurrences for daily/weekly/monthly"),
        click.option("--interval", type=int, default=None, help="Custom step size"),
        click.option(
            "--unit",
            type=click.Choice(["day", "week", "month", "year"]),
            default=None,
            help="Custom step unit",
        ),
        click.option(
            "--end-type",
            type=click.Choice(["never", "date", "count"]),
            default=None,
            help="When a custom rule stops",
        ),
        click.option("--end-date", default=None, help="Last custom date (YYYY-MM-DD)"),
        click.option("--end-count", type=int, default=None, help="Custom occurrence count"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_rule(config: Config, recurrence_type, count, interval, unit, end_type, end_date, end_count):
    return rule_from_settings(
        {
            "recurrence_type": recurrence_type,
            "recurrence_count": count if count is not None else config.default_count,
            "custom_interval": interval,
            "custom_unit": unit,
            "custom_end_type": end_type,
            "custom_end_date": end_date,
            "custom_end_count": end_count,
        }
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="wellplan")
def main(debug: bool):
    """Wellplan - recurring wellness activity planner."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("expand")
@click.argument("anchor", callback=_parse_date_arg)
@recurrence_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def expand_cmd(anchor: date, as_json: bool, **rule_options):
    """List the occurrence dates of a recurrence rule."""
    config = load_config()
    rule = _build_rule(config, **rule_options)
    dates = format_dates(expand(anchor, rule, max_occurrences=config.max_occurrences))

    if as_json:
        click.echo(json.dumps({"rule": rule_to_settings(rule), "dates": dates}, indent=2))
        return

    for d in dates:
        click.echo(d)


@main.command("classify")
@click.argument("time", required=False)
def classify_cmd(time: str | None):
    """Show the day-part an HH:MM time falls into."""
    click.echo(classify(time).value)


@main.command()
def slots():
    """Show the day-part table."""
    for slot in SLOTS:
        click.echo(f"{slot.emoji}  {slot.key.value:14} {slot.format()}")
    click.echo(f"    {DayPart.ANYTIME.value:14} (no time)")


@main.group()
def presets():
    """Manage activity presets."""
    pass


@presets.command("list")
@click.option("--all", "include_archived", is_flag=True, help="Include archived presets")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def presets_list(include_archived: bool, as_json: bool):
    """List presets."""
    config = load_config()
    items = list_presets(config, include_archived=include_archived)

    if as_json:
        click.echo(json.dumps([p.to_record() for p in items], indent=2, ensure_ascii=False))
        return

    if not items:
        click.echo("No presets.")
        return

    for p in items:
        state = "archived" if p.is_archived else "active" if p.is_active else "idle"
        window = f" until {p.activation_end}" if p.is_active and p.activation_end else ""
        click.echo(f"{p.emoji or '•'} {p.name} [{p.id}] ({len(p.activities)} activities, {state}{window})")


@presets.command("activate")
@click.argument("preset_id")
@click.option("--start", "anchor", default=None, callback=_parse_date_arg,
              help="First day (YYYY-MM-DD), defaults to today")
@recurrence_options
@click.option("--dry-run", is_flag=True, help="Show the window without saving")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def presets_activate(preset_id: str, anchor: date | None, dry_run: bool, as_json: bool, **rule_options):
    """Activate a preset over a recurrence."""
    config = load_config()
    anchor = anchor or date.today()
    rule = _build_rule(config, **rule_options)

    try:
        result = activate_preset(config, preset_id, anchor, rule, dry_run=dry_run)
    except PresetError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    window = result.window
    planned = len(result.instances)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "preset_id": preset_id,
                    "activation_start": window.start.isoformat(),
                    "activation_end": window.end.isoformat(),
                    "occurrences": format_dates(list(window.occurrences)),
                    "planned_activities": planned,
                    "saved": not dry_run,
                },
                indent=2,
            )
        )
        return

    prefix = "Would activate" if dry_run else "✓ Activated"
    click.echo(f"{prefix} {preset_id}: {window.format()}")
    click.echo(f"  {planned} activities planned")


@presets.command("archive")
@click.argument("preset_id")
def presets_archive(preset_id: str):
    """Archive a preset."""
    config = load_config()
    try:
        preset = archive_preset(config, preset_id)
    except PresetError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Archived {preset.name}")


@main.command()
@click.argument("target", required=False, callback=_parse_date_arg)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target: date | None, as_json: bool):
    """Show planned activities for a day, grouped by day-part."""
    config = load_config()
    target = target or date.today()
    groups = day_agenda(config, target)

    if as_json:
        click.echo(
            json.dumps(
                {slot.value: [i.to_record() for i in items] for slot, items in groups.items()},
                indent=2,
            )
        )
        return

    if not any(groups.values()):
        click.echo(f"Nothing planned for {target.strftime('%A, %B %d')}.")
        return

    emoji = {s.key: s.emoji for s in SLOTS}
    click.echo(f"### {target.strftime('%A, %B %d')}")
    for slot, items in groups.items():
        if not items:
            continue
        click.echo(f"\n{emoji.get(slot, '•')} {slot.value}")
        for item in items:
            time_str = item.start_time or "--:--"
            click.echo(f"  {time_str:6} {item.category} ({item.duration_minutes} min)")


if __name__ == "__main__":
    main()
