"""Settings CLI commands for Child Support Calc.

Manages settings.json - output format and parent display labels.
"""

import click

from childsupport.sdk import (
    SETTINGS_DEFAULTS,
    SettingsError,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - default_output_format: text or json
    - parent_a_label: name shown for Parent A when none is given
    - parent_b_label: name shown for Parent B when none is given
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their effective values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        click.echo()

    click.echo("Effective settings:")
    for key in SETTINGS_DEFAULTS:
        source = "" if key in current else " (default)"
        click.echo(f"  {key}: {get_setting(key)}{source}")


@settings.command("get")
@click.argument("key")
def settings_get(key):
    """Print the effective value of a setting."""
    if key not in SETTINGS_DEFAULTS:
        raise click.BadParameter(f"Unknown setting '{key}'", param_hint="KEY")
    click.echo(get_setting(key))


@settings.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key, value):
    """Set a setting.

    Examples:
        child-support settings set default_output_format json
        child-support settings set parent_a_label Mother
    """
    try:
        path = set_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key")
def settings_unset(key):
    """Clear a setting, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key}. Now: {get_setting(key)} (default)")
    else:
        click.echo(f"{key} was not set.")
