#!/usr/bin/env python3

import sys

import click

from librespot_setup import __version__
from librespot_setup.config import load_config, configure_logging
from librespot_setup.domain.plan import InstallerConfig
from librespot_setup.exit_codes import (
    SUCCESS, INTERRUPTED, CommandError, exit_with_code
)
from librespot_setup.render import render_summary_table
from librespot_setup.services.installer import Installer

PROGRAM = "librespot-setup"


def abort(code, message, summary=None, show_summary=True):
    """Central exit routine for every aborted run."""
    if summary is not None and show_summary:
        render_summary_table(summary)
    exit_with_code(code, message, hint=f"To restart this installer run: $ {PROGRAM}")


@click.command()
@click.version_option(version=__version__, prog_name=PROGRAM)
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file (JSON, TOML or YAML)')
@click.option('--update-checkout', is_flag=True,
              help='Pull the default branch when the source checkout already exists')
@click.option('--refresh-apt-cache', is_flag=True,
              help='Run apt-get update first if the package cache is stale')
@click.option('--summary/--no-summary', default=True,
              help='Print a table of step results at the end')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def cli(config_path, update_checkout, refresh_apt_cache, summary, verbose):
    """librespot-setup - Compile and install librespot as a systemd daemon.

    Installs the build dependencies, bootstraps Rust, builds librespot from
    source, downloads the raspotify unit file, configuration and event hook,
    installs everything and (re)starts the service. Safe to re-run: finished
    steps are skipped.
    """
    config = load_config(config_path)
    configure_logging(config, verbose=verbose)

    if update_checkout:
        config['git']['update_checkout'] = True
    if refresh_apt_cache:
        config['apt']['refresh_cache'] = True

    try:
        plan = InstallerConfig.from_dict(config)
    except (KeyError, TypeError, ValueError) as e:
        abort(1, f"invalid configuration: {e}")

    installer = Installer(plan)
    try:
        result = installer.run()
    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "Interrupted by user")
    except CommandError as e:
        abort(e.exit_code, str(e), getattr(e, 'summary', None), summary)

    if summary:
        render_summary_table(result)
    click.echo(f"{plan.service_name} is installed and running.", err=True)
    sys.exit(SUCCESS)


def main():
    cli(prog_name=PROGRAM)

if __name__ == "__main__":
    main()
