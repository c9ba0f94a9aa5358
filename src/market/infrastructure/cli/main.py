import click

from market.infrastructure.cli.scenario_commands import scenario_demo, scenario_run
from market.infrastructure.log_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log every step of each transaction.")
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines.")
def cli(verbose: bool, json_logs: bool) -> None:
    """Market — a minimal trustless marketplace"""
    configure_logging(verbose=verbose, json_logs=json_logs)


# Register subcommands
cli.add_command(scenario_demo)
cli.add_command(scenario_run)
