#!/usr/bin/env python3
"""Command-line entry point for ab-cli.

Flow: parse arguments -> make sure the session's daemon is running -> build
the request -> exchange it over TCP -> print the formatted response.
"""

import json
import logging
from collections.abc import Sequence

import click
from rich.console import Console
from rich.markup import escape

from ab_cli.builder import ParsedInvocation, build_request, parse_args
from ab_cli.commands import LOCAL_COMMANDS
from ab_cli.config import CLIConfig, load_config, setup_logging
from ab_cli.daemon import ensure_daemon
from ab_cli.exceptions import ABCliError, TransportError
from ab_cli.formatters import CHECK, format_response
from ab_cli.help import generate_help
from ab_cli.protocol import Request, make_request_id
from ab_cli.transport import send_command
from ab_cli.utils import find_all_sessions, get_port_for_session, is_daemon_running

logger = logging.getLogger(__name__)

# Status and error lines go to stderr, command output to stdout
console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
	console.print(f'[red]✗[/red] {escape(message)}')


def handle_sessions(config: CLIConfig, json_output: bool) -> int:
	"""List sessions whose daemon is alive."""
	sessions = [{'name': name, 'port': get_port_for_session(name)} for name in find_all_sessions(config.tmp_dir)]
	if json_output:
		click.echo(json.dumps(sessions, indent=2))
	elif sessions:
		for s in sessions:
			click.echo(f'  {s["name"]}: running (port {s["port"]})')
	else:
		click.echo('No active sessions')
	return 0


def start_daemon_if_needed(config: CLIConfig) -> None:
	if is_daemon_running(config.pid_path):
		return
	console.print('[cyan]Starting browser daemon...[/cyan]')
	ensure_daemon(config)
	console.print('[green]✓[/green] Daemon ready')


def launch_headed(config: CLIConfig) -> None:
	"""Ask the daemon for a visible browser before the real command."""
	request = Request(id=make_request_id('launch'), action='launch', fields={'headless': False})
	try:
		send_command(config, request)
	except TransportError as e:
		# Usually the browser is already running
		logger.debug(f'Headed launch failed, continuing: {e}')
		return
	console.print('[green]✓[/green] Browser launched in headed mode')


def execute(parsed: ParsedInvocation, config: CLIConfig) -> int:
	"""Run one daemon command and print its result. Returns the exit code."""
	start_daemon_if_needed(config)

	if parsed.headed and parsed.action not in ('close', 'launch'):
		launch_headed(config)

	request = build_request(parsed)
	response = send_command(config, request)

	if parsed.json_output:
		click.echo(response.to_json())
		return 0 if response.success or response.is_raw_text else 1

	if response.is_raw_text:
		click.echo(response.raw['result'])
		return 0

	if not response.success:
		print_error(response.error or 'Unknown error')
		return 1

	output = format_response(request.action, response.data)
	if output.startswith(CHECK):
		# click.echo drops the color when stdout is not a terminal
		output = click.style(CHECK, fg='green') + output[len(CHECK) :]
	click.echo(output)
	return 0


def run(argv: Sequence[str], config: CLIConfig) -> int:
	parsed = parse_args(list(argv))

	if parsed.help:
		Console(highlight=False, soft_wrap=True).print(generate_help(parsed.verbose))
		return 0

	if parsed.action in LOCAL_COMMANDS:
		return handle_sessions(config, parsed.json_output)

	return execute(parsed, config)


def main(argv: Sequence[str] = (), config: CLIConfig | None = None) -> int:
	"""Top-level handler: every failure becomes a message and exit code 1."""
	try:
		config = config or load_config()
		setup_logging(config.log_level)
		return run(argv, config)
	except ABCliError as e:
		print_error(str(e))
		return 1
	except KeyboardInterrupt:
		print_error('Interrupted')
		return 130
	except Exception as e:
		logger.debug('Unexpected error', exc_info=True)
		print_error(str(e) or type(e).__name__)
		return 1


@click.command(
	context_settings={'ignore_unknown_options': True, 'allow_extra_args': True, 'help_option_names': []},
)
@click.argument('argv', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, argv: tuple[str, ...]) -> None:
	"""Browser automation CLI for the agent-browser daemon."""
	ctx.exit(main(argv))


if __name__ == '__main__':
	cli()
