"""End-to-end tests for the CLI entry point with the daemon stubbed out."""

import json
import os

import click
import pytest
from click.testing import CliRunner

from ab_cli import main as cli_main
from ab_cli.config import CLIConfig
from ab_cli.exceptions import DaemonStartError, TransportError, TransportTimeoutError
from ab_cli.protocol import Response


@pytest.fixture
def config(tmp_path):
	return CLIConfig(session='main-test', tmp_dir=tmp_path, startup_interval=0)


@pytest.fixture
def daemon_running(config):
	config.pid_path.write_text(str(os.getpid()))


class FakeSender:
	"""Records requests and answers with scripted responses."""

	def __init__(self, *responses):
		self.responses = list(responses)
		self.requests = []

	def __call__(self, config, request):
		self.requests.append(request)
		response = self.responses.pop(0)
		if isinstance(response, Exception):
			raise response
		return Response.from_dict(response)


@pytest.fixture
def sender(monkeypatch):
	def install(*responses):
		fake = FakeSender(*responses)
		monkeypatch.setattr(cli_main, 'send_command', fake)
		return fake

	return install


def test_formatted_output(config, daemon_running, sender, capsys):
	"""Test that a successful response is printed through its formatter."""
	fake = sender({'success': True, 'data': {'count': 3}})
	assert cli_main.main(['count', '.item'], config) == 0

	out = capsys.readouterr().out
	assert out == '3 element(s)\n'
	(request,) = fake.requests
	assert request.action == 'count'
	assert request.fields == {'selector': '.item'}


def test_formatter_keyed_by_daemon_action(config, daemon_running, sender, capsys):
	"""Test that formatters are chosen by daemon action, not by verb."""
	sender({'success': True, 'data': {'visible': True}})
	assert cli_main.main(['isvisible', '#banner'], config) == 0
	assert capsys.readouterr().out == 'visible\n'


def test_json_output_is_full_response(config, daemon_running, sender, capsys):
	"""Test that --json prints the full response unchanged."""
	raw = {'id': 'cmd-1', 'success': True, 'data': {'count': 3, 'name': 'ünï'}}
	sender(raw)
	assert cli_main.main(['count', '.item', '--json'], config) == 0
	assert capsys.readouterr().out == json.dumps(raw, indent=2, ensure_ascii=False) + '\n'


def test_json_output_for_failure_exits_non_zero(config, daemon_running, sender, capsys):
	"""Test that --json still exits 1 when the daemon reports failure."""
	raw = {'id': 'cmd-1', 'success': False, 'error': 'nope'}
	sender(raw)
	assert cli_main.main(['click', '#x', '--json'], config) == 1
	assert json.loads(capsys.readouterr().out) == raw


def test_failure_skips_formatter(config, daemon_running, sender, capsys, monkeypatch):
	"""Test that a failure prints the error and never calls the formatter."""
	sender({'success': False, 'error': 'Element not found: #missing'})
	called = []
	monkeypatch.setattr(cli_main, 'format_response', lambda *args: called.append(args) or '')

	assert cli_main.main(['click', '#missing'], config) == 1
	captured = capsys.readouterr()
	assert called == []
	assert captured.out == ''
	assert 'Element not found: #missing' in captured.err


def test_failure_without_error_text(config, daemon_running, sender, capsys):
	"""Test that a failure without an error message prints 'Unknown error'."""
	sender({'success': False})
	assert cli_main.main(['click', '#x'], config) == 1
	assert 'Unknown error' in capsys.readouterr().err


def test_raw_text_response_is_printed(config, daemon_running, sender, capsys):
	"""Test that a wrapped raw-text response is printed as is."""
	sender({'result': 'plain daemon text'})
	assert cli_main.main(['title'], config) == 0
	assert capsys.readouterr().out == 'plain daemon text\n'


def test_unknown_verb_passes_through(config, daemon_running, sender, capsys):
	"""Test that an unknown verb reaches the daemon as a generic request."""
	fake = sender({'success': True, 'data': None})
	assert cli_main.main(['brandNewAction', 'a', 'b'], config) == 0
	assert fake.requests[0].to_dict()['action'] == 'brandNewAction'
	assert fake.requests[0].fields == {'arg0': 'a', 'arg1': 'b'}
	assert capsys.readouterr().out == '✓ Done\n'


def test_headed_sends_launch_first(config, daemon_running, sender, capsys):
	"""Test that --headed sends a headed launch before the command."""
	fake = sender({'success': True}, {'success': True, 'data': None})
	assert cli_main.main(['click', '#go', '--headed'], config) == 0

	launch, click = fake.requests
	assert launch.action == 'launch'
	assert launch.fields == {'headless': False}
	assert launch.id.startswith('launch-')
	assert click.action == 'click'


def test_headed_launch_failure_is_tolerated(config, daemon_running, sender, capsys):
	"""Test that a failed headed launch does not stop the command."""
	fake = sender(TransportError('already launched'), {'success': True, 'data': None})
	assert cli_main.main(['click', '#go', '--headed'], config) == 0
	assert [r.action for r in fake.requests] == ['launch', 'click']


@pytest.mark.parametrize('verb', ['launch', 'close'])
def test_headed_without_prelaunch_for_launch_and_close(config, daemon_running, sender, verb):
	"""Test that launch and close are not preceded by a headed launch."""
	fake = sender({'success': True, 'data': None})
	assert cli_main.main([verb, '--headed'], config) == 0
	assert [r.action for r in fake.requests] == [verb]


def test_daemon_started_when_not_running(config, sender, monkeypatch, capsys):
	"""Test that the daemon is started when it is not running."""
	started = []
	monkeypatch.setattr(cli_main, 'ensure_daemon', lambda cfg: started.append(cfg) or True)
	sender({'success': True, 'data': None})

	assert cli_main.main(['reload'], config) == 0
	assert started == [config]
	assert 'Daemon ready' in capsys.readouterr().err


def test_daemon_start_failure(config, monkeypatch, capsys):
	"""Test that a daemon start failure exits 1 with a message."""
	def fail(cfg):
		raise DaemonStartError('Daemon failed to start within 5s')

	monkeypatch.setattr(cli_main, 'ensure_daemon', fail)
	assert cli_main.main(['reload'], config) == 1
	assert 'Daemon failed to start' in capsys.readouterr().err


def test_transport_timeout_exits_non_zero(config, daemon_running, sender, capsys):
	"""Test that a transport timeout exits 1 with a message."""
	sender(TransportTimeoutError(30))
	assert cli_main.main(['title'], config) == 1
	assert 'Timeout' in capsys.readouterr().err


def test_unexpected_error_is_caught(config, daemon_running, sender, capsys):
	"""Test that unexpected exceptions become an error message and exit 1."""
	sender(RuntimeError('kaboom'))
	assert cli_main.main(['title'], config) == 1
	assert 'kaboom' in capsys.readouterr().err


def test_help_does_not_touch_daemon(config, monkeypatch, capsys):
	"""Test that help is printed without starting the daemon."""
	monkeypatch.setattr(cli_main, 'ensure_daemon', lambda cfg: pytest.fail('daemon started for help'))
	assert cli_main.main([], config) == 0
	assert cli_main.main(['--help', '-v'], config) == 0
	out = capsys.readouterr().out
	assert 'Usage: ab <command>' in out
	assert 'Navigation:' in out


def test_sessions_lists_live_daemons(config, monkeypatch, capsys):
	"""Test that 'sessions' lists live daemons without starting one."""
	monkeypatch.setattr(cli_main, 'ensure_daemon', lambda cfg: pytest.fail('daemon started for sessions'))
	(config.tmp_dir / 'agent-browser-work.pid').write_text(str(os.getpid()))
	(config.tmp_dir / 'agent-browser-old.pid').write_text('x')

	assert cli_main.main(['sessions', '--json'], config) == 0
	sessions = json.loads(capsys.readouterr().out)
	assert [s['name'] for s in sessions] == ['work']

	assert cli_main.main(['sessions'], config) == 0
	assert 'work: running' in capsys.readouterr().out


def test_click_entry_point(config, daemon_running, sender, monkeypatch):
	"""Test the click entry point end to end."""
	sender({'success': True, 'data': {'count': 2}})
	monkeypatch.setattr(cli_main, 'load_config', lambda: config)

	result = CliRunner().invoke(cli_main.cli, ['count', 'li', '--json'])
	assert result.exit_code == 0
	assert json.loads(result.output) == {'success': True, 'data': {'count': 2}}


def test_click_entry_point_passes_flags_through(config, daemon_running, sender, monkeypatch):
	"""Test that click hands verb flags through untouched."""
	fake = sender({'success': True, 'data': None})
	monkeypatch.setattr(cli_main, 'load_config', lambda: config)

	result = CliRunner().invoke(cli_main.cli, ['screenshot', 'page.png', '--full'])
	assert result.exit_code == 0
	assert fake.requests[0].fields == {'path': 'page.png', 'fullPage': True}


def test_click_entry_point_help(monkeypatch, config):
	"""Test that -h through click prints the generated help."""
	monkeypatch.setattr(cli_main, 'load_config', lambda: config)
	result = CliRunner().invoke(cli_main.cli, ['-h'])
	assert result.exit_code == 0
	assert 'Common commands' in result.output


def test_check_mark_colored_on_terminal(config, daemon_running, sender, monkeypatch):
	"""Test that the success check mark is green on a terminal and plain otherwise."""
	sender({'success': True, 'data': None}, {'success': True, 'data': None})
	monkeypatch.setattr(cli_main, 'load_config', lambda: config)

	colored = CliRunner().invoke(cli_main.cli, ['reload'], color=True)
	assert colored.exit_code == 0
	assert colored.output == click.style('✓', fg='green') + ' Page reloaded\n'

	plain = CliRunner().invoke(cli_main.cli, ['reload'])
	assert plain.output == '✓ Page reloaded\n'
