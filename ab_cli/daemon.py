"""Daemon lifecycle - locate, start and wait for the agent-browser daemon."""

import logging
import os
import shutil
import subprocess
import sys
import time
from pathlib import Path

from ab_cli.config import DAEMON_MARKER_ENV, SESSION_ENV, CLIConfig
from ab_cli.exceptions import DaemonNotFoundError, DaemonStartError
from ab_cli.utils import is_daemon_running

logger = logging.getLogger(__name__)

DAEMON_RELATIVE_PATH = Path('agent-browser') / 'dist' / 'daemon.js'


def _npm_global_root() -> Path | None:
	npm = shutil.which('npm')
	if not npm:
		return None
	try:
		result = subprocess.run([npm, 'root', '-g'], capture_output=True, text=True, timeout=10)
	except (OSError, subprocess.SubprocessError) as e:
		logger.debug(f'npm root -g failed: {e}')
		return None
	if result.returncode != 0 or not result.stdout.strip():
		return None
	return Path(result.stdout.strip())


def candidate_daemon_paths() -> list[Path]:
	"""Well-known install locations of the daemon script, most specific first."""
	roots: list[Path] = []
	if sys.platform == 'win32':
		appdata = os.environ.get('APPDATA', '')
		local_appdata = os.environ.get('LOCALAPPDATA', '')
		if appdata:
			fnm_versions = Path(appdata) / 'fnm' / 'node-versions'
			roots.extend(sorted(fnm_versions.glob('*/installation/node_modules'), reverse=True))
		roots.append(Path(appdata) / 'npm' / 'node_modules')
		roots.append(Path(local_appdata) / 'npm' / 'node_modules')
	else:
		roots.append(Path('/usr/local/lib/node_modules'))
		roots.append(Path('/usr/lib/node_modules'))
		roots.append(Path.home() / '.npm-global' / 'lib' / 'node_modules')
		roots.append(Path('/opt/homebrew/lib/node_modules'))

	npm_root = _npm_global_root()
	if npm_root is not None:
		roots.append(npm_root)

	return [root / DAEMON_RELATIVE_PATH for root in roots]


def find_daemon_path(config: CLIConfig) -> Path:
	"""Locate daemon.js, honouring an explicit path from the configuration."""
	if config.daemon_path is not None:
		if config.daemon_path.is_file():
			return config.daemon_path
		raise DaemonNotFoundError(f'agent-browser daemon not found at {config.daemon_path}')

	for path in candidate_daemon_paths():
		if path.is_file():
			logger.debug(f'Found daemon at {path}')
			return path

	raise DaemonNotFoundError('agent-browser daemon not found. Run: npm install -g agent-browser')


def find_node_executable(config: CLIConfig) -> str:
	node = config.node_path or shutil.which('node')
	if not node:
		raise DaemonNotFoundError('node executable not found. Install Node.js to run the agent-browser daemon')
	return node


def spawn_daemon(config: CLIConfig, daemon_path: Path) -> subprocess.Popen:
	"""Start the daemon as a detached background process."""
	cmd = [find_node_executable(config), str(daemon_path)]

	env = os.environ.copy()
	env[DAEMON_MARKER_ENV] = '1'
	env[SESSION_ENV] = config.session

	# Run from the package root (.../agent-browser), not from dist/
	cwd = daemon_path.parent.parent
	logger.debug(f'Spawning daemon: {" ".join(cmd)} (cwd={cwd}, session={config.session})')

	if sys.platform == 'win32':
		return subprocess.Popen(
			cmd,
			env=env,
			cwd=cwd,
			creationflags=subprocess.CREATE_NEW_PROCESS_GROUP | subprocess.DETACHED_PROCESS | subprocess.CREATE_NO_WINDOW,
			stdin=subprocess.DEVNULL,
			stdout=subprocess.DEVNULL,
			stderr=subprocess.DEVNULL,
		)
	return subprocess.Popen(
		cmd,
		env=env,
		cwd=cwd,
		start_new_session=True,
		stdin=subprocess.DEVNULL,
		stdout=subprocess.DEVNULL,
		stderr=subprocess.DEVNULL,
	)


def wait_for_daemon(config: CLIConfig) -> bool:
	"""Poll the PID file until the daemon is live or the retry budget runs out."""
	for attempt in range(config.startup_retries):
		time.sleep(config.startup_interval)
		if is_daemon_running(config.pid_path):
			logger.debug(f'Daemon ready after {attempt + 1} check(s)')
			return True
	return False


def ensure_daemon(config: CLIConfig) -> bool:
	"""Start the daemon if it is not running. Returns True if it was started."""
	if is_daemon_running(config.pid_path):
		logger.debug(f'Daemon for session {config.session!r} already running')
		return False

	daemon_path = find_daemon_path(config)
	spawn_daemon(config, daemon_path)

	if not wait_for_daemon(config):
		timeout = config.startup_retries * config.startup_interval
		raise DaemonStartError(f'Daemon failed to start within {timeout:g}s')
	return True
