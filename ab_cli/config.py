"""Configuration for the ab CLI.

Settings come from the environment (optionally seeded from a local .env file)
and are collected into an immutable CLIConfig that is passed explicitly to the
daemon and transport layers.
"""

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ab_cli.utils import get_pid_path, get_port_for_session

SESSION_ENV = 'AGENT_BROWSER_SESSION'
DAEMON_MARKER_ENV = 'AGENT_BROWSER_DAEMON'
DAEMON_PATH_ENV = 'AGENT_BROWSER_DAEMON_PATH'
NODE_PATH_ENV = 'AB_CLI_NODE_PATH'
TIMEOUT_ENV = 'AB_CLI_TIMEOUT'
PORT_ENV = 'AB_CLI_PORT'
LOGGING_LEVEL_ENV = 'AB_CLI_LOGGING_LEVEL'

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


class CLIConfig(BaseModel):
	"""Settings for one CLI invocation."""

	model_config = ConfigDict(frozen=True, extra='forbid')

	session: str = 'default'
	host: str = '127.0.0.1'
	timeout: float = Field(default=30.0, gt=0)
	startup_retries: int = Field(default=50, ge=1)
	startup_interval: float = Field(default=0.1, ge=0)
	daemon_port: int | None = Field(default=None, gt=0, lt=65536)
	daemon_path: Path | None = None
	node_path: str | None = None
	log_level: str = 'warning'
	tmp_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))

	@field_validator('session')
	@classmethod
	def _session_not_blank(cls, value: str) -> str:
		return value.strip() or 'default'

	@property
	def port(self) -> int:
		if self.daemon_port is not None:
			return self.daemon_port
		return get_port_for_session(self.session)

	@property
	def pid_path(self) -> Path:
		return get_pid_path(self.session, self.tmp_dir)


def load_config(environ: Mapping[str, str] | None = None) -> CLIConfig:
	"""Build a CLIConfig from environment variables.

	When no mapping is given, a .env file in the working directory is loaded
	into os.environ first (existing variables win) and os.environ is used.
	"""
	if environ is None:
		load_dotenv()
		environ = os.environ

	values: dict = {}
	if session := environ.get(SESSION_ENV):
		values['session'] = session
	if daemon_path := environ.get(DAEMON_PATH_ENV):
		values['daemon_path'] = Path(daemon_path).expanduser()
	if node_path := environ.get(NODE_PATH_ENV):
		values['node_path'] = node_path
	if port := environ.get(PORT_ENV):
		values['daemon_port'] = port
	if timeout := environ.get(TIMEOUT_ENV):
		values['timeout'] = timeout
	if log_level := environ.get(LOGGING_LEVEL_ENV):
		values['log_level'] = log_level.lower()
	return CLIConfig(**values)


def setup_logging(level: str = 'warning') -> None:
	"""Send log records to stderr so stdout stays clean for command output."""
	numeric_level = getattr(logging, level.upper(), None)
	if not isinstance(numeric_level, int):
		numeric_level = logging.WARNING
	logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
