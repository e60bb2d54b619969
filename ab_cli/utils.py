"""Platform utilities shared by the daemon manager and the CLI."""

import os
import tempfile
from pathlib import Path

PORT_BASE = 49152
PORT_SPAN = 16383
PID_PREFIX = 'agent-browser-'


def _to_int32(value: int) -> int:
	value &= 0xFFFFFFFF
	return value - 0x100000000 if value & 0x80000000 else value


def get_port_for_session(session: str) -> int:
	"""Derive the daemon's TCP port from the session name.

	Uses the same 32-bit string hash as the daemon so that both sides agree on
	the port without any stored mapping. The hash runs over UTF-16 code units.
	The result always lies in [49152, 65535).
	"""
	encoded = session.encode('utf-16-le')
	h = 0
	for i in range(0, len(encoded), 2):
		code_unit = encoded[i] | (encoded[i + 1] << 8)
		h = _to_int32((h << 5) - h + code_unit)
	return PORT_BASE + (abs(h) % PORT_SPAN)


def get_pid_path(session: str, tmp_dir: Path | None = None) -> Path:
	"""Get PID file path for session."""
	base = tmp_dir if tmp_dir is not None else Path(tempfile.gettempdir())
	return base / f'{PID_PREFIX}{session}.pid'


def is_daemon_running(pid_path: Path) -> bool:
	"""Check if the PID file names a process that can be signalled."""
	try:
		pid = int(pid_path.read_text().strip())
		# Signal 0 only checks that the process exists
		os.kill(pid, 0)
		return True
	except (OSError, ValueError):
		# Missing file, unreadable content or dead process
		return False


def find_all_sessions(tmp_dir: Path | None = None) -> list[str]:
	"""Find all running daemon sessions by scanning PID files."""
	base = tmp_dir if tmp_dir is not None else Path(tempfile.gettempdir())
	sessions = []
	for pid_file in sorted(base.glob(f'{PID_PREFIX}*.pid')):
		name = pid_file.stem.replace(PID_PREFIX, '', 1)
		if is_daemon_running(pid_file):
			sessions.append(name)
	return sessions
