"""Transport - one newline-delimited JSON exchange with the daemon over TCP."""

import json
import logging
import socket
import time
from typing import Any

from ab_cli.config import CLIConfig
from ab_cli.exceptions import TransportError, TransportTimeoutError
from ab_cli.protocol import Request, Response

logger = logging.getLogger(__name__)

RECV_SIZE = 65536


def _parse_last_line(data: bytes) -> dict[str, Any] | None:
	last = data.strip().rsplit(b'\n', 1)[-1]
	try:
		obj = json.loads(last.decode('utf-8', errors='replace'))
	except ValueError:
		return None
	return obj if isinstance(obj, dict) else None


def parse_buffer(data: bytes) -> dict[str, Any] | None:
	"""Try to extract the response object from the bytes received so far.

	A result is only produced once a newline has arrived and the last line
	parses as a JSON object.
	"""
	if b'\n' not in data:
		return None
	return _parse_last_line(data)


def parse_closed_buffer(data: bytes) -> dict[str, Any]:
	"""Resolve the response once the peer has closed the connection.

	Content that is not a JSON object is wrapped as ``{"result": text}``.
	"""
	parsed = _parse_last_line(data)
	if parsed is not None:
		return parsed
	text = data.decode('utf-8', errors='replace').strip()
	logger.debug(f'Unparseable response, wrapping raw text ({len(text)} chars)')
	return {'result': text}


def _receive(sock: socket.socket, deadline: float) -> dict[str, Any]:
	buffer = bytearray()
	while True:
		remaining = deadline - time.monotonic()
		if remaining <= 0:
			raise TimeoutError
		sock.settimeout(remaining)
		chunk = sock.recv(RECV_SIZE)
		if not chunk:
			return parse_closed_buffer(bytes(buffer))
		buffer += chunk
		# Only a fresh newline can complete a response
		if b'\n' in chunk:
			result = parse_buffer(bytes(buffer))
			if result is not None:
				return result


def send_command(config: CLIConfig, request: Request) -> Response:
	"""Send one request to the session's daemon and wait for its response."""
	address = (config.host, config.port)
	deadline = time.monotonic() + config.timeout
	logger.debug(f'→ {address[0]}:{address[1]} {request.to_json()}')

	try:
		sock = socket.create_connection(address, timeout=config.timeout)
	except TimeoutError as e:
		raise TransportTimeoutError(config.timeout) from e
	except OSError as e:
		raise TransportError(f'Cannot connect to daemon at {address[0]}:{address[1]}: {e}') from e

	try:
		sock.sendall(request.encode())
		raw = _receive(sock, deadline)
	except TimeoutError as e:
		raise TransportTimeoutError(config.timeout) from e
	except OSError as e:
		raise TransportError(f'Connection to daemon failed: {e}') from e
	finally:
		sock.close()

	logger.debug(f'← {raw}')
	return Response.from_dict(raw)
