"""Errors raised by the ab CLI."""


class ABCliError(Exception):
	"""Base class for errors reported to the user with exit code 1."""

	pass


class DaemonNotFoundError(ABCliError):
	"""Raised when the agent-browser daemon script cannot be located."""

	pass


class DaemonStartError(ABCliError):
	"""Raised when a spawned daemon never writes a live PID file."""

	pass


class TransportError(ABCliError):
	"""Raised when the socket exchange with the daemon fails."""

	pass


class TransportTimeoutError(TransportError):
	"""Raised when the daemon does not answer within the configured timeout."""

	def __init__(self, timeout: float):
		self.timeout = timeout
		super().__init__(f'Timeout waiting for daemon response after {timeout:g}s')
