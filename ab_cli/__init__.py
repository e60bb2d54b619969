"""ab-cli package.

A command-line client for the agent-browser daemon. Each invocation sends one
JSON command to the session's daemon over a local TCP socket, starting the
daemon first if needed.

Usage:
    ab open https://example.com
    ab snapshot -i
    ab click @e2
    ab fill @e3 "search text"
    ab screenshot ./page.png --full
    ab close
"""

__all__ = ['main', 'cli']


def __getattr__(name: str):
	"""Lazy import to avoid runpy warnings when running as module."""
	if name in ('main', 'cli'):
		import importlib

		main_module = importlib.import_module('ab_cli.main')

		return getattr(main_module, name)
	raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
