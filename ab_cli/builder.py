"""Argument parsing and request building.

``parse_args`` splits raw process arguments into a verb, positionals and flag
tokens. ``build_request`` turns that into a daemon Request using the command
table, falling back to a generic ``arg0``/``arg1``/... encoding for verbs the
table does not know.
"""

import logging
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict

from ab_cli.commands import BOOLEAN_PARAMS, FLAG_FIELDS, HEADED_ACTIONS, NUMERIC_PARAMS, get_command
from ab_cli.protocol import Request, make_request_id

logger = logging.getLogger(__name__)

HELP_TOKENS = frozenset({'help', '-h', '--help'})

# Leading numeric prefix, read the way JavaScript's parseFloat reads it
_NUMBER_PREFIX = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
# Negative numbers are positionals, not flags
_NEGATIVE_NUMBER = re.compile(r'-(?:\d+\.?\d*|\.\d+)')


class ParsedInvocation(BaseModel):
	"""One parsed command line."""

	model_config = ConfigDict(frozen=True)

	action: str | None = None
	args: tuple[str, ...] = ()
	flags: tuple[str, ...] = ()
	headed: bool = False
	json_output: bool = False
	verbose: bool = False
	help: bool = False


def parse_args(argv: list[str] | tuple[str, ...]) -> ParsedInvocation:
	"""Split argv (without program name) into verb, positionals and flags.

	Global flags (--headed, --json, -v/--verbose, -h/--help) are recognized
	anywhere. The first token not starting with '-' is the verb; other
	non-flag tokens (including negative numbers) are positionals, other dash
	tokens are verb flags.
	"""
	action: str | None = None
	args: list[str] = []
	flags: list[str] = []
	headed = json_output = verbose = show_help = False

	for arg in argv:
		if arg == '--headed':
			headed = True
		elif arg == '--json':
			json_output = True
		elif arg in ('-v', '--verbose'):
			verbose = True
		elif arg in ('-h', '--help') and action is None:
			show_help = True
		elif arg.startswith('-') and len(arg) > 1 and not _NEGATIVE_NUMBER.fullmatch(arg):
			flags.append(arg)
		elif action is None:
			action = arg
		else:
			args.append(arg)

	if action in HELP_TOKENS:
		show_help = True

	return ParsedInvocation(
		action=action,
		args=tuple(args),
		flags=tuple(flags),
		headed=headed,
		json_output=json_output,
		verbose=verbose,
		help=show_help or action is None,
	)


def coerce_number(value: str) -> int | float | str:
	"""Parse a numeric argument, keeping the original string if it is not a number."""
	match = _NUMBER_PREFIX.match(value)
	if not match:
		return value
	number = float(match.group(0))
	if not math.isfinite(number):
		return value
	if number.is_integer():
		return int(number)
	return number


def coerce_param(name: str, value: str) -> Any:
	if name in NUMERIC_PARAMS:
		return coerce_number(value)
	if name in BOOLEAN_PARAMS:
		return value == 'true'
	return value


def build_request(parsed: ParsedInvocation, request_id: str | None = None) -> Request:
	"""Map a parsed invocation to a daemon Request.

	Never raises for unknown verbs: they are forwarded with positional
	arguments named ``arg0``, ``arg1``, ... so newer daemon actions keep working.
	"""
	action = parsed.action or ''
	request_id = request_id or make_request_id()
	spec = get_command(parsed.action)

	if spec is None:
		logger.debug(f'Unknown verb {action!r}, passing through')
		return Request(id=request_id, action=action, fields={f'arg{i}': a for i, a in enumerate(parsed.args)})

	fields: dict[str, Any] = {}
	for param, value in zip(spec.params, parsed.args):
		fields[param.name] = coerce_param(param.name, value)

	# Later flags override earlier ones
	for flag in parsed.flags:
		if not spec.accepts_flag(flag):
			logger.debug(f'Ignoring flag {flag} for {parsed.action}')
			continue
		if '=' in flag:
			name, value = flag.split('=', 1)
			fields[name.lstrip('-')] = value
		elif flag in FLAG_FIELDS:
			field, value = FLAG_FIELDS[flag]
			fields[field] = value

	if parsed.headed and spec.action in HEADED_ACTIONS:
		fields['headless'] = False

	return Request(id=request_id, action=spec.action, fields=fields)
