"""Response formatters - render daemon data for the terminal.

Formatters are keyed by daemon action name (not CLI verb). Any formatter that
raises or returns something other than a string falls back to
``format_default``.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

CHECK = '✓'

Formatter = Callable[[Any], str]


def _ok(message: str) -> str:
	return f'{CHECK} {message}'


def _to_json(data: Any) -> str:
	return json.dumps(data, indent=2, ensure_ascii=False)


def _field(data: Any, key: str) -> Any:
	"""``data[key]`` when data is a dict holding a non-null value, else data itself."""
	if isinstance(data, dict) and data.get(key) is not None:
		return data[key]
	return data


def _items(data: Any, key: str) -> list:
	if isinstance(data, dict):
		return data.get(key) or []
	return []


def format_default(data: Any) -> str:
	if data is None:
		return _ok('Done')
	if isinstance(data, str):
		return data
	return _to_json(data)


def _format_console(data: Any) -> str:
	messages = _items(data, 'messages')
	if not messages:
		return 'No console messages'
	return '\n'.join(f'[{m.get("type") or "log"}] {m["text"]}' for m in messages)


def _format_errors(data: Any) -> str:
	errors = _items(data, 'errors')
	if not errors:
		return 'No JavaScript errors'
	return '\n'.join(f'[ERROR] {_field(e, "message")}' for e in errors)


def _format_requests(data: Any) -> str:
	requests = _items(data, 'requests')
	if not requests:
		return 'No requests tracked'
	return '\n'.join(f'{r.get("method") or "GET"} {r["url"]} ({r.get("resourceType") or "unknown"})' for r in requests)


def _format_cookies(data: Any) -> str:
	cookies = _items(data, 'cookies')
	if not cookies:
		return 'No cookies'
	return '\n'.join(f'{c["name"]}={c["value"]}' for c in cookies)


def _state_word(key: str, true_word: str, false_word: str) -> Formatter:
	def format_state(data: Any) -> str:
		return true_word if _field(data, key) else false_word

	return format_state


def _format_count(data: Any) -> str:
	return f'{_field(data, "count")} element(s)'


def _format_bounding_box(data: Any) -> str:
	if not data:
		return 'Element not found'
	return f'x:{data["x"]} y:{data["y"]} w:{data["width"]} h:{data["height"]}'


def _format_navigate(data: Any) -> str:
	url = data.get('url') if isinstance(data, dict) else None
	return _ok(f'Navigated to: {url or data}')


def _truthy_field(key: str) -> Formatter:
	def format_field(data: Any) -> str:
		value = data.get(key) if isinstance(data, dict) else None
		return value or data

	return format_field


def _saved(what: str, fallback: str) -> Formatter:
	def format_saved(data: Any) -> str:
		path = data.get('path') if isinstance(data, dict) else None
		return _ok(f'{what} saved: {path}') if path else _ok(fallback)

	return format_saved


def _format_evaluate(data: Any) -> str:
	if data is None:
		return 'undefined'
	if isinstance(data, str):
		return data
	return _to_json(data)


def _format_frames(data: Any) -> str:
	frames = _items(data, 'frames')
	if not frames:
		return 'Only main frame'
	return '\n'.join(f'[{i}] {f.get("name") or "(unnamed)"} - {f["url"]}' for i, f in enumerate(frames))


def _format_pages(data: Any) -> str:
	pages = _items(data, 'pages')
	if not pages:
		return 'No pages open'
	return '\n'.join(f'[{i}] {p.get("title") or "(untitled)"} - {p["url"]}' for i, p in enumerate(pages))


def _confirm(message: str) -> Formatter:
	return lambda data: _ok(message)


FORMATTERS: dict[str, Formatter] = {
	# Debugging
	'console': _format_console,
	'errors': _format_errors,
	'requests': _format_requests,
	# Storage
	'storageGet': _to_json,
	'cookiesGet': _format_cookies,
	# Element inspection
	'textContent': lambda data: _field(data, 'text'),
	'isVisible': _state_word('visible', 'visible', 'not visible'),
	'isEnabled': _state_word('enabled', 'enabled', 'disabled'),
	'isChecked': _state_word('checked', 'checked', 'unchecked'),
	'isHidden': _state_word('hidden', 'hidden', 'visible'),
	'count': _format_count,
	'boundingBox': _format_bounding_box,
	# Navigation
	'navigate': _format_navigate,
	'url': _truthy_field('url'),
	'title': _truthy_field('title'),
	'back': _confirm('Navigated back'),
	'forward': _confirm('Navigated forward'),
	'reload': _confirm('Page reloaded'),
	# Screenshots
	'snapshot': _truthy_field('snapshot'),
	'screenshot': _saved('Screenshot', 'Screenshot taken'),
	'pdf': _saved('PDF', 'PDF exported'),
	# JavaScript
	'evaluate': _format_evaluate,
	# Frames & tabs
	'frames': _format_frames,
	'pages': _format_pages,
	# Actions
	'click': _confirm('Clicked'),
	'fill': _confirm('Filled'),
	'type': _confirm('Typed'),
	'press': _confirm('Key pressed'),
	'check': _confirm('Checked'),
	'uncheck': _confirm('Unchecked'),
	'clear': _confirm('Cleared'),
	'hover': _confirm('Hovering'),
	'focus': _confirm('Focused'),
	'close': _confirm('Browser closed'),
	'launch': _confirm('Browser launched'),
	# Waiting
	'waitForSelector': _confirm('Element found'),
	'waitForURL': _confirm('URL matched'),
	'waitForLoadState': _confirm('Load state reached'),
	'waitForTimeout': _confirm('Wait completed'),
}


def format_response(action: str, data: Any) -> str:
	"""Render successful response data for the given daemon action."""
	formatter = FORMATTERS.get(action, format_default)
	try:
		output = formatter(data)
	except Exception as e:
		logger.debug(f'Formatter for {action} failed ({type(e).__name__}: {e}), using default')
		return format_default(data)
	if not isinstance(output, str):
		return format_default(output)
	return output
