"""Wire protocol for CLI↔daemon communication.

Each request is one flat JSON object terminated by a newline. The daemon
answers with one JSON object carrying a success flag, optional data and an
optional error string.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any


def make_request_id(prefix: str = 'cmd') -> str:
	"""Time-based request id, e.g. ``cmd-1718000000000``."""
	return f'{prefix}-{int(time.time() * 1000)}'


@dataclass
class Request:
	"""Command request from CLI to daemon."""

	id: str
	action: str
	fields: dict[str, Any] = field(default_factory=dict)

	def to_dict(self) -> dict[str, Any]:
		d: dict[str, Any] = {'id': self.id, 'action': self.action}
		# Named fields never shadow id/action
		d.update((k, v) for k, v in self.fields.items() if k not in d)
		return d

	def to_json(self) -> str:
		return json.dumps(self.to_dict())

	def encode(self) -> bytes:
		return (self.to_json() + '\n').encode()


@dataclass
class Response:
	"""Response from daemon to CLI.

	``raw`` keeps the decoded object exactly as received so it can be echoed
	back in JSON output mode.
	"""

	success: bool
	data: Any = None
	error: str | None = None
	raw: dict[str, Any] = field(default_factory=dict)

	@property
	def is_raw_text(self) -> bool:
		"""True for the ``{"result": text}`` wrapper built from unparseable bytes."""
		return 'success' not in self.raw and 'result' in self.raw

	@classmethod
	def from_dict(cls, d: dict[str, Any]) -> 'Response':
		error = d.get('error')
		return cls(
			success=bool(d.get('success', False)),
			data=d.get('data'),
			error=None if error is None else str(error),
			raw=d,
		)

	def to_json(self, indent: int | None = 2) -> str:
		return json.dumps(self.raw, indent=indent, ensure_ascii=False)
