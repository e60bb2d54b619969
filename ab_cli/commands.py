"""Command table - maps CLI verbs to agent-browser daemon actions.

Each verb is declared as data: the daemon action it sends, the ordered
positional parameters (``'name?'`` marks an optional one), the flags it
understands and a one-line help text. Adding a verb is adding one line.
"""

from pydantic import BaseModel, ConfigDict

# Parameters coerced to numbers when parseable
NUMERIC_PARAMS = frozenset({'width', 'height', 'index', 'ms', 'latitude', 'longitude'})

# Parameters coerced to booleans ("true" -> True, anything else -> False)
BOOLEAN_PARAMS = frozenset({'enabled'})

# Flag token -> (request field, value). Applied only for flags a verb declares.
FLAG_FIELDS: dict[str, tuple[str, object]] = {
	'--full': ('fullPage', True),
	'-f': ('fullPage', True),
	'-i': ('interactive', True),
	'-c': ('compact', True),
	'--clear': ('clear', True),
	'--visible': ('state', 'visible'),
	'--hidden': ('state', 'hidden'),
	'--attached': ('state', 'attached'),
	'--detached': ('state', 'detached'),
}

# Actions that accept a headless=false hint when --headed is given
HEADED_ACTIONS = frozenset({'launch', 'navigate'})


class ParamSpec(BaseModel):
	model_config = ConfigDict(frozen=True)

	name: str
	optional: bool = False

	@classmethod
	def parse(cls, declaration: str) -> 'ParamSpec':
		if declaration.endswith('?'):
			return cls(name=declaration[:-1], optional=True)
		return cls(name=declaration)

	@property
	def signature(self) -> str:
		return f'[{self.name}]' if self.optional else f'<{self.name}>'


class CommandSpec(BaseModel):
	"""Declarative definition of one CLI verb."""

	model_config = ConfigDict(frozen=True, extra='forbid')

	verb: str
	action: str
	params: tuple[ParamSpec, ...] = ()
	flags: tuple[str, ...] = ()
	help: str = ''

	@property
	def signature(self) -> str:
		return ' '.join(p.signature for p in self.params)

	def accepts_flag(self, flag: str) -> bool:
		return flag.split('=', 1)[0] in self.flags


def _cmd(verb: str, action: str, params: list[str], help: str, flags: list[str] | None = None) -> CommandSpec:
	return CommandSpec(
		verb=verb,
		action=action,
		params=tuple(ParamSpec.parse(p) for p in params),
		flags=tuple(flags or ()),
		help=help,
	)


_SPECS = [
	# Navigation & page control
	_cmd('launch', 'launch', [], 'Launch browser', flags=['--headed']),
	_cmd('open', 'navigate', ['url'], 'Navigate to URL'),
	_cmd('goto', 'navigate', ['url'], 'Navigate to URL (alias)'),
	_cmd('navigate', 'navigate', ['url'], 'Navigate to URL (alias)'),
	_cmd('back', 'back', [], 'Go back in history'),
	_cmd('forward', 'forward', [], 'Go forward in history'),
	_cmd('reload', 'reload', [], 'Reload current page'),
	_cmd('url', 'url', [], 'Get current URL'),
	_cmd('title', 'title', [], 'Get page title'),
	_cmd('close', 'close', [], 'Close browser'),
	# Mouse & click interactions
	_cmd('click', 'click', ['selector'], 'Click element'),
	_cmd('dblclick', 'dblclick', ['selector'], 'Double-click element'),
	_cmd('tripleclick', 'tripleclick', ['selector'], 'Triple-click element'),
	_cmd('hover', 'hover', ['selector'], 'Hover over element'),
	_cmd('drag', 'drag', ['source', 'target'], 'Drag source to target'),
	_cmd('scroll', 'scroll', ['selector?', 'direction?'], 'Scroll page/element'),
	_cmd('scrollto', 'scrollto', ['selector'], 'Scroll element into view'),
	# Keyboard & text input
	_cmd('fill', 'fill', ['selector', 'value'], 'Fill input (clears first)'),
	_cmd('type', 'type', ['selector', 'text'], 'Type text (no clear)'),
	_cmd('press', 'press', ['key'], 'Press keyboard key'),
	_cmd('clear', 'clear', ['selector'], 'Clear input field'),
	_cmd('focus', 'focus', ['selector'], 'Focus element'),
	_cmd('blur', 'blur', ['selector'], 'Blur (unfocus) element'),
	# Form controls
	_cmd('check', 'check', ['selector'], 'Check checkbox'),
	_cmd('uncheck', 'uncheck', ['selector'], 'Uncheck checkbox'),
	_cmd('select', 'selectOption', ['selector', 'value'], 'Select dropdown option'),
	_cmd('upload', 'setInputFiles', ['selector', 'file'], 'Upload file to input'),
	# Element inspection
	_cmd('get', 'get', ['what', 'selector?'], 'Get property (text/attr/html)'),
	_cmd('gettext', 'textContent', ['selector'], 'Get element text content'),
	_cmd('getattr', 'getAttribute', ['selector', 'attribute'], 'Get attribute value'),
	_cmd('innerhtml', 'innerHTML', ['selector'], 'Get element inner HTML'),
	_cmd('outerhtml', 'outerHTML', ['selector'], 'Get element outer HTML'),
	_cmd('inputvalue', 'inputValue', ['selector'], 'Get input value'),
	_cmd('isvisible', 'isVisible', ['selector'], 'Check if element visible'),
	_cmd('isenabled', 'isEnabled', ['selector'], 'Check if element enabled'),
	_cmd('ischecked', 'isChecked', ['selector'], 'Check if checkbox checked'),
	_cmd('ishidden', 'isHidden', ['selector'], 'Check if element hidden'),
	_cmd('count', 'count', ['selector'], 'Count matching elements'),
	_cmd('boundingbox', 'boundingBox', ['selector'], 'Get element position/size'),
	# Screenshots & snapshots
	_cmd('screenshot', 'screenshot', ['path?'], 'Take screenshot', flags=['--full', '-f']),
	_cmd('snapshot', 'snapshot', [], 'Get DOM tree with refs', flags=['-i', '-c']),
	_cmd('pdf', 'pdf', ['path'], 'Export page to PDF'),
	# Debugging & console
	_cmd('console', 'console', [], 'Get console log messages', flags=['--clear']),
	_cmd('errors', 'errors', [], 'Get JavaScript errors', flags=['--clear']),
	_cmd('requests', 'requests', [], 'Get network requests', flags=['--clear', '--filter']),
	_cmd('content', 'content', ['selector?'], 'Get page/element HTML'),
	_cmd('eval', 'evaluate', ['script'], 'Execute JavaScript'),
	_cmd('evaluate', 'evaluate', ['script'], 'Execute JavaScript (alias)'),
	# Storage & cookies
	_cmd('storage-get', 'storageGet', ['type', 'key?'], 'Get localStorage/sessionStorage'),
	_cmd('storage-set', 'storageSet', ['type', 'key', 'value'], 'Set storage value'),
	_cmd('storage-remove', 'storageRemove', ['type', 'key'], 'Remove storage key'),
	_cmd('storage-clear', 'storageClear', ['type'], 'Clear storage (local/session)'),
	_cmd('cookies-get', 'cookiesGet', [], 'Get all cookies'),
	_cmd('cookies-set', 'cookiesSet', ['name', 'value', 'options?'], 'Set cookie'),
	_cmd('cookies-clear', 'cookiesClear', [], 'Clear all cookies'),
	# Network interception
	_cmd('route', 'route', ['url', 'response?'], 'Mock network request'),
	_cmd('unroute', 'unroute', ['url?'], 'Remove network mock'),
	_cmd('offline', 'offline', ['enabled'], 'Toggle offline mode (true/false)'),
	_cmd('headers', 'setExtraHTTPHeaders', ['json'], 'Set extra HTTP headers'),
	# Waiting & synchronization
	_cmd(
		'wait',
		'waitForSelector',
		['selector'],
		'Wait for element',
		flags=['--visible', '--hidden', '--attached', '--detached'],
	),
	_cmd('waiturl', 'waitForURL', ['url'], 'Wait for URL pattern'),
	_cmd('waitload', 'waitForLoadState', ['state?'], 'Wait for load state'),
	_cmd('waitfunction', 'waitForFunction', ['script'], 'Wait for JS condition'),
	_cmd('waittimeout', 'waitForTimeout', ['ms'], 'Wait for milliseconds'),
	_cmd('waitresponse', 'waitForResponse', ['url'], 'Wait for network response'),
	_cmd('waitrequest', 'waitForRequest', ['url'], 'Wait for network request'),
	# Frames & iframes
	_cmd('frame', 'frame', ['selector'], 'Switch to iframe by selector'),
	_cmd('frameurl', 'frameByUrl', ['url'], 'Switch to iframe by URL'),
	_cmd('framename', 'frameByName', ['name'], 'Switch to iframe by name'),
	_cmd('mainframe', 'mainFrame', [], 'Switch back to main frame'),
	_cmd('frames', 'frames', [], 'List all frames'),
	# Tabs & pages
	_cmd('tab-new', 'newPage', ['url?'], 'Open new tab'),
	_cmd('tab-list', 'pages', [], 'List all tabs/pages'),
	_cmd('tab-switch', 'switchPage', ['index'], 'Switch to tab by index'),
	_cmd('tab-close', 'closePage', ['index?'], 'Close tab by index'),
	# Recording & tracing
	_cmd('trace-start', 'traceStart', [], 'Start performance trace'),
	_cmd('trace-stop', 'traceStop', ['path'], 'Stop trace and save to file'),
	_cmd('har-start', 'harStart', [], 'Start HAR recording'),
	_cmd('har-stop', 'harStop', ['path'], 'Stop HAR and save to file'),
	_cmd('video-start', 'videoStart', [], 'Start video recording'),
	_cmd('video-stop', 'videoStop', ['path'], 'Stop video and save to file'),
	# Emulation & device
	_cmd('viewport', 'setViewportSize', ['width', 'height'], 'Set viewport size'),
	_cmd('device', 'emulateDevice', ['name'], 'Emulate device (iPhone, Pixel, etc)'),
	_cmd('geolocation', 'setGeolocation', ['latitude', 'longitude'], 'Set geolocation'),
	_cmd('timezone', 'setTimezone', ['timezone'], 'Set timezone (e.g., America/New_York)'),
	_cmd('locale', 'setLocale', ['locale'], 'Set locale (e.g., en-US)'),
	_cmd('useragent', 'setUserAgent', ['ua'], 'Set user agent string'),
	_cmd('colorscheme', 'setColorScheme', ['scheme'], 'Set color scheme (light/dark)'),
	_cmd('colorsscheme', 'setColorScheme', ['scheme'], 'Set color scheme (alias)'),
	# Dialogs & alerts
	_cmd('dialog', 'dialog', ['action', 'text?'], 'Handle dialog (accept/dismiss)'),
	_cmd('dialog-accept', 'dialogAccept', ['text?'], 'Accept dialog with optional text'),
	_cmd('dialog-dismiss', 'dialogDismiss', [], 'Dismiss dialog'),
	# Authentication & permissions
	_cmd('auth-basic', 'setHTTPCredentials', ['username', 'password'], 'Set HTTP basic auth'),
	_cmd('permission', 'grantPermissions', ['permission'], 'Grant browser permission'),
	_cmd('permission-clear', 'clearPermissions', [], 'Clear all permissions'),
	# File download
	_cmd('download-wait', 'waitForDownload', [], 'Wait for download to start'),
	_cmd('download-path', 'setDownloadPath', ['path'], 'Set download directory'),
	# Accessibility
	_cmd('a11y-snapshot', 'accessibilitySnapshot', [], 'Get accessibility tree'),
	_cmd('a11y-tree', 'accessibilityTree', ['selector?'], 'Get accessibility tree for element'),
	# Browser context
	_cmd('context-new', 'newContext', [], 'Create new browser context'),
	_cmd('context-close', 'closeContext', [], 'Close current context'),
	_cmd('context-list', 'contexts', [], 'List all contexts'),
	# Session storage
	_cmd('state-save', 'storageState', ['path'], 'Save browser state to file'),
	_cmd('state-load', 'loadStorageState', ['path'], 'Load browser state from file'),
	# Utility
	_cmd('expose', 'exposeFunction', ['name', 'script'], 'Expose function to page'),
	_cmd('addscript', 'addInitScript', ['script'], 'Add script to run on navigation'),
	_cmd('highlight', 'highlight', ['selector'], 'Highlight element on page'),
]

COMMANDS: dict[str, CommandSpec] = {spec.verb: spec for spec in _SPECS}

# Verbs handled by the CLI itself, without talking to a daemon
LOCAL_COMMANDS: dict[str, str] = {
	'sessions': 'List sessions with a running daemon',
}

CATEGORIES: dict[str, list[str]] = {
	'Navigation': ['launch', 'open', 'back', 'forward', 'reload', 'url', 'title', 'close'],
	'Interaction': ['click', 'dblclick', 'tripleclick', 'hover', 'drag', 'scroll', 'scrollto'],
	'Text Input': ['fill', 'type', 'press', 'clear', 'focus', 'blur'],
	'Forms': ['check', 'uncheck', 'select', 'upload'],
	'Inspection': [
		'get',
		'gettext',
		'getattr',
		'innerhtml',
		'outerhtml',
		'inputvalue',
		'isvisible',
		'isenabled',
		'ischecked',
		'ishidden',
		'count',
		'boundingbox',
	],
	'Screenshots': ['screenshot', 'snapshot', 'pdf'],
	'Debugging': ['console', 'errors', 'requests', 'content', 'eval'],
	'Storage': ['storage-get', 'storage-set', 'storage-remove', 'storage-clear', 'cookies-get', 'cookies-set', 'cookies-clear'],
	'Network': ['route', 'unroute', 'offline', 'headers'],
	'Waiting': ['wait', 'waiturl', 'waitload', 'waitfunction', 'waittimeout', 'waitresponse', 'waitrequest'],
	'Frames': ['frame', 'frameurl', 'framename', 'mainframe', 'frames'],
	'Tabs': ['tab-new', 'tab-list', 'tab-switch', 'tab-close'],
	'Recording': ['trace-start', 'trace-stop', 'har-start', 'har-stop', 'video-start', 'video-stop'],
	'Emulation': ['viewport', 'device', 'geolocation', 'timezone', 'locale', 'useragent', 'colorscheme'],
	'Dialogs': ['dialog', 'dialog-accept', 'dialog-dismiss'],
	'Auth': ['auth-basic', 'permission', 'permission-clear'],
	'Downloads': ['download-wait', 'download-path'],
	'Accessibility': ['a11y-snapshot', 'a11y-tree'],
	'Context': ['context-new', 'context-close', 'context-list'],
	'State': ['state-save', 'state-load'],
	'Utility': ['expose', 'addscript', 'highlight'],
}

COMMON_COMMANDS = ['open', 'click', 'fill', 'snapshot', 'screenshot', 'console', 'errors', 'eval', 'close']


def get_command(verb: str | None) -> CommandSpec | None:
	if verb is None:
		return None
	return COMMANDS.get(verb)
