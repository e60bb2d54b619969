"""Help text generated from the command table."""

from rich.text import Text

from ab_cli.commands import CATEGORIES, COMMANDS, COMMON_COMMANDS, LOCAL_COMMANDS

EXAMPLES = [
	('ab open https://example.com --headed', ''),
	('ab snapshot -i', 'Get interactive refs'),
	('ab click @e2', 'Click by ref'),
	('ab fill @e3 "search text"', ''),
	('ab console', 'View console logs'),
	('ab errors', 'View JS errors'),
	('ab eval "document.title"', ''),
	('ab screenshot ./test.png --full', ''),
	('ab close', ''),
]


def _command_line(verb: str, verb_width: int, param_width: int) -> str:
	spec = COMMANDS[verb]
	return f'  {verb.ljust(verb_width)} {spec.signature.ljust(param_width)} {spec.help}\n'


def generate_help(verbose: bool = False) -> Text:
	help_text = Text()
	help_text.append('ab-cli', style='cyan')
	help_text.append(' - Browser automation CLI for the agent-browser daemon\n')
	help_text.append('Usage: ab <command> [args] [--flags]\n\n')
	help_text.append('Global flags: --headed (visible browser), --json (JSON output), -v (verbose help)\n')
	help_text.append('Session: set AGENT_BROWSER_SESSION to target another daemon\n\n')

	if verbose:
		for category, verbs in CATEGORIES.items():
			help_text.append(f'{category}:\n', style='yellow')
			for verb in verbs:
				if verb in COMMANDS:
					help_text.append(_command_line(verb, 16, 24))
			help_text.append('\n')
		help_text.append('CLI:\n', style='yellow')
		for verb, description in LOCAL_COMMANDS.items():
			help_text.append(f'  {verb.ljust(16)} {"".ljust(24)} {description}\n')
	else:
		help_text.append('Categories: ')
		help_text.append(', '.join(CATEGORIES) + '\n\n')
		help_text.append('Common commands:\n')
		for verb in COMMON_COMMANDS:
			help_text.append(_command_line(verb, 14, 20))
		help_text.append('\nUse --help -v for full command list\n')

	help_text.append('\nExamples:\n')
	for example, comment in EXAMPLES:
		line = f'  {example.ljust(36)} # {comment}' if comment else f'  {example}'
		help_text.append(line + '\n')

	return help_text
