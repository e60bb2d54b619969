"""Tests for CLI argument parsing, including the global --headed flag."""

from ab_cli.builder import parse_args


def test_headed_flag_before_verb():
	"""--headed before the verb is still a global flag, not the verb."""
	parsed = parse_args(['--headed', 'open', 'http://example.com'])
	assert parsed.headed is True
	assert parsed.action == 'open'
	assert parsed.args == ('http://example.com',)


def test_headed_flag_after_positionals():
	"""Test that --headed after positionals is still a global flag."""
	parsed = parse_args(['open', 'http://example.com', '--headed'])
	assert parsed.headed is True
	assert parsed.args == ('http://example.com',)
	assert parsed.flags == ()


def test_headed_flag_default_is_false():
	"""Test that all global flags default to False."""
	parsed = parse_args(['open', 'http://example.com'])
	assert parsed.headed is False
	assert parsed.json_output is False
	assert parsed.verbose is False


def test_json_and_verbose_flags():
	"""Test that --json and -v/--verbose are global flags, not verb flags."""
	parsed = parse_args(['title', '--json', '-v'])
	assert parsed.json_output is True
	assert parsed.verbose is True
	assert parsed.flags == ()

	parsed = parse_args(['title', '--verbose'])
	assert parsed.verbose is True


def test_verb_flags_are_kept_in_order():
	"""Test that verb flags are collected in command-line order."""
	parsed = parse_args(['wait', '#spinner', '--visible', '--hidden'])
	assert parsed.action == 'wait'
	assert parsed.args == ('#spinner',)
	assert parsed.flags == ('--visible', '--hidden')


def test_no_arguments_shows_help():
	"""Test that an empty command line asks for help."""
	parsed = parse_args([])
	assert parsed.action is None
	assert parsed.help is True


def test_help_tokens():
	"""Test every spelling that asks for help."""
	for argv in (['help'], ['-h'], ['--help'], ['--help', '-v']):
		assert parse_args(argv).help is True, argv
	assert parse_args(['--help', '-v']).verbose is True


def test_help_flag_after_verb_is_not_help():
	"""Only a leading -h/--help asks for help; after a verb it is a verb flag."""
	parsed = parse_args(['open', '-h'])
	assert parsed.help is False
	assert parsed.flags == ('-h',)


def test_lone_dash_is_positional():
	"""Test that a single '-' is a positional argument."""
	parsed = parse_args(['fill', '#input', '-'])
	assert parsed.args == ('#input', '-')


def test_negative_numbers_are_positionals():
	"""Test that negative numbers are positionals, not flags."""
	parsed = parse_args(['geolocation', '-33.86', '151.2'])
	assert parsed.args == ('-33.86', '151.2')
	assert parsed.flags == ()
