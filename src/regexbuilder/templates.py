"""Templates written by `regexbuilder init`."""

DEFAULT_CONFIG_YAML = """\
# RegexBuilder configuration.
# Strings must be single-quoted so that regex backslashes are kept verbatim.

# Quiet period, in milliseconds, before a changed pattern or text is matched.
debounce_ms: 300

# Time limit, in seconds, for a single match call. Leave empty for no limit.
match_timeout:

# Flags applied to new sessions: g (global), i (ignore case), m (multiline),
# s (dot all), u (unicode), y (sticky).
default_flags: 'g'

# Pattern loaded into new sessions and matched by 'regexbuilder test' when no
# pattern argument is given.
default_pattern: ''

# Key the user pattern library is stored under.
storage_key: 'regex-builder-user-patterns'

# JSON file holding user patterns. Defaults to storage.json in the data directory.
# storage_file: '/path/to/storage.json'

# YAML file replacing the built-in pattern set.
# builtin_patterns_file: '/path/to/patterns.yaml'
"""
