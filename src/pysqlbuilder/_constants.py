"""Scanner and resource limit constants for SQL rendering."""

DEFAULT_MAX_RECURSION_DEPTH = 100
"""Maximum condition/statement nesting depth (CWE-674 prevention)."""

BARE_MARKER = "?"
"""Positional placeholder marker accepted in raw SQL text."""

QUOTE_CHARS = ("'", '"', "`")
"""Characters that open a quoted literal or identifier."""

ESCAPE_CHAR = "\\"
"""Escapes the active quote character inside a literal."""

LIKE_ESCAPE_CHAR = "!"
"""Escape character used for LIKE patterns built from filter expressions."""
