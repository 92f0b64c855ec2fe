"""SQL template rendering with Jinja2.

Placeholders use double curly braces, ``{{ table }}``, and are the only live
syntax: block and comment delimiters are moved to NUL-prefixed sequences, so
``{%`` and ``{#`` in SQL comments or string literals stay plain text. Output
is not escaped and a trailing newline is kept, so text without placeholders
renders unchanged. Names missing from the view render as empty strings.
"""

from typing import Any, Mapping, Optional

from jinja2 import Environment, TemplateError

from sqlquest.exceptions import ConfigurationError

_SQL_ENV: Optional[Environment] = None


def _get_sql_env() -> Environment:
    """Return the shared Jinja2 Environment for SQL templates."""
    global _SQL_ENV
    if _SQL_ENV is None:
        _SQL_ENV = Environment(
            block_start_string="\x00{%",
            block_end_string="%}\x00",
            comment_start_string="\x00{#",
            comment_end_string="#}\x00",
            line_statement_prefix=None,
            line_comment_prefix=None,
            autoescape=False,
            keep_trailing_newline=True,
        )
    return _SQL_ENV


def render(template: str, view: Optional[Mapping[str, Any]] = None) -> str:
    """Render ``template`` with ``view``; a missing view leaves it untouched.

    Raises:
        ConfigurationError: If the template cannot be parsed or rendered.
    """
    if view is None:
        return template
    try:
        return _get_sql_env().from_string(template).render(**view)
    except TemplateError as e:
        snippet = template[:500] + "..." if len(template) > 500 else template
        raise ConfigurationError(
            f"SQL template error: {e}. View keys: {sorted(view.keys())}. Template preview:\n{snippet}"
        ) from e
