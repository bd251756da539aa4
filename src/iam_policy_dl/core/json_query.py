"""JSON parsing and JMESPath helpers shared by the core services.

JMESPath is the query language the AWS CLI uses for ``--query``.  The
same expressions are evaluated locally with the ``jmespath`` package,
which is imported lazily so that ``--help`` and ``--version`` keep
working without it.
"""

from __future__ import annotations

import json
from typing import Any

from iam_policy_dl.exceptions import JsonToolMissingError


def load_jmespath() -> Any:
    """Import ``jmespath`` or raise :class:`JsonToolMissingError`."""
    try:
        import jmespath
    except ModuleNotFoundError as exc:
        raise JsonToolMissingError(
            "jmespath is not installed.",
            hint="Install with: pip install jmespath",
        ) from exc
    return jmespath


def search(expression: str, data: Any) -> Any:
    """Evaluate a JMESPath *expression* against already-parsed *data*."""
    return load_jmespath().search(expression, data)


def compile_expression(expression: str) -> Any:
    """Compile *expression*, raising ``ValueError`` when it is malformed."""
    jmespath = load_jmespath()
    try:
        return jmespath.compile(expression)
    except jmespath.exceptions.JMESPathError as exc:
        raise ValueError(f"Invalid JMESPath expression {expression!r}: {exc}") from exc


def raw_string_literal(value: str) -> str:
    """Quote *value* as a JMESPath raw string literal (``'...'``).

    The ``jmespath`` lexer only unescapes ``\\'`` inside raw strings, so
    that is the only sequence escaped here.
    """
    return "'" + value.replace("'", "\\'") + "'"


def parse_json(text: str) -> Any:
    """Parse *text* as JSON, raising ``ValueError`` when it is malformed."""
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValueError(f"not valid JSON: {exc}") from exc


def clean_text_value(text: str | None) -> str | None:
    """Normalise a scalar from ``--output text``.

    Surrounding whitespace is trimmed; empty output and the literal
    ``None`` (how the AWS CLI renders null) both become ``None``.
    """
    if text is None:
        return None
    stripped = text.strip()
    if not stripped or stripped == "None":
        return None
    return stripped
