"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Everything rendered here goes to **stderr**; stdout is left to the
interactive prompts.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any

from iam_policy_dl.exceptions import EnvironmentError

LOG_TIME_FORMAT: str = "[%Y-%m-%d %H:%M:%S]"


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def _timestamped(message: str) -> str:
	return f"{datetime.now().strftime(LOG_TIME_FORMAT)} {message}"


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)

	def log(self, message: str) -> None:
		"""Write one timestamped diagnostic line.

		*message* is plain text: Rich markup in it is not interpreted,
		so policy names containing brackets render verbatim.  The line
		is never wrapped or padded, even when stderr is redirected.
		"""
		line = _timestamped(message)
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(line, file=sys.stderr)
			return
		rich_console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


console = _ConsoleProxy()
