"""Infrastructure: scoped ownership of the output file.

:class:`PendingOutput` is the :class:`~iam_policy_dl.core.protocols.OutputGuard`
used by the download pipeline.  Until :meth:`PendingOutput.commit` is
called, leaving the ``with`` block by any route — an exception,
``KeyboardInterrupt``, or the ``SIGTERM`` handler installed by
:func:`raise_on_sigterm` — deletes the file at the guarded path.

Rules
-----
* No ``print()`` — removal is reported through an optional callback.
* Removal never masks the exception that caused it.
"""

from __future__ import annotations

import signal
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType, TracebackType


class PendingOutput:
    """Context manager that removes an uncommitted output file on exit.

    Usage::

        with PendingOutput(path) as pending:
            write(path)
            validate(path)
            pending.commit()
    """

    def __init__(
        self,
        path: Path,
        *,
        on_cleanup: Callable[[Path], None] | None = None,
    ) -> None:
        self.path: Path = path
        self._on_cleanup = on_cleanup
        self._committed: bool = False

    @property
    def committed(self) -> bool:
        return self._committed

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> PendingOutput:
        self._committed = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._committed:
            self.discard()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """Keep the file; later exits leave it in place."""
        self._committed = True

    def discard(self) -> None:
        """Remove the file if it exists (idempotent)."""
        if not self.path.is_file():
            return
        if self._on_cleanup is not None:
            self._on_cleanup(self.path)
        self.path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Termination signal
# ---------------------------------------------------------------------------

def _interrupt(signum: int, frame: FrameType | None) -> None:
    raise KeyboardInterrupt(f"terminated by signal {signum}")


@contextmanager
def raise_on_sigterm() -> Iterator[None]:
    """Treat ``SIGTERM`` like Ctrl+C for the duration of the block.

    Unwinding through ``KeyboardInterrupt`` lets every active
    :class:`PendingOutput` clean up before the process exits.
    """
    previous = signal.signal(signal.SIGTERM, _interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)
