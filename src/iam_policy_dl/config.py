"""Run configuration for iam-policy-dl.

Settings come from the command line first and the environment second:

* ``AWS_CMD`` — name or path of the AWS CLI binary (default ``aws``).
* ``AWS_PROFILE`` — named profile; read only so that it can be shown in
  diagnostics, the AWS CLI honours it on its own.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_AWS_CMD: str = "aws"
DEFAULT_OUTPUT_DIR: str = "policies"


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable settings for a single run."""

    aws_cmd: str = DEFAULT_AWS_CMD
    profile: str | None = None
    """Explicit ``--profile``; ``None`` leaves profile choice to the CLI."""

    env_profile: str | None = None
    """``AWS_PROFILE`` as seen at startup (display only)."""

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    policy_name: str | None = None
    """Policy to download; ``None`` means prompt interactively."""

    @property
    def active_profile(self) -> str | None:
        return self.profile or self.env_profile

    @classmethod
    def from_env(
        cls,
        *,
        policy_name: str | None = None,
        output_dir: str | None = None,
        profile: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Build settings from parsed arguments and *environ*.

        Empty strings are treated as unset, matching ``${VAR:-default}``
        semantics.
        """
        env = os.environ if environ is None else environ
        return cls(
            aws_cmd=env.get("AWS_CMD") or DEFAULT_AWS_CMD,
            profile=profile or None,
            env_profile=env.get("AWS_PROFILE") or None,
            output_dir=Path(output_dir or DEFAULT_OUTPUT_DIR),
            policy_name=policy_name or None,
        )
