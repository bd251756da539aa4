"""Allow ``python -m iam_policy_dl`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m iam_policy_dl`` behaves identically to the
``iam-policy-dl`` console script.
"""

from __future__ import annotations

from iam_policy_dl.cli.app import cli

if __name__ == "__main__":
    cli()
