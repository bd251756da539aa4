"""iam-policy-dl — interactive AWS IAM policy document downloader.

Drives the AWS CLI through a small layered architecture: ``cli`` for
prompts and rendering, ``core`` for the workflow, ``infra`` for the
process and filesystem boundary.
"""

from iam_policy_dl.version import __version__

__all__: list[str] = ["__version__"]
