"""Infrastructure layer — external system integration.

This layer wraps all interaction with the AWS CLI, the operating
system and the output file.  Every raw subprocess or OS exception must
be caught here and re-raised as a
:class:`~iam_policy_dl.exceptions.PolicyDlError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from iam_policy_dl.infra.awscli_provider import AwsCliProvider
from iam_policy_dl.infra.dependency_check import (
    ToolStatus,
    detect_aws_cli,
    detect_jmespath,
    require_aws_cli,
    require_jmespath,
)
from iam_policy_dl.infra.output_file import PendingOutput, raise_on_sigterm

__all__: list[str] = [
    "AwsCliProvider",
    "PendingOutput",
    "ToolStatus",
    "detect_aws_cli",
    "detect_jmespath",
    "raise_on_sigterm",
    "require_aws_cli",
    "require_jmespath",
]
