"""Core / service layer — the download workflow and its data types.

Rules
-----
* No ``print()`` calls.
* No subprocess calls; the only filesystem access is reading back a
  guarded download.
* No imports from ``cli`` or ``infra``.
"""

from iam_policy_dl.core.download_service import DownloadService
from iam_policy_dl.core.identity_service import IdentityService
from iam_policy_dl.core.models import DownloadResult, Identity, PolicyCandidates, PolicyRef
from iam_policy_dl.core.policy_service import PolicyService
from iam_policy_dl.core.protocols import IamProvider, OutputGuard

__all__: list[str] = [
    "DownloadResult",
    "DownloadService",
    "IamProvider",
    "Identity",
    "IdentityService",
    "OutputGuard",
    "PolicyCandidates",
    "PolicyRef",
    "PolicyService",
]
