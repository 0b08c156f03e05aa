"""Services for hunkwise.

Services encapsulate business logic and orchestrate domain models.
They receive the repository session via constructor injection.
"""

from hunkwise.services.diff_service import DiffService
from hunkwise.services.repository_session import RepositorySession
from hunkwise.services.staging_service import StagingService

__all__ = [
    "DiffService",
    "RepositorySession",
    "StagingService",
]
