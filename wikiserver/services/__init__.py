from wikiserver.services.backup import BackupOrchestrator
from wikiserver.services.mutations import MutationOrchestrator
from wikiserver.services.views import ViewOrchestrator

__all__ = [
    "BackupOrchestrator",
    "MutationOrchestrator",
    "ViewOrchestrator",
]
