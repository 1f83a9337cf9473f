from fastapi import Request

from wikiserver.services import BackupOrchestrator, MutationOrchestrator, ViewOrchestrator


async def form_fields(request: Request) -> dict[str, str]:
    """Decode a form-encoded body into a plain string mapping."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def get_views(request: Request) -> ViewOrchestrator:
    return request.app.state.views


def get_mutations(request: Request) -> MutationOrchestrator:
    return request.app.state.mutations


def get_backup(request: Request) -> BackupOrchestrator:
    return request.app.state.backup
