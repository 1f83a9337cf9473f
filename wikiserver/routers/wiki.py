from fastapi import APIRouter, Depends

from wikiserver.deps import form_fields, get_backup, get_mutations, get_views
from wikiserver.services import BackupOrchestrator, MutationOrchestrator, ViewOrchestrator

router = APIRouter(tags=["wiki"])


@router.get("/")
async def index(views: ViewOrchestrator = Depends(get_views)):
    return await views.render_home()


@router.get("/wiki/{page}")
async def page_rendering(page: str, views: ViewOrchestrator = Depends(get_views)):
    return await views.render_page(page)


@router.post("/save")
async def page_update(
    form: dict[str, str] = Depends(form_fields),
    mutations: MutationOrchestrator = Depends(get_mutations),
):
    return await mutations.update_page(form)


@router.post("/create")
def page_create(
    form: dict[str, str] = Depends(form_fields),
    mutations: MutationOrchestrator = Depends(get_mutations),
):
    return mutations.create_page(form)


@router.post("/delete")
async def page_deletion(
    form: dict[str, str] = Depends(form_fields),
    mutations: MutationOrchestrator = Depends(get_mutations),
):
    return await mutations.delete_page(form)


@router.get("/backup")
async def backup(backup: BackupOrchestrator = Depends(get_backup)):
    return await backup.backup()
