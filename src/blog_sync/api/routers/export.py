"""Archive export endpoint."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from blog_sync.api.dependencies import GitPagesServiceDep
from blog_sync.api.routers.git_pages import to_response

router = APIRouter(prefix="/export")


@router.post("/archive")
async def export_archive(service: GitPagesServiceDep) -> JSONResponse:
    """Export every post into a zip archive and return its file name."""
    return to_response(await service.export_all_as_archive())
