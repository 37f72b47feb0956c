"""Git pages API endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, SecretStr

from blog_sync.api.dependencies import GitPagesServiceDep
from blog_sync.core.models.outcome import Outcome, OutcomeKind
from blog_sync.core.models.repository import GitCredentials

router = APIRouter(prefix="/git-pages")

STATUS_BY_KIND = {
    OutcomeKind.OK: status.HTTP_200_OK,
    OutcomeKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.BUSY: status.HTTP_409_CONFLICT,
    OutcomeKind.REPAIR: status.HTTP_409_CONFLICT,
    OutcomeKind.RETRY: status.HTTP_503_SERVICE_UNAVAILABLE,
    OutcomeKind.OPERATOR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# --- Request models ---

class NewRepositoryRequest(BaseModel):
    """Request to configure the git repository."""

    url: str = Field(..., max_length=2000)
    user: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)


class PushRequest(BaseModel):
    """One-shot credential for a push. Never stored."""

    repo_credential: SecretStr
    username: str = "git"


def to_response(outcome: Outcome) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND[outcome.kind],
        content=outcome.model_dump(mode="json"),
    )


# --- Endpoints ---

@router.get("")
async def show(service: GitPagesServiceDep) -> JSONResponse:
    """Show the configured repository and its state."""
    return to_response(await service.show())


@router.post("")
async def new_repository(request: NewRepositoryRequest, service: GitPagesServiceDep) -> JSONResponse:
    """Configure the repository and create its working copy."""
    return to_response(await service.create(request.url, request.user, request.email))


@router.delete("")
async def remove_repository(service: GitPagesServiceDep) -> JSONResponse:
    """Remove the working copy and its configuration."""
    return to_response(await service.remove())


@router.get("/branches")
async def list_branches(service: GitPagesServiceDep) -> JSONResponse:
    """List branches on the remote."""
    return to_response(await service.list_branches())


@router.put("/branch/{name:path}")
async def set_branch(name: str, service: GitPagesServiceDep) -> JSONResponse:
    """Select the branch posts are published to."""
    return to_response(await service.select_branch(name))


@router.post("/push")
async def push(request: PushRequest, service: GitPagesServiceDep) -> JSONResponse:
    """Export changed posts, commit and push them."""
    credentials = GitCredentials(username=request.username, token=request.repo_credential)
    return to_response(await service.push(credentials))
