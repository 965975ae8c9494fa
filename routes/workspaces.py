"""
Code editor workspace routes for SiteCraft
"""
from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List
import logging

from models.workspace import (
    FileContentUpdate,
    FileCreateRequest,
    FileNode,
    FileRenameRequest,
    LoadCodeRequest,
    WorkspaceResponse,
)
from routes.dependencies import get_workspace_store
from services.exceptions import NotFoundError, ValidationError
from services.workspace_service import Workspace, WorkspaceStore

router = APIRouter(prefix="/api/workspaces", tags=["Workspaces"])
logger = logging.getLogger(__name__)


def load_workspace(workspace_id: str, store: WorkspaceStore) -> Workspace:
    try:
        return store.get(workspace_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def to_http_error(e: ValidationError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    seed: bool = Query(default=True, description="Start from the starter project"),
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = store.create(seed=seed)
    return WorkspaceResponse(id=workspace.id, files=workspace.list_tree())


@router.get("/{workspace_id}/files", response_model=List[FileNode])
async def list_files(workspace_id: str, store: WorkspaceStore = Depends(get_workspace_store)):
    return load_workspace(workspace_id, store).list_tree()


@router.get("/{workspace_id}/file", response_model=FileNode)
async def get_file(
    workspace_id: str,
    path: str = Query(..., description="Absolute path, e.g. /src/index.html"),
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = load_workspace(workspace_id, store)
    try:
        return workspace.get_file_by_path(path)
    except ValidationError as e:
        raise to_http_error(e)


@router.post("/{workspace_id}/files", response_model=FileNode, status_code=status.HTTP_201_CREATED)
async def create_file(
    workspace_id: str,
    request: FileCreateRequest,
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = load_workspace(workspace_id, store)
    try:
        return workspace.create_file(request.parent_path, request.type, request.name)
    except ValidationError as e:
        raise to_http_error(e)


@router.put("/{workspace_id}/files/content", response_model=FileNode)
async def update_file_content(
    workspace_id: str,
    request: FileContentUpdate,
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = load_workspace(workspace_id, store)
    try:
        return workspace.update_file_content(request.path, request.content)
    except ValidationError as e:
        raise to_http_error(e)


@router.post("/{workspace_id}/files/rename", response_model=FileNode)
async def rename_file(
    workspace_id: str,
    request: FileRenameRequest,
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = load_workspace(workspace_id, store)
    try:
        return workspace.rename_file(request.path, request.new_name)
    except ValidationError as e:
        raise to_http_error(e)


@router.delete("/{workspace_id}/files", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    workspace_id: str,
    path: str = Query(...),
    store: WorkspaceStore = Depends(get_workspace_store),
):
    workspace = load_workspace(workspace_id, store)
    try:
        workspace.delete_file(path)
    except ValidationError as e:
        raise to_http_error(e)


@router.post("/{workspace_id}/load", response_model=List[str])
async def load_generated_code(
    workspace_id: str,
    request: LoadCodeRequest,
    store: WorkspaceStore = Depends(get_workspace_store),
):
    """Write generated code into the workspace and return the paths written."""
    workspace = load_workspace(workspace_id, store)
    try:
        return workspace.load_generated_code(request.code)
    except ValidationError as e:
        raise to_http_error(e)
