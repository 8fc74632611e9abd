# src/fcrepo_ref_server/api/versions.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from fcrepo_ref_server.api.errors import storage_errors
from fcrepo_ref_server.api.representations import (
    content_response,
    created,
    description_response,
    resource_headers,
    version_url,
)
from fcrepo_ref_server.config import settings
from fcrepo_ref_server.infra import paths
from fcrepo_ref_server.infra.providers import get_storage
from fcrepo_ref_server.models import VersionListOut, VersionOut
from fcrepo_ref_server.ports.storage import RepositoryStore

router = APIRouter(prefix=settings.REST_PREFIX, tags=["versions"])

# Most specific first: /fcr:versions/{name}/fcr:metadata, /fcr:versions/{name}, /fcr:versions

@router.get("/{path:path}/fcr:versions/{name}/fcr:metadata")
def get_version_metadata(
    path: str, name: str, request: Request, storage: RepositoryStore = Depends(get_storage)
) -> Response:
    with storage_errors("Get version"):
        path = paths.normalize(path)
        view = storage.get(path).view_at(storage.get_version(path, name))
    return description_response(request, view, subject=version_url(request, path, name))

@router.head("/{path:path}/fcr:versions/{name}")
def head_version(path: str, name: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Get version"):
        path = paths.normalize(path)
        view = storage.get(path).view_at(storage.get_version(path, name))
    return Response(status_code=status.HTTP_200_OK, headers=resource_headers(view))

@router.get("/{path:path}/fcr:versions/{name}")
def get_version(path: str, name: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Get version"):
        path = paths.normalize(path)
        view = storage.get(path).view_at(storage.get_version(path, name))
    if view.is_datastream:
        return content_response(view)
    return description_response(request, view, subject=version_url(request, path, name))

@router.patch("/{path:path}/fcr:versions/{name}", status_code=status.HTTP_204_NO_CONTENT)
def revert_version(path: str, name: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Revert"):
        storage.revert_to_version(paths.normalize(path), name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{path:path}/fcr:versions/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_version(path: str, name: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Delete version"):
        storage.delete_version(paths.normalize(path), name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{path:path}/fcr:versions", response_model=VersionListOut)
def list_versions(path: str, storage: RepositoryStore = Depends(get_storage)) -> VersionListOut:
    with storage_errors("List versions"):
        versions = storage.list_versions(paths.normalize(path))
    items = [VersionOut(name=v.name, created_at=v.created_at) for v in versions]
    return VersionListOut(count=len(items), items=items)

@router.post("/{path:path}/fcr:versions", status_code=status.HTTP_201_CREATED)
def create_version(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    name = request.headers.get("slug")
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Slug header naming the version is required")
    with storage_errors("Create version"):
        path = paths.normalize(path)
        storage.create_version(path, name)
    return created(version_url(request, path, name))
