# src/fcrepo_ref_server/api/resources.py
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from rdflib import URIRef

from fcrepo_ref_server.api.errors import storage_errors
from fcrepo_ref_server.api.representations import (
    content_response,
    created,
    description_response,
    destination_path,
    read_content,
    read_sparql_update,
    resource_headers,
    resource_url,
    wants_datastream,
)
from fcrepo_ref_server.config import settings
from fcrepo_ref_server.infra import paths
from fcrepo_ref_server.infra.providers import get_storage
from fcrepo_ref_server.models import ResourceKind
from fcrepo_ref_server.ports.storage import RepositoryStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.REST_PREFIX, tags=["resources"])

# ----- Suffix routes first (avoid /fcr:* being captured by /{path}) -----

@router.get("/{path:path}/fcr:metadata")
def get_metadata(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Get metadata"):
        record = storage.get(paths.normalize(path))
    return description_response(request, record)

@router.patch("/{path:path}/fcr:metadata", status_code=status.HTTP_204_NO_CONTENT)
async def patch_metadata(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    sparql = await read_sparql_update(request)
    with storage_errors("Update"):
        path = paths.normalize(path)
        storage.update_properties(path, URIRef(resource_url(request, path)), sparql)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.put("/{path:path}/fcr:content", status_code=status.HTTP_204_NO_CONTENT)
async def replace_content(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    content = await read_content(request)
    with storage_errors("Update content"):
        storage.update_content(paths.normalize(path), content)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{path:path}/fcr:tombstone", status_code=status.HTTP_204_NO_CONTENT)
def remove_tombstone(path: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Remove tombstone"):
        storage.remove_tombstone(paths.normalize(path))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ----- Resource routes -----

@router.head("/{path:path}")
def head_resource(path: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Head"):
        record = storage.get(paths.normalize(path))
    return Response(status_code=status.HTTP_200_OK, headers=resource_headers(record))

@router.get("/{path:path}")
def get_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Get"):
        path = paths.normalize(path)
        record = storage.get(path)
        if record.is_datastream:
            return content_response(record)
        children = storage.children(path)
    return description_response(request, record, children=children)

@router.put("/{path:path}", status_code=status.HTTP_201_CREATED)
async def create_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Create"):
        path = paths.normalize(path)
        if wants_datastream(request):
            content = await read_content(request)
            record = storage.create(path, ResourceKind.DATASTREAM, content)
        else:
            record = storage.create(path, ResourceKind.OBJECT)
    return created(resource_url(request, record.path))

@router.post("/{path:path}", status_code=status.HTTP_201_CREATED)
async def mint_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    slug = request.headers.get("slug")
    with storage_errors("Create"):
        if wants_datastream(request):
            content = await read_content(request)
            record = storage.mint(path, ResourceKind.DATASTREAM, slug=slug, content=content)
        else:
            record = storage.mint(path, ResourceKind.OBJECT, slug=slug)
    return created(resource_url(request, record.path))

@router.patch("/{path:path}", status_code=status.HTTP_204_NO_CONTENT)
async def patch_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    sparql = await read_sparql_update(request)
    with storage_errors("Update"):
        path = paths.normalize(path)
        storage.update_properties(path, URIRef(resource_url(request, path)), sparql)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{path:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(path: str, storage: RepositoryStore = Depends(get_storage)) -> Response:
    with storage_errors("Delete"):
        storage.delete(paths.normalize(path))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.api_route("/{path:path}", methods=["MOVE"], status_code=status.HTTP_201_CREATED)
def move_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    destination = destination_path(request)
    with storage_errors("Move"):
        record = storage.move(paths.normalize(path), destination)
    return created(resource_url(request, record.path))

@router.api_route("/{path:path}", methods=["COPY"], status_code=status.HTTP_201_CREATED)
def copy_resource(path: str, request: Request, storage: RepositoryStore = Depends(get_storage)) -> Response:
    destination = destination_path(request)
    with storage_errors("Copy"):
        record = storage.copy(paths.normalize(path), destination)
    return created(resource_url(request, record.path))
