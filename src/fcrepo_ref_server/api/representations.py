"""Helpers shared by the resource and version routers."""
from __future__ import annotations

import re
from typing import Dict, Iterable, Optional
from urllib.parse import quote, unquote

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from rdflib import URIRef

from fcrepo_ref_server.config import settings
from fcrepo_ref_server.infra import paths
from fcrepo_ref_server.infra.rdf import LDP, SPARQL_UPDATE_MEDIA_TYPE, TURTLE_MEDIA_TYPE, describe
from fcrepo_ref_server.models import ContentRecord, ResourceKind, ResourceRecord

EXTERNAL_BODY_MEDIA_TYPE = "message/external-body"
_EXTERNAL_URL_RE = re.compile(r'(?:^|;)\s*url\s*=\s*(?:"([^"]+)"|([^;\s]+))', re.IGNORECASE)


def rest_base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/") + settings.REST_PREFIX + "/"


def resource_url(request: Request, path: str) -> str:
    return rest_base_url(request) + quote(path, safe="/:")


def version_url(request: Request, path: str, name: str) -> str:
    return f"{resource_url(request, path)}/fcr:versions/{quote(name, safe=':')}"


def created(location: str) -> Response:
    return Response(
        content=location,
        status_code=status.HTTP_201_CREATED,
        media_type="text/plain",
        headers={"Location": location},
    )


def type_link(kind: ResourceKind) -> str:
    ldp_type = LDP.NonRDFSource if kind == ResourceKind.DATASTREAM else LDP.BasicContainer
    return f'<{ldp_type}>;rel="type"'


def resource_headers(record: ResourceRecord) -> Dict[str, str]:
    if record.is_datastream and record.content is not None:
        content_type = record.content.content_type
    else:
        content_type = TURTLE_MEDIA_TYPE
    return {
        "Link": type_link(record.kind),
        "Content-Type": content_type,
        "Last-Modified": record.last_modified.strftime("%a, %d %b %Y %H:%M:%S GMT"),
    }


def wants_datastream(request: Request) -> bool:
    return str(LDP.NonRDFSource) in request.headers.get("link", "")


async def read_content(request: Request) -> ContentRecord:
    content_type = request.headers.get("content-type") or "application/octet-stream"
    body = await request.body()
    if len(body) > settings.MAX_CONTENT_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Content too large")
    if content_type.lower().startswith(EXTERNAL_BODY_MEDIA_TYPE):
        m = _EXTERNAL_URL_RE.search(content_type[len(EXTERNAL_BODY_MEDIA_TYPE):])
        if not m:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="message/external-body requires a URL parameter",
            )
        return ContentRecord(content_type=content_type, redirect_url=(m.group(1) or m.group(2)).strip())
    return ContentRecord(data=body, content_type=content_type)


async def read_sparql_update(request: Request) -> str:
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if content_type != SPARQL_UPDATE_MEDIA_TYPE:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Expected {SPARQL_UPDATE_MEDIA_TYPE}",
        )
    body = await request.body()
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="SPARQL update must be UTF-8")


def content_response(record: ResourceRecord) -> Response:
    content = record.content or ContentRecord()
    if content.is_redirect:
        return RedirectResponse(content.redirect_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return Response(content=content.data, headers=resource_headers(record))


def description_response(
    request: Request,
    record: ResourceRecord,
    subject: Optional[str] = None,
    children: Iterable[ResourceRecord] = (),
) -> Response:
    parent = paths.parent_of(record.path)
    data = describe(
        record,
        URIRef(subject or resource_url(request, record.path)),
        parent=URIRef(resource_url(request, parent)) if parent is not None else None,
        children=[(URIRef(resource_url(request, c.path)), c.kind) for c in children],
    )
    headers = resource_headers(record)
    headers["Content-Type"] = TURTLE_MEDIA_TYPE
    return Response(content=data, headers=headers)


def destination_path(request: Request) -> str:
    destination = request.headers.get("destination")
    if not destination:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Destination header is required")
    base = rest_base_url(request)
    if destination.startswith(base):
        return unquote(destination[len(base):])
    if "://" in destination:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Destination must be inside this repository",
        )
    return unquote(destination)
