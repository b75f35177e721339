"""Object operation routes: upload, download, delete, listing and dumps."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from gateway.coordinator import ObjectCoordinator
from gateway.pages import load_favicon, render_homepage
from gateway.schemas.catalog import CatalogDump, CatalogMeta, ObjectEntry, UriPayload
from gateway.schemas.common import ErrorResponse
from gateway.schemas.objects import DeleteObjectResponse
from gateway.utils import encode_base64_json

router = APIRouter(tags=["Objects"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, HEAD, POST, OPTIONS, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Content-Disposition",
    "Access-Control-Max-Age": "86400",
}


def get_coordinator(request: Request) -> ObjectCoordinator:
    """FastAPI dependency returning the app's coordinator."""
    return request.app.state.coordinator


@router.options("/{path:path}")
async def preflight(path: str):
    """
    CORS preflight for any path.
    """
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.get("/", response_class=HTMLResponse)
async def homepage(coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Render every stored object as a link plus the total stored size.
    """
    return HTMLResponse(
        content=render_homepage(coordinator.catalog),
        headers={"Connection": "close"},
    )


@router.get("/favicon.ico")
async def favicon():
    return Response(content=load_favicon(), media_type="image/x-icon")


@router.get("/uri/{name}", response_class=PlainTextResponse, responses={404: {"model": ErrorResponse}})
async def object_uri(name: str, coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Return the chunk refs of an object as base64-encoded JSON.

    Returns:
        base64 of {"fileName": name, "files": [chunk refs]}

    Raises:
        - 404: Object not found
    """
    record = coordinator.describe(name)
    payload = UriPayload(file_name=name, files=list(record.chunk_refs))
    return PlainTextResponse(encode_base64_json(payload.model_dump(by_alias=True)))


@router.get("/cdn/{path:path}", response_model=CatalogDump)
async def catalog_dump(path: str, request: Request, coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Return the full catalog as JSON when the CDN flag is enabled.

    Raises:
        - 404: CDN dump disabled
    """
    if not request.app.state.cdn_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")

    catalog = coordinator.catalog
    return CatalogDump(
        data={name: ObjectEntry.from_record(record) for name, record in catalog.items()},
        meta=CatalogMeta.from_meta(catalog.meta),
    )


@router.get("/{name}", responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def download_object(name: str, coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Stream an object's chunks in catalog order.

    Returns:
        StreamingResponse with Content-Length set to the recorded size

    Raises:
        - 404: Object not found
    """
    stream = coordinator.open_download(name)

    return StreamingResponse(
        stream,
        media_type="application/octet-stream",
        headers={"Content-Length": str(stream.size)},
        background=BackgroundTask(stream.aclose),
    )


@router.post(
    "/{name}",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_object(name: str, request: Request, coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Store the raw request body under name (whitespace becomes '_').

    Returns:
        303 redirect to /

    Raises:
        - 409: Object exists or is being uploaded
        - 500: Storage backend failure
    """
    await coordinator.upload(name, request.stream())
    return RedirectResponse(
        url="/",
        status_code=status.HTTP_303_SEE_OTHER,
        headers={"Connection": "close"},
    )


@router.delete(
    "/{name}",
    response_model=DeleteObjectResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delete_object(name: str, coordinator: ObjectCoordinator = Depends(get_coordinator)):
    """
    Discard an object's chunks and remove it from the catalog.

    Raises:
        - 404: Object not found
        - 409: Object is being uploaded, downloaded or deleted
        - 500: Storage backend failure
    """
    record = await coordinator.delete(name)
    return DeleteObjectResponse(name=name, size=record.size, length=record.chunk_count)
