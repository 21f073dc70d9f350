"""
Router de arquivos estáticos sobre o namespace composto.

Deve ser incluído POR ÚLTIMO no app: a rota catch-all responde a
qualquer GET/HEAD que nenhuma rota anterior (ex: /manifest) tratou.

O envio dos bytes é delegado ao FileResponse do Starlette (MIME,
HEAD e range requests).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from .composer import NamespaceComposer
from .models import ResolutionKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Static"])


def get_composer(request: Request) -> NamespaceComposer:
    """Composer criado no startup (app.state)."""
    return request.app.state.composer


@router.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
def serve(request: Request, path: str, composer: NamespaceComposer = Depends(get_composer)):
    """Serve o arquivo do mount de maior precedência que o contém."""
    resolution = composer.resolve("/" + path)

    if resolution is None:
        raise HTTPException(status_code=404, detail="Not Found")

    if resolution.kind == ResolutionKind.REDIRECT:
        location = resolution.location
        query = request.scope.get("query_string", b"").decode("latin-1")
        if query:
            location = f"{location}?{query}"
        return RedirectResponse(url=location, status_code=308)

    return FileResponse(resolution.path)
