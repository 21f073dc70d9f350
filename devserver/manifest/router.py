"""
Router FastAPI do manifest.

Endpoints:
    GET /manifest  - Snapshot {"mtimes": {caminho: segundos}} da raiz principal
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..errors import ScanError
from ..project import ProjectConfig, get_project
from .manifest_builder import ManifestScanner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Manifest"])


class ManifestResponse(BaseModel):
    """Resposta do endpoint de manifest."""

    mtimes: dict[str, int] = Field(
        default_factory=dict,
        description="Caminho relativo -> mtime (segundos desde epoch)",
    )


# Endpoint síncrono: o FastAPI executa no threadpool, o walk não bloqueia o loop
@router.get("/manifest", response_model=ManifestResponse)
def manifest(project: ProjectConfig = Depends(get_project)):
    """
    Gera o manifest da raiz principal.

    Sempre refaz o scan; nada é cacheado entre requests.
    """
    scanner = ManifestScanner(exclusions=project.exclusions)
    try:
        snapshot = scanner.scan(project.root)
    except ScanError as e:
        logger.error(f"Erro no manifest: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ManifestResponse(mtimes=dict(snapshot.mtimes))
