"""
Dev Server - FastAPI para servir o build do ember-app em desenvolvimento.

Endpoints:
    GET /manifest       - Snapshot {"mtimes": {...}} da raiz principal
    GET /healthz        - Liveness probe
    GET /{path}         - Arquivos do namespace composto (app > worker > /deps)

Arquitetura:
    - Configuração resolvida 1x no startup (ProjectConfig em app.state)
    - Manifest refeito do zero a cada request (sem cache)
    - Arquivos estáticos resolvidos por rank a cada request (sem cache)

Uso:
    uvicorn devserver.main:create_app --factory --host 127.0.0.1 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .manifest.router import router as manifest_router
from .middleware import RequestLoggingMiddleware
from .namespace.router import router as static_router
from .project import ProjectConfig, load_project

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(project: Optional[ProjectConfig] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Cria o app FastAPI.

    Args:
        project: Projeto já resolvido (testes). Se None, é carregado do env.
        config: Configuração. Se None, Config.from_env().

    Raises:
        StartupError: Se a raiz principal não puder ser determinada
    """
    config = config or Config.from_env()
    configure_logging(config.log_level)
    if project is None:
        project = load_project(config)

    composer = project.composer()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle do app - loga a configuração no startup."""
        logger.info("=== Dev Server iniciando ===")
        logger.info(f"Raiz do manifest: {project.root}")
        for mount in composer.mounts:
            logger.info(f"Mount rank {mount.rank}: {mount.url_prefix} -> {mount.path} ({mount.name})")
        rule_names = [getattr(r, "__name__", repr(r)) for r in project.exclusions]
        logger.info(f"Exclusões do manifest: {rule_names}")

        yield

        logger.info("=== Dev Server encerrando ===")

    app = FastAPI(
        title="Dev Server",
        description="Servidor de desenvolvimento: manifest de mtimes + arquivos estáticos",
        version="1.0.0",
        lifespan=lifespan,
        # /docs, /redoc e /openapi.json sombreariam arquivos do namespace
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.project = project
    app.state.composer = composer

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        """Liveness probe."""
        return {"status": "ok"}

    # Routers (o estático é catch-all e precisa ser o último)
    app.include_router(manifest_router)
    app.include_router(static_router)

    return app


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    _config = Config.from_env()

    uvicorn.run(
        "devserver.main:create_app",
        factory=True,
        host=_config.host,
        port=_config.port,
        reload=False,
    )
