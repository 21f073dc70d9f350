"""
Configurações do dev server.
"""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Configuração do dev server."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: str = "*"  # Lista separada por vírgula

    # Raiz principal: o caminho é lido deste arquivo (gerado pelo build do ember-app)
    stage2_marker: str = "../ember-app/dist/.stage2-output"

    # Raízes secundárias
    worker_dist: str = "../worker/dist"
    deps_dist: str = "../deps/dist"
    deps_prefix: str = "/deps"

    # JSON com lista de {path, prefix, rank, name} (substitui worker/deps)
    mounts_file: str = ""

    # Serving
    index_file: str = "index.html"

    # Manifest: nomes extras excluídos (além de dotfiles e node_modules)
    manifest_exclude: str = ""

    @property
    def extra_exclusions(self) -> tuple[str, ...]:
        return tuple(n.strip() for n in self.manifest_exclude.split(",") if n.strip())

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @classmethod
    def from_env(cls) -> "Config":
        """Carrega configuração de variáveis de ambiente."""
        return cls(
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            stage2_marker=os.getenv("STAGE2_MARKER", "../ember-app/dist/.stage2-output"),
            worker_dist=os.getenv("WORKER_DIST", "../worker/dist"),
            deps_dist=os.getenv("DEPS_DIST", "../deps/dist"),
            deps_prefix=os.getenv("DEPS_PREFIX", "/deps"),
            mounts_file=os.getenv("MOUNTS_FILE", ""),
            index_file=os.getenv("INDEX_FILE", "index.html"),
            manifest_exclude=os.getenv("MANIFEST_EXCLUDE", ""),
        )
