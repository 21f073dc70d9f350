"""
Manifest Client - Cliente do endpoint /manifest do dev server.

Usado por build watchers e agentes de hot reload para descobrir quais
arquivos mudaram entre duas consultas (polling sob demanda).

Uso:
    from devserver.remote import ManifestClient

    with ManifestClient() as client:
        previous = client.fetch()
        ...
        current, diff = client.changes_since(previous)
        if diff.has_changes:
            reload(diff.changed_paths)
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ..manifest.manifest_builder import Manifest, ManifestDiff

logger = logging.getLogger(__name__)


@dataclass
class ManifestClientConfig:
    """Configuração do cliente de manifest."""

    server_url: str = "http://127.0.0.1:8000"
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "ManifestClientConfig":
        """Carrega configuração de variáveis de ambiente."""
        return cls(
            server_url=os.getenv("DEVSERVER_URL", "http://127.0.0.1:8000"),
            timeout=float(os.getenv("DEVSERVER_TIMEOUT", "30")),
        )


class ManifestClient:
    """
    Cliente para o dev server - endpoint /manifest.

    Sem retries: o manifest é um snapshot idempotente, o chamador
    simplesmente consulta de novo.
    """

    def __init__(
        self,
        config: Optional[ManifestClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or ManifestClientConfig.from_env()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Cliente HTTP com lazy initialization."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.config.server_url,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def fetch(self) -> Manifest:
        """
        Busca o manifest atual.

        Raises:
            httpx.HTTPError: Erro de rede ou status != 2xx
            ValueError: Payload sem o campo "mtimes"
        """
        start_time = time.perf_counter()

        response = self.client.get("/manifest")
        response.raise_for_status()
        manifest = Manifest.from_dict(response.json())

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Manifest remoto: {len(manifest)} arquivos em {elapsed:.2f}ms")
        return manifest

    def changes_since(self, previous: Manifest) -> tuple[Manifest, ManifestDiff]:
        """
        Busca o manifest atual e compara com o anterior.

        Returns:
            Tupla (manifest_atual, diff)
        """
        current = self.fetch()
        return current, current.diff(previous)

    def close(self):
        """Fecha o cliente HTTP."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
