"""
Remote Clients - Clientes para o dev server.

Uso:
    from devserver.remote import ManifestClient

    client = ManifestClient()
    manifest = client.fetch()
    print(manifest.mtimes)  # {"index.html": 1700000000, ...}

Configuração:
    export DEVSERVER_URL=http://127.0.0.1:8000
"""

from .manifest_client import ManifestClient, ManifestClientConfig

__all__ = [
    "ManifestClient",
    "ManifestClientConfig",
]
