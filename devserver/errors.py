"""
Exceções do dev server.

Taxonomia:
    - StartupError: configuração inválida no startup (fatal, o servidor não sobe)
    - ScanError: raiz do manifest ilegível (erro do request, nunca manifest vazio)

Falhas por arquivo durante o scan NÃO geram exceção - são absorvidas no scanner.
Path não encontrado no namespace também não é erro (vira 404).
"""

from typing import Optional


class DevServerError(Exception):
    """Erro base do dev server."""


class StartupError(DevServerError):
    """Configuração do projeto não pôde ser resolvida no startup."""


class ScanError(DevServerError):
    """
    Raiz do scan não pôde ser lida.

    Attributes:
        root: Raiz que falhou
        cause: Erro do sistema operacional original
    """

    def __init__(self, root: str, cause: Optional[OSError] = None):
        self.root = root
        self.cause = cause
        reason = cause.strerror if cause is not None and cause.strerror else str(cause or "unknown")
        super().__init__(f"Cannot scan root {root!r}: {reason}")
