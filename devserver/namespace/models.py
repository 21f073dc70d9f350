"""
Modelos do namespace composto (mounts e resultado de resolução).
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


def normalize_prefix(prefix: str) -> str:
    """"/deps/" -> "deps"; "" e "/" -> "" (raiz do namespace)."""
    return "/".join(s for s in prefix.split("/") if s)


@dataclass(frozen=True)
class RootEntry:
    """
    Diretório físico montado no namespace lógico.

    Attributes:
        path: Diretório físico (resolvido relativo ao cwd)
        rank: Precedência; menor valor resolve primeiro
        prefix: Prefixo de URL ("" = raiz do namespace)
        name: Rótulo para logs (app, worker, deps)
    """

    path: str
    rank: int
    prefix: str = ""
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "path", os.path.abspath(os.fspath(self.path)))
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))

    @property
    def prefix_segments(self) -> tuple[str, ...]:
        return tuple(self.prefix.split("/")) if self.prefix else ()

    @property
    def url_prefix(self) -> str:
        """Prefixo no formato de URL ("/" ou "/deps")."""
        return "/" + self.prefix

    def strip(self, segments: tuple[str, ...]) -> Optional[tuple[str, ...]]:
        """
        Remove o prefixo do mount dos segmentos do request.

        Returns:
            Segmentos restantes, ou None se o mount não casa com o path
        """
        own = self.prefix_segments
        if segments[: len(own)] != own:
            return None
        return segments[len(own):]

    def to_dict(self) -> dict:
        return {"path": self.path, "prefix": self.url_prefix, "rank": self.rank, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "RootEntry":
        """Cria a partir de {path, prefix, rank, name?}."""
        try:
            return cls(
                path=data["path"],
                rank=int(data["rank"]),
                prefix=data.get("prefix", "") or "",
                name=data.get("name", "") or "",
            )
        except KeyError as e:
            raise ValueError(f"Mount sem campo obrigatório: {e.args[0]}") from e


class ResolutionKind(str, Enum):
    """Tipo do resultado da resolução."""
    FILE = "file"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class Resolution:
    """
    Resultado de uma resolução bem sucedida.

    "Não encontrado" é representado por None, não por Resolution.
    """

    kind: ResolutionKind
    mount: RootEntry
    path: str = ""  # Arquivo físico (FILE)
    location: str = ""  # Destino do redirect (REDIRECT)
