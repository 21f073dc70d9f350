"""
Composição de múltiplas raízes físicas em um namespace lógico.

Regra de precedência:
    Mounts são tentados em ordem crescente de rank. O primeiro mount cujo
    prefixo casa com o path e que contém o arquivo responde. Se não
    contém, tenta o próximo (fallback). Não há merge de listagens.

Nada é cacheado: adicionar/remover um arquivo muda a resolução do
próximo request.

Política de serving (independente das exclusões do manifest):
    - Dotfiles são servidos
    - Diretório sem "/" final -> redirect permanente para "path/"
    - Diretório com "/" final -> index.html se existir, senão próximo mount
"""

import logging
import os
import stat
from typing import Iterable, Optional
from urllib.parse import quote

from .models import Resolution, ResolutionKind, RootEntry

logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILE = "index.html"


def split_logical_path(logical_path: str) -> Optional[tuple[str, ...]]:
    """
    Quebra o path lógico em segmentos seguros.

    Segmentos vazios e "." são descartados. Retorna None se o path tenta
    sair da raiz ("..") ou contém caracteres inválidos.
    """
    segments = []
    for segment in logical_path.split("/"):
        if segment in ("", "."):
            continue
        if segment == ".." or "\\" in segment or "\x00" in segment:
            return None
        segments.append(segment)
    return tuple(segments)


def _file_kind(path: str) -> Optional[int]:
    """st_mode do path (seguindo symlinks), ou None se não existe."""
    try:
        return os.stat(path).st_mode
    except (OSError, ValueError):
        return None


class NamespaceComposer:
    """
    Resolve paths lógicos para arquivos físicos em mounts ranqueados.

    Imutável após construção; seguro para requests concorrentes.

    Args:
        mounts: Mounts em qualquer ordem (ordenados por rank aqui)
        index_file: Documento servido para requests de diretório
    """

    def __init__(self, mounts: Iterable[RootEntry], index_file: str = DEFAULT_INDEX_FILE):
        ordered = sorted(mounts, key=lambda m: m.rank)
        ranks = [m.rank for m in ordered]
        if len(set(ranks)) != len(ranks):
            raise ValueError(f"Ranks duplicados nos mounts: {ranks}")
        self._mounts: tuple[RootEntry, ...] = tuple(ordered)
        self.index_file = index_file

    @property
    def mounts(self) -> tuple[RootEntry, ...]:
        """Mounts em ordem de precedência."""
        return self._mounts

    def resolve(self, logical_path: str) -> Optional[Resolution]:
        """
        Resolve um path lógico.

        Args:
            logical_path: Path do request (ex: "/assets/app.js", "/deps/")

        Returns:
            Resolution (arquivo ou redirect), ou None se nenhum mount responde
        """
        segments = split_logical_path(logical_path)
        if segments is None:
            logger.debug(f"Path rejeitado: {logical_path!r}")
            return None

        wants_directory = logical_path.endswith("/")

        for mount in self._mounts:
            rest = mount.strip(segments)
            if rest is None:
                continue

            candidate = os.path.join(mount.path, *rest)
            mode = _file_kind(candidate)
            if mode is None:
                continue

            if stat.S_ISREG(mode):
                logger.debug(f"{logical_path} -> {candidate} (mount {mount.name or mount.rank})")
                return Resolution(kind=ResolutionKind.FILE, mount=mount, path=candidate)

            if not stat.S_ISDIR(mode):
                continue

            if not wants_directory:
                # Segmentos vêm decodificados; "?", "#" e "%" precisam voltar a ser escapados
                location = "/" + "/".join(quote(s, safe="") for s in segments) + "/" if segments else "/"
                return Resolution(kind=ResolutionKind.REDIRECT, mount=mount, location=location)

            index = os.path.join(candidate, self.index_file)
            index_mode = _file_kind(index)
            if index_mode is not None and stat.S_ISREG(index_mode):
                logger.debug(f"{logical_path} -> {index} (mount {mount.name or mount.rank})")
                return Resolution(kind=ResolutionKind.FILE, mount=mount, path=index)

        return None
