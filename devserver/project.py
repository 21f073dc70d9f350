"""
Configuração do projeto servido (raízes e exclusões).

Resolvida UMA vez no startup e imutável durante a vida do processo.
Chega aos handlers via app.state + dependências do FastAPI, nunca por
lookup global.

Mounts padrão:
    rank 1  /       raiz principal (lida do marker do ember-app)
    rank 2  /       worker
    rank 3  /deps   dependências
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request

from .config import Config
from .errors import StartupError
from .manifest.exclusions import DEFAULT_EXCLUSIONS, ExclusionRule, excluded_names
from .namespace.composer import DEFAULT_INDEX_FILE, NamespaceComposer
from .namespace.models import RootEntry

logger = logging.getLogger(__name__)

PRIMARY_RANK = 1


@dataclass(frozen=True)
class ProjectConfig:
    """
    Projeto servido.

    Attributes:
        root: Raiz principal (alvo do manifest)
        mounts: Mounts do namespace, incluindo a raiz principal
        exclusions: Regras de exclusão do manifest
        index_file: Documento de índice de diretórios
    """

    root: str
    mounts: tuple[RootEntry, ...]
    exclusions: tuple[ExclusionRule, ...] = DEFAULT_EXCLUSIONS
    index_file: str = DEFAULT_INDEX_FILE

    def composer(self) -> NamespaceComposer:
        return NamespaceComposer(self.mounts, index_file=self.index_file)

    def describe(self) -> list[dict]:
        """Mounts em ordem de precedência, como dados."""
        return [m.to_dict() for m in self.composer().mounts]


def read_primary_root(marker_path: str) -> str:
    """
    Lê o caminho da raiz principal do marker gerado pelo build.

    Raises:
        StartupError: Marker ausente, ilegível ou vazio
    """
    try:
        with open(marker_path, "r", encoding="utf-8") as f:
            content = f.read().strip()
    except (OSError, UnicodeDecodeError) as e:
        raise StartupError(f"Não foi possível ler o marker da raiz principal {marker_path!r}: {e}") from e

    if not content:
        raise StartupError(f"Marker da raiz principal vazio: {marker_path!r}")

    return os.path.abspath(content)


def load_mounts(mounts_file: str) -> list[RootEntry]:
    """
    Carrega mounts de um arquivo JSON: [{"path", "prefix", "rank", "name"}, ...].

    Raises:
        StartupError: Arquivo ilegível ou formato inválido
    """
    try:
        with open(mounts_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StartupError(f"Não foi possível ler o arquivo de mounts {mounts_file!r}: {e}") from e

    if not isinstance(data, list):
        raise StartupError(f"Arquivo de mounts deve conter uma lista: {mounts_file!r}")

    try:
        return [RootEntry.from_dict(item) for item in data]
    except (ValueError, TypeError, AttributeError) as e:
        raise StartupError(f"Mount inválido em {mounts_file!r}: {e}") from e


def default_mounts(config: Config) -> list[RootEntry]:
    return [
        RootEntry(path=config.worker_dist, rank=2, name="worker"),
        RootEntry(path=config.deps_dist, rank=3, prefix=config.deps_prefix, name="deps"),
    ]


def load_project(config: Config, root: Optional[str] = None) -> ProjectConfig:
    """
    Monta o ProjectConfig a partir da configuração.

    Args:
        config: Configuração (env)
        root: Raiz principal explícita (senão, lida do marker)

    Raises:
        StartupError: Raiz principal indeterminada ou mounts inválidos
    """
    primary_root = os.path.abspath(root) if root else read_primary_root(config.stage2_marker)
    secondary = load_mounts(config.mounts_file) if config.mounts_file else default_mounts(config)

    exclusions = DEFAULT_EXCLUSIONS
    if config.extra_exclusions:
        exclusions = exclusions + (excluded_names(*config.extra_exclusions),)

    project = ProjectConfig(
        root=primary_root,
        mounts=(RootEntry(path=primary_root, rank=PRIMARY_RANK, name="app"), *secondary),
        exclusions=exclusions,
        index_file=config.index_file,
    )

    try:
        project.composer()
    except ValueError as e:
        raise StartupError(str(e)) from e

    if not os.path.isdir(primary_root):
        # Não é fatal: o /manifest reporta o erro a cada request
        logger.warning(f"Raiz principal não é um diretório: {primary_root}")

    return project


def get_project(request: Request) -> ProjectConfig:
    """Dependência FastAPI: projeto criado no startup."""
    return request.app.state.project
