"""
Construtor do manifest de mtimes.

O manifest é um snapshot {caminho_relativo: mtime_em_segundos} da raiz
principal do projeto. Clientes (build watcher, hot reload) comparam
dois manifests para saber quais arquivos mudaram sem ler conteúdo.

Regras:
    - Criado do zero a cada request (sem cache, sem atualização incremental)
    - Chaves com separador "/", relativas à raiz, sem "/" inicial
    - Falha na raiz -> ScanError; falha em arquivo individual -> ignorado
    - Snapshot best-effort: a árvore pode mudar durante o walk
"""

import json
import logging
import os
import stat
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence

from ..errors import ScanError
from .exclusions import DEFAULT_EXCLUSIONS, ExclusionRule, ScanEntry, is_excluded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestDiff:
    """Diferença entre dois manifests (previous -> current)."""

    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()
    modified: frozenset[str] = frozenset()

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    @property
    def changed_paths(self) -> frozenset[str]:
        """Todos os caminhos que o cliente precisa recarregar."""
        return self.added | self.removed | self.modified


@dataclass(frozen=True)
class Manifest:
    """
    Snapshot imutável caminho relativo -> mtime (segundos desde epoch).

    Deve ser tratado como mapa associativo; a ordem das chaves não
    tem significado.
    """

    mtimes: Mapping[str, int] = field(default_factory=dict)
    root: str = ""

    # Compara por valor, mas não é hashable (mtimes é um MappingProxyType)
    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "mtimes", MappingProxyType(dict(self.mtimes)))

    def __len__(self) -> int:
        return len(self.mtimes)

    def __contains__(self, path: object) -> bool:
        return path in self.mtimes

    def diff(self, previous: "Manifest") -> ManifestDiff:
        """
        Calcula o que mudou desde `previous`.

        Args:
            previous: Manifest anterior

        Returns:
            ManifestDiff com adicionados, removidos e modificados
        """
        current_keys = self.mtimes.keys()
        previous_keys = previous.mtimes.keys()
        return ManifestDiff(
            added=frozenset(current_keys - previous_keys),
            removed=frozenset(previous_keys - current_keys),
            modified=frozenset(
                path
                for path in current_keys & previous_keys
                if self.mtimes[path] != previous.mtimes[path]
            ),
        )

    def to_dict(self) -> dict:
        """Formato do endpoint: {"mtimes": {...}}."""
        return {"mtimes": dict(self.mtimes)}

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict) -> "Manifest":
        """Cria instância a partir do payload do endpoint."""
        mtimes = data.get("mtimes")
        if not isinstance(mtimes, dict):
            raise ValueError("Manifest payload must contain an 'mtimes' object")
        return cls(mtimes={str(k): int(v) for k, v in mtimes.items()})

    @classmethod
    def from_json(cls, json_str: str) -> "Manifest":
        return cls.from_dict(json.loads(json_str))


def normalize_root(root: "str | os.PathLike[str]") -> str:
    """
    Normaliza a raiz do scan.

    Resolve relativo ao diretório de trabalho e remove separadores finais
    (exceto na raiz do filesystem), para que "dist" e "dist/" gerem as
    mesmas chaves.
    """
    return os.path.abspath(os.fspath(root))


def strip_prefix(root: str) -> str:
    """
    Prefixo exato a ser removido dos caminhos absolutos.

    É a raiz normalizada seguida de exatamente um separador.
    """
    return root if root.endswith(os.sep) else root + os.sep


class ManifestScanner:
    """
    Scanner de diretório que gera o Manifest.

    Não guarda estado entre chamadas: cada scan() refaz o walk completo.
    Pode ser compartilhado entre requests concorrentes.

    Args:
        exclusions: Regras de exclusão (lista aberta, ver exclusions.py)
    """

    def __init__(self, exclusions: Sequence[ExclusionRule] = DEFAULT_EXCLUSIONS):
        self.exclusions = tuple(exclusions)

    def scan(self, root: "str | os.PathLike[str]") -> Manifest:
        """
        Gera o manifest da raiz.

        Args:
            root: Diretório raiz (absoluto ou relativo ao cwd)

        Returns:
            Manifest com um item por arquivo regular não excluído

        Raises:
            ScanError: Se a própria raiz não puder ser listada
        """
        start_time = time.perf_counter()
        normalized = normalize_root(root)
        prefix = strip_prefix(normalized)

        mtimes: dict[str, int] = {}
        skipped = 0
        for entry in self._walk(normalized):
            summary = self._summarize(entry, prefix)
            if summary is None:
                skipped += 1
                continue
            key, mtime = summary
            mtimes[key] = mtime

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Manifest de {normalized}: {len(mtimes)} arquivos, "
            f"{skipped} ignorados em {elapsed:.2f}ms"
        )
        return Manifest(mtimes=mtimes, root=normalized)

    def _walk(self, root: str) -> Iterator[ScanEntry]:
        """
        Walk em profundidade, podando entradas excluídas.

        Regras não são aplicadas à própria raiz, apenas aos descendentes.
        Symlinks para diretórios não são seguidos.
        """
        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as it:
                    entries = [ScanEntry.from_dir_entry(e) for e in it]
            except OSError as e:
                if directory == root:
                    raise ScanError(root, e) from e
                # Diretório sumiu ou perdeu permissão durante o walk
                logger.debug(f"Diretório ignorado no scan: {directory} ({e})")
                continue

            for entry in entries:
                if is_excluded(entry, self.exclusions):
                    continue
                if entry.is_dir:
                    pending.append(entry.path)
                else:
                    yield entry

    @staticmethod
    def _summarize(entry: ScanEntry, prefix: str) -> Optional[tuple[str, int]]:
        """
        Gera (chave, mtime) para uma entrada, ou None se deve ser ignorada.

        Segue symlinks: symlink para arquivo regular entra, symlink
        quebrado é ignorado.
        """
        try:
            st = os.stat(entry.path)
        except OSError as e:
            logger.debug(f"Arquivo ignorado no scan: {entry.path} ({e})")
            return None

        if not stat.S_ISREG(st.st_mode):
            return None

        # Mtime antes de 1970 não tem representação não-negativa
        if st.st_mtime < 0:
            return None

        if not entry.path.startswith(prefix):
            return None
        key = entry.path[len(prefix):]
        if os.sep != "/":
            key = key.replace(os.sep, "/")

        try:
            key.encode("utf-8")
        except UnicodeEncodeError:
            logger.debug(f"Nome não UTF-8 ignorado no scan: {key!r}")
            return None

        return key, int(st.st_mtime)


def scan(
    root: "str | os.PathLike[str]",
    exclusions: Optional[Sequence[ExclusionRule]] = None,
) -> Manifest:
    """Atalho para ManifestScanner(exclusions).scan(root)."""
    scanner = ManifestScanner(DEFAULT_EXCLUSIONS if exclusions is None else exclusions)
    return scanner.scan(root)
