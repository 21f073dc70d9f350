"""
Regras de exclusão do scan de manifest.

Cada regra é uma função pura ScanEntry -> bool (True = excluir).
Uma entrada só é mantida se NENHUMA regra casar. Regras aplicadas a
diretórios podam a subárvore inteira (o walker nem desce).

Para adicionar uma regra basta anexá-la à tupla passada ao scanner:

    rules = DEFAULT_EXCLUSIONS + (excluded_names("dist", "tmp"),)
    scanner = ManifestScanner(exclusions=rules)
"""

import os
from dataclasses import dataclass
from typing import Callable, Iterable


@dataclass(frozen=True)
class ScanEntry:
    """Entrada visitada durante o walk (transiente, não persiste)."""

    path: str  # Caminho absoluto
    name: str
    is_dir: bool

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry) -> "ScanEntry":
        """Cria a partir de um os.DirEntry sem seguir symlinks."""
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        return cls(path=entry.path, name=entry.name, is_dir=is_dir)


ExclusionRule = Callable[[ScanEntry], bool]


def is_hidden(entry: ScanEntry) -> bool:
    """Arquivos e diretórios ocultos (.git, .env, ...)."""
    return entry.name.startswith(".")


def is_node_modules(entry: ScanEntry) -> bool:
    return entry.name == "node_modules"


def excluded_names(*names: str) -> ExclusionRule:
    """
    Cria regra que exclui entradas com nome exato em `names`.

    Usado para nomes extras vindos de MANIFEST_EXCLUDE.
    """
    blocked = frozenset(n for n in names if n)

    def _rule(entry: ScanEntry) -> bool:
        return entry.name in blocked

    _rule.__name__ = f"excluded_names({', '.join(sorted(blocked))})"
    return _rule


DEFAULT_EXCLUSIONS: tuple[ExclusionRule, ...] = (
    is_hidden,
    is_node_modules,
)


def is_excluded(entry: ScanEntry, rules: Iterable[ExclusionRule]) -> bool:
    """True se qualquer regra excluir a entrada."""
    return any(rule(entry) for rule in rules)
