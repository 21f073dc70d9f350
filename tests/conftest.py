"""
Configuração global do pytest para testes do dev server.

Configura o PYTHONPATH e fixtures de árvores de diretório temporárias.
"""

import os
import sys
from pathlib import Path

import pytest

# Adiciona o diretório raiz do projeto para que "import devserver" funcione sem instalar
root_path = Path(__file__).parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))


def write_file(base: Path, relative: str, content: str = "x", mtime: int | None = None) -> Path:
    """Cria arquivo (e diretórios pais) com mtime opcional."""
    path = base / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def make_file():
    return write_file


@pytest.fixture
def scenario_tree(tmp_path):
    """
    Árvore do cenário de referência:
        index.html, src/app.js           -> no manifest
        .hidden/secret.txt               -> excluído (dotfile)
        node_modules/pkg/file.js         -> excluído (node_modules)
    """
    root = tmp_path / "app"
    write_file(root, "index.html", "<html></html>", mtime=1_600_000_000)
    write_file(root, "src/app.js", "console.log(1)", mtime=1_600_000_100)
    write_file(root, ".hidden/secret.txt", "secret", mtime=1_600_000_200)
    write_file(root, "node_modules/pkg/file.js", "module", mtime=1_600_000_300)
    return root
