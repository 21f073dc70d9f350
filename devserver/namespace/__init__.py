"""
Namespace composto: várias raízes físicas servidas como uma árvore lógica.
"""

from .composer import DEFAULT_INDEX_FILE, NamespaceComposer, split_logical_path
from .models import Resolution, ResolutionKind, RootEntry

__all__ = [
    "DEFAULT_INDEX_FILE",
    "NamespaceComposer",
    "split_logical_path",
    "Resolution",
    "ResolutionKind",
    "RootEntry",
]
