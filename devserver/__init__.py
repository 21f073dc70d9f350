"""
Dev Server - manifest de mtimes + namespace composto de arquivos estáticos.
"""

__version__ = "1.0.0"
