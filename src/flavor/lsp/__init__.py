"""
Flavor Language Server Package.

Publishes pipeline diagnostics to editors over the Language Server
Protocol.
"""

from flavor.lsp.diagnostics import DiagnosticProvider, get_diagnostics_for_document

__all__ = [
    "DiagnosticProvider",
    "get_diagnostics_for_document",
]
