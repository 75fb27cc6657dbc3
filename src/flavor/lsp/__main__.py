"""
Entry point for running the Flavor LSP server as a module.

Usage:
    python -m flavor.lsp
    python -m flavor.lsp --tcp --port 2087
"""

from flavor.lsp.server import main

if __name__ == "__main__":
    main()
