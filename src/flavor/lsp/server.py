"""
Flavor Language Server Protocol (LSP) Server.

A small LSP server built on pygls that keeps editors informed about the
first lexing, parsing or type error in each open document.

Usage:
    # Start the server in stdio mode (for IDE integration)
    flavor-lsp

    # Start in TCP mode (for debugging)
    flavor-lsp --tcp --port 2087
"""

import argparse
import logging
from typing import Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from flavor import __version__
from flavor.lsp.diagnostics import get_diagnostics_for_document

logger = logging.getLogger("flavor-lsp")


class FlavorLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for Flavor.

    Re-checks a document whenever it is opened, changed or saved and
    publishes the resulting diagnostics; closing a document clears them.
    """

    def __init__(self) -> None:
        super().__init__(
            name="flavor-lsp",
            version=f"v{__version__}",
        )
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register document synchronization handlers."""
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(self._on_did_open)
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(self._on_did_change)
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(self._on_did_save)
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(self._on_did_close)

    def _publish_diagnostics(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def _validate(self, uri: str, source: str) -> None:
        diagnostics = get_diagnostics_for_document(source, uri)
        logger.debug("Publishing %d diagnostic(s) for %s", len(diagnostics), uri)
        self._publish_diagnostics(uri, diagnostics)

    def _document_source(self, uri: str) -> Optional[str]:
        doc = self.workspace.get_text_document(uri)
        return doc.source if doc is not None else None

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info("Document opened: %s", document.uri)
        self._validate(document.uri, document.text)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri
        source = self._document_source(uri)
        if source is None:
            return
        logger.debug("Document changed: %s", uri)
        self._validate(uri, source)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        logger.info("Document saved: %s", uri)
        source = params.text if params.text is not None else self._document_source(uri)
        if source is not None:
            self._validate(uri, source)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info("Document closed: %s", uri)
        self._publish_diagnostics(uri, [])


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server() -> FlavorLanguageServer:
    """Create and configure a Flavor language server instance."""
    server = FlavorLanguageServer()

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("Flavor Language Server initialized")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down Flavor Language Server")

    return server


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flavor Language Server",
        prog="flavor-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    Main entry point for the Flavor language server.

    Starts the server in stdio mode unless ``--tcp`` is given.
    """
    args = create_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    server = create_server()

    if args.tcp:
        logger.info("Starting Flavor LSP in TCP mode on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting Flavor LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
