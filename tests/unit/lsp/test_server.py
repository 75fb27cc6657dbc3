"""Tests for the Flavor language server handlers."""

import pytest
from lsprotocol import types

from flavor.lsp.server import FlavorLanguageServer, create_arg_parser, create_server

URI = "file:///tmp/program.flv"


@pytest.fixture
def server(monkeypatch):
    """A server whose published diagnostics are recorded instead of sent."""
    instance = create_server()
    published = []
    monkeypatch.setattr(
        instance,
        "_publish_diagnostics",
        lambda uri, diagnostics: published.append((uri, diagnostics)),
    )
    instance.published = published
    return instance


class TestLanguageServer:
    def test_create_server(self) -> None:
        server = create_server()
        assert isinstance(server, FlavorLanguageServer)
        assert server.name == "flavor-lsp"

    def test_did_open_publishes_errors(self, server) -> None:
        params = types.DidOpenTextDocumentParams(
            text_document=types.TextDocumentItem(
                uri=URI, language_id="flavor", version=1, text="print nope;"
            )
        )
        server._on_did_open(params)

        uri, diagnostics = server.published[-1]
        assert uri == URI
        assert len(diagnostics) == 1
        assert diagnostics[0].code == "TypeChecking"

    def test_did_open_clean_document(self, server) -> None:
        params = types.DidOpenTextDocumentParams(
            text_document=types.TextDocumentItem(
                uri=URI, language_id="flavor", version=1, text="print 1;"
            )
        )
        server._on_did_open(params)
        assert server.published[-1] == (URI, [])

    def test_did_save_with_text(self, server) -> None:
        params = types.DidSaveTextDocumentParams(
            text_document=types.TextDocumentIdentifier(uri=URI),
            text="let x: int = true;",
        )
        server._on_did_save(params)
        assert server.published[-1][1][0].code == "TypeChecking"

    def test_did_close_clears_diagnostics(self, server) -> None:
        params = types.DidCloseTextDocumentParams(
            text_document=types.TextDocumentIdentifier(uri=URI)
        )
        server._on_did_close(params)
        assert server.published[-1] == (URI, [])


class TestArgParser:
    def test_defaults(self) -> None:
        args = create_arg_parser().parse_args([])
        assert not args.tcp
        assert args.host == "127.0.0.1"
        assert args.port == 2087
        assert args.log_level == "info"

    def test_tcp_mode(self) -> None:
        args = create_arg_parser().parse_args(["--tcp", "--port", "9000", "--log-level", "debug"])
        assert args.tcp
        assert args.port == 9000
        assert args.log_level == "debug"
