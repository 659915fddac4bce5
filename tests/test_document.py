"""Document loading and pre-resolution tests"""

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from auditapi.document import load_document, parse_document, resolve_document

from conftest import CLEAN_SPEC


@pytest.fixture
def http_requests():
    """Local HTTP server recording every requested path"""
    hits = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            hits.append(self.path)
            body = b"type: object\n"
            self.send_response(200)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield hits, f"http://127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        server.server_close()


class TestParseDocument:
    """parse_document()"""

    def test_positions_are_zero_based(self):
        data, locations = parse_document("openapi: 3.0.3\ninfo:\n  title: Pets\n")

        assert data == {"openapi": "3.0.3", "info": {"title": "Pets"}}
        assert locations[("openapi",)] == (0, 0)
        assert locations[("info",)] == (1, 0)
        assert locations[("info", "title")] == (2, 2)

    def test_sequence_items_are_indexed(self):
        _, locations = parse_document("servers:\n  - url: https://a\n  - url: https://b\n")

        assert locations[("servers", 0)] == (1, 4)
        assert locations[("servers", 1)] == (2, 4)
        assert locations[("servers", 1, "url")] == (2, 4)

    def test_integer_keys_are_preserved(self):
        data, locations = parse_document("responses:\n  200:\n    description: OK\n")

        assert 200 in data["responses"]
        assert locations[("responses", 200, "description")] == (2, 4)

    def test_json_content(self):
        data, locations = parse_document('{\n  "openapi": "3.0.3",\n  "paths": {}\n}\n')

        assert data == {"openapi": "3.0.3", "paths": {}}
        assert locations[("paths",)] == (2, 2)

    def test_empty_document(self):
        assert parse_document("") == (None, {})

    def test_recursive_alias_terminates(self):
        data, locations = parse_document("base: &node\n  child: *node\n")

        assert data["base"]["child"] is data["base"]
        assert locations[("base", "child")] == (1, 2)


class TestLoadDocument:
    """load_document()"""

    def test_loads_file(self, spec_file):
        document = load_document(spec_file())

        assert document.data["info"]["title"] == "Pet Store"
        assert document.locations[("paths", "/pets", "get")] == (CLEAN_SPEC.splitlines().index("    get:"), 4)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(tmp_path / "missing.yaml")


class TestResolveDocument:
    """resolve_document()"""

    def test_valid_document(self, spec_file):
        resolved = resolve_document(spec_file())

        assert resolved is not None
        assert resolved["openapi"] == "3.0.3"

    def test_invalid_document(self, spec_file):
        path = spec_file("openapi: 3.0.3\npaths: {}\n")

        assert resolve_document(path) is None

    def test_not_an_object(self, spec_file):
        assert resolve_document(spec_file("- just\n- a list\n")) is None

    def test_missing_file(self, tmp_path):
        assert resolve_document(tmp_path / "missing.yaml") is None

    def test_local_file_reference(self, spec_file):
        spec_file("type: object\nproperties:\n  petId:\n    type: integer\n", name="pet.yaml")
        path = spec_file(CLEAN_SPEC.replace('"#/components/schemas/Pet"', '"pet.yaml"'))

        assert resolve_document(path) is not None

    def test_remote_reference_is_not_fetched(self, spec_file, http_requests):
        hits, base_url = http_requests
        path = spec_file(CLEAN_SPEC.replace('"#/components/schemas/Pet"', f'"{base_url}/remote.yaml"'))

        assert resolve_document(path) is None
        assert hits == []
