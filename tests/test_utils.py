import pytest
import requests

from pbc_gen import utils
from pbc_gen.utils import SchemaLoaderError, read_schema, read_schema_file, read_schema_url


class FakeResponse:
    def __init__(self, content=b"[]", status_code=200, content_type="application/json"):
        self.content = content
        self.status_code = status_code
        self.headers = {"content-type": content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)


def test_read_schema_file(schema_file, latest_bytes):
    source, data = read_schema_file(schema_file)
    assert source == str(schema_file)
    assert data == latest_bytes


def test_read_schema_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_schema_file(tmp_path / "pb_schema.json")


def test_read_schema_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(b'[{"name": "a", "fields": []}]')

    monkeypatch.setattr(utils.requests, "get", fake_get)
    source, data = read_schema_url("http://127.0.0.1:8090/pb_schema.json", timeout=5)

    assert source == "http://127.0.0.1:8090/pb_schema.json"
    assert data == b'[{"name": "a", "fields": []}]'
    assert calls == [("http://127.0.0.1:8090/pb_schema.json", 5)]


def test_read_schema_url_http_error(monkeypatch):
    monkeypatch.setattr(utils.requests, "get", lambda url, timeout: FakeResponse(status_code=404))
    with pytest.raises(SchemaLoaderError, match="HTTP error 404"):
        read_schema_url("http://example.com/schema.json")


@pytest.mark.parametrize(
    "exc, message",
    [
        (requests.exceptions.Timeout("slow"), "Request timeout"),
        (requests.exceptions.ConnectionError("refused"), "Connection error"),
        (requests.exceptions.TooManyRedirects("loop"), "Request error"),
    ],
)
def test_read_schema_url_request_failures(monkeypatch, exc, message):
    def fake_get(url, timeout):
        raise exc

    monkeypatch.setattr(utils.requests, "get", fake_get)
    with pytest.raises(SchemaLoaderError, match=message) as exc_info:
        read_schema_url("http://example.com/schema.json")
    assert exc_info.value.__cause__ is exc


def test_read_schema_url_rejects_bad_url():
    with pytest.raises(SchemaLoaderError, match="Invalid URL"):
        read_schema_url("not-a-url")


def test_read_schema_requires_one_source(schema_file):
    with pytest.raises(SchemaLoaderError, match="Either"):
        read_schema()
    with pytest.raises(SchemaLoaderError, match="both"):
        read_schema(file_path=schema_file, url="http://example.com/schema.json")
    assert read_schema(file_path=schema_file)[0] == str(schema_file)
