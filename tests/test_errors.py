# tests/test_errors.py
import httpx
import pytest

from fcrepo_client import (
    ConflictError,
    Content,
    Datastream,
    GoneError,
    NotFoundError,
    ParseError,
    Repository,
    RepositoryError,
    TransportError,
)
from fcrepo_client.errors import error_for_status
from tests.conftest import REST_URL


def test_error_shape_on_get_missing_404(client):
    r = client.get("/rest/does-not-exist")
    assert r.status_code == 404
    data = r.json()
    assert "error" in data
    err = data["error"]
    assert err["code"] == "not_found"
    assert err["status"] == 404
    assert isinstance(err["message"], str) and err["message"]

def test_error_shape_on_tombstone_410(client):
    client.put("/rest/t")
    client.delete("/rest/t")
    r = client.get("/rest/t")
    err = r.json()["error"]
    assert err["code"] == "gone"
    assert err["status"] == 410

def test_error_shape_on_unsupported_patch_415(client):
    client.put("/rest/u")
    r = client.patch("/rest/u", content="x", headers={"Content-Type": "text/turtle"})
    err = r.json()["error"]
    assert err["code"] == "unsupported_media_type"
    assert err["status"] == 415

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"

@pytest.mark.parametrize(
    "status, cls",
    [(404, NotFoundError), (409, ConflictError), (410, GoneError), (500, RepositoryError)],
)
def test_status_maps_to_error_class(status, cls):
    err = error_for_status(status, "boom", url="http://x")
    assert type(err) is cls
    assert err.status_code == status

def test_gone_error_always_mentions_410():
    err = error_for_status(410, "deleted")
    assert "410 Gone" in str(err)

def test_bad_request_on_patch_is_parse_error():
    assert isinstance(error_for_status(400, "bad", patch=True), ParseError)
    assert not isinstance(error_for_status(400, "bad"), ParseError)

def test_errors_share_base_class():
    for cls in (NotFoundError, GoneError, ConflictError, ParseError, TransportError):
        assert issubclass(cls, RepositoryError)

def test_network_failure_raises_transport_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(refuse))
    repo = Repository(REST_URL, http_client=http_client)
    with pytest.raises(TransportError):
        repo.create_object("anything")
    with pytest.raises(TransportError):
        Datastream(repo, "x").get_content()

def test_timeout_raises_transport_error():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    repo = Repository(REST_URL, http_client=httpx.Client(transport=httpx.MockTransport(slow)))
    with pytest.raises(TransportError):
        repo.exists("anything")

def test_unexpected_status_is_repository_error():
    def teapot(request):
        return httpx.Response(418, json={"error": {"message": "short and stout"}})

    repo = Repository(REST_URL, http_client=httpx.Client(transport=httpx.MockTransport(teapot)))
    with pytest.raises(RepositoryError) as exc:
        repo.create_object("pot")
    assert exc.value.status_code == 418
    assert "short and stout" in str(exc.value)

def test_redirect_cycle_raises_transport_error(repo):
    ds = repo.create_datastream("loop", Content.from_text("x"))
    repo.create_or_update_redirect_datastream(ds.path, ds.url)
    with pytest.raises(TransportError):
        ds.get_content()
