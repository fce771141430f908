import httpx
import pytest

from conftest import BASE_URL, FakeStoreAPI, external_item

from fakeshop.core.errors import NotFoundError, UpstreamUnavailableError
from fakeshop.external.fakestore import ExternalItem, FakestoreClient


@pytest.mark.asyncio
async def test_fetch_all_preserves_catalog_order(fakestore):
    items = await fakestore.client().fetch_all()

    assert [item.id for item in items] == [1, 2, 3]
    assert items[0].title == "Backpack"
    assert items[0].rating.count == 120
    assert fakestore.requests == ["/products"]


@pytest.mark.asyncio
async def test_fetch_by_id_returns_item(fakestore):
    item = await fakestore.client().fetch_by_id(2)

    assert item.title == "T-Shirt"
    assert float(item.price) == 22.3


@pytest.mark.asyncio
async def test_fetch_by_id_maps_404_to_not_found(fakestore):
    with pytest.raises(NotFoundError):
        await fakestore.client().fetch_by_id(404)


@pytest.mark.asyncio
async def test_empty_body_for_unknown_id_is_not_found():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b""))
    client = FakestoreClient(BASE_URL, transport=transport)

    with pytest.raises(NotFoundError):
        await client.fetch_by_id(21)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [500, 502, 429])
async def test_other_status_codes_are_upstream_unavailable(fakestore, status):
    fakestore.status = status
    client = fakestore.client()

    with pytest.raises(UpstreamUnavailableError):
        await client.fetch_all()
    with pytest.raises(UpstreamUnavailableError):
        await client.fetch_by_id(1)


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_unavailable(fakestore):
    fakestore.down = True

    with pytest.raises(UpstreamUnavailableError):
        await fakestore.client().fetch_all()


@pytest.mark.asyncio
async def test_timeout_is_upstream_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    client = FakestoreClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamUnavailableError):
        await client.fetch_by_id(1, timeout=0.01)


@pytest.mark.asyncio
async def test_malformed_list_is_upstream_unavailable():
    api = FakeStoreAPI()
    api.items = [{"id": 1}]

    with pytest.raises(UpstreamUnavailableError):
        await api.client().fetch_all()


@pytest.mark.asyncio
async def test_unusable_ids_do_not_fail_the_list():
    missing_id = external_item(0, "No id")
    del missing_id["id"]
    api = FakeStoreAPI(
        [external_item(1), external_item(None), external_item(2.5), missing_id, external_item({"x": 1})]
    )

    items = await api.client().fetch_all()

    assert len(items) == 5
    assert [item.numeric_id for item in items] == [1, None, None, None, None]


@pytest.mark.asyncio
async def test_ping_reports_status_code(fakestore):
    assert await fakestore.client().ping() == 200


def test_trailing_slash_is_stripped_from_base_url():
    assert FakestoreClient("https://fakestore.test/").base_url == BASE_URL


@pytest.mark.parametrize(
    "raw_id, expected",
    [
        (5, 5),
        ("12", 12),
        (" 8 ", 8),
        (4.0, 4),
        ("abc", None),
        (0, None),
        (-3, None),
        ("-2", None),
        (None, None),
        (3.5, None),
        (True, None),
        ({"x": 1}, None),
        ([7], None),
    ],
)
def test_numeric_id(raw_id, expected):
    assert ExternalItem.model_validate(external_item(raw_id)).numeric_id == expected
