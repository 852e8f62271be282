"""
Tests for the HTTP data pack source (aiohttp session mocked).
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from svbot.mappings.errors import MalformedDocument, TransportFailure
from svbot.mappings.source import RemoteDataSource
from tests.helpers import DATA_PACK_URL


def _session(status: int = 200, body: str = "", enter_error: BaseException = None) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=body)

    request = MagicMock()
    request.__aenter__ = AsyncMock(return_value=response, side_effect=enter_error)
    request.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    session.get = MagicMock(return_value=request)
    session.close = AsyncMock()
    return session


class TestParseDocument:
    def test_valid(self, sample_pack):
        assert RemoteDataSource.parse_document(json.dumps(sample_pack)) == sample_pack

    def test_invalid_json(self):
        with pytest.raises(MalformedDocument):
            RemoteDataSource.parse_document("<html>502</html>")

    def test_root_not_an_object(self):
        with pytest.raises(MalformedDocument):
            RemoteDataSource.parse_document("[1, 2, 3]")

    def test_missing_pack_data(self):
        with pytest.raises(MalformedDocument):
            RemoteDataSource.parse_document(json.dumps({"ClubData": {"C": []}}))

    def test_pack_data_not_an_object(self):
        with pytest.raises(MalformedDocument):
            RemoteDataSource.parse_document(json.dumps({"PackData": []}))


class TestFetch:
    def test_success(self, sample_pack):
        session = _session(body=json.dumps(sample_pack))
        source = RemoteDataSource(DATA_PACK_URL, session=session)

        document = asyncio.run(source.fetch())

        assert document == sample_pack
        assert session.get.call_args.args[0] == DATA_PACK_URL
        assert session.get.call_args.kwargs["headers"]["User-Agent"] == "SoccerverseBot/3.0"

    def test_non_2xx_status(self):
        source = RemoteDataSource(DATA_PACK_URL, session=_session(status=503))

        with pytest.raises(TransportFailure) as exc_info:
            asyncio.run(source.fetch())

        assert exc_info.value.status == 503

    def test_client_error(self):
        session = _session()
        session.get.side_effect = aiohttp.ClientConnectionError("connection refused")
        source = RemoteDataSource(DATA_PACK_URL, session=session)

        with pytest.raises(TransportFailure):
            asyncio.run(source.fetch())

    def test_timeout(self):
        source = RemoteDataSource(DATA_PACK_URL, session=_session(enter_error=asyncio.TimeoutError()))

        with pytest.raises(TransportFailure) as exc_info:
            asyncio.run(source.fetch())

        assert exc_info.value.status is None

    def test_malformed_body(self):
        source = RemoteDataSource(DATA_PACK_URL, session=_session(body="not json"))

        with pytest.raises(MalformedDocument):
            asyncio.run(source.fetch())

    def test_timeout_configuration(self):
        source = RemoteDataSource(DATA_PACK_URL, timeout=30.0)

        assert source.timeout.total == 30.0


class TestSessionLifecycle:
    def test_external_session_is_not_closed(self):
        session = _session()
        source = RemoteDataSource(DATA_PACK_URL, session=session)

        asyncio.run(source.close())

        session.close.assert_not_awaited()

    def test_context_manager_closes_owned_session(self):
        async def run():
            async with RemoteDataSource(DATA_PACK_URL) as source:
                session = source._get_session()
                assert not session.closed
            return session

        session = asyncio.run(run())

        assert session.closed
