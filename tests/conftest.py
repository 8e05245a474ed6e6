"""
Shared fixtures and a lightweight async test runner.

Provides a fallback event loop runner so `async def` tests execute even when
pytest-asyncio/anyio are unavailable in the environment (common in CI sandboxes).
"""
import asyncio
import inspect
from typing import Any, Dict, List, Optional

import pytest

from targetpharma.clients.base import PharmacologySearchClient, SearchResponse
from targetpharma.core.exceptions import MalformedResponseError
from targetpharma.models.pharmacology_models import PharmacologyRecord, TargetOrganism


def pytest_pyfunc_call(pyfuncitem):  # type: ignore[override]
    """
    Run coroutine tests using a local event loop when pytest lacks async plugins.

    Returns True when the async test was executed so pytest skips its default
    pyfunc execution path; otherwise returns None to let pytest handle sync tests.
    """
    test_obj = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_obj):
        return None

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        kwargs: Dict[str, Any] = {
            name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
        }
        loop.run_until_complete(test_obj(**kwargs))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


class FakeSearchClient(PharmacologySearchClient):
    """
    In-memory search client.

    count_raw is returned by count queries (an int, or anything else to make
    parse_count fail); data_raw is a list of records returned by data queries.
    Every call is recorded in `calls`.
    """

    def __init__(
        self,
        count_raw: Any = 0,
        data_raw: Any = None,
        count_success: bool = True,
        data_success: bool = True,
        count_error: Optional[Exception] = None,
        data_error: Optional[Exception] = None,
    ):
        super().__init__("FakeSearch", timeout=1.0)
        self.count_raw = count_raw
        self.data_raw = data_raw if data_raw is not None else []
        self.count_success = count_success
        self.data_success = data_success
        self.count_error = count_error
        self.data_error = data_error
        self.calls: List[tuple] = []
        self.closed = False

    async def count_query(self, uri, params):
        self.calls.append(('count', uri, params))
        if self.count_error is not None:
            raise self.count_error
        return SearchResponse(self.count_success, 200 if self.count_success else 500, self.count_raw)

    async def data_query(self, uri, params, page, page_size):
        self.calls.append(('data', uri, params, page, page_size))
        if self.data_error is not None:
            raise self.data_error
        return SearchResponse(self.data_success, 200 if self.data_success else 500, self.data_raw)

    def parse_count(self, raw):
        if not isinstance(raw, int):
            raise MalformedResponseError("not a count", value=raw)
        return raw

    def parse_results(self, raw):
        if not isinstance(raw, list):
            raise MalformedResponseError("not a list", value=raw)
        return raw

    async def aclose(self):
        self.closed = True

    @property
    def data_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == 'data']


@pytest.fixture
def records() -> List[PharmacologyRecord]:
    return [
        PharmacologyRecord(
            compound_pref_label="Imatinib",
            target_organisms=[TargetOrganism(organism="Homo sapiens")],
            assay_organism="Homo sapiens",
            assay_description="Inhibition of ABL1 kinase",
            activity_activity_type="IC50",
            activity_relation="=",
            activity_standard_value=25.0,
            activity_standard_units="nM",
            compound_smiles="Cc1ccc(NC(=O)c2ccc(CN3CCN(C)CC3)cc2)cc1Nc1nccc(-c2cccnc2)n1",
            p_chembl=7.6,
        ),
        PharmacologyRecord(
            compound_pref_label="Nilotinib",
            activity_activity_type="IC50",
            activity_relation="<",
            activity_standard_value=10.0,
            activity_standard_units="nM",
        ),
    ]


@pytest.fixture
def target_uri() -> str:
    return "http://www.conceptwiki.org/concept/5de0f011-68e0-4917-bac2-6d65e8f7effb"


@pytest.fixture
def make_client():
    """Factory for FakeSearchClient instances."""
    return FakeSearchClient
