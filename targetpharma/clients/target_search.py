"""
Open PHACTS Target Pharmacology Client

httpx-based client for the Open PHACTS linked data API target pharmacology
endpoints (/target/pharmacology/count and /target/pharmacology/pages).

Credentials (app_id, app_key) are passed through on every request.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .base import PharmacologySearchClient, SearchResponse
from ..core.exceptions import (
    MalformedResponseError,
    SearchConnectionError,
    SearchTimeoutError,
)
from ..models.pharmacology_models import (
    PharmacologyRecord,
    ResolvedQueryParameters,
    TargetOrganism,
)

logger = logging.getLogger(__name__)

COUNT_PATH = "/target/pharmacology/count"
PAGES_PATH = "/target/pharmacology/pages"

# ResolvedQueryParameters field -> API query parameter
FILTER_PARAMETER_NAMES = {
    'assay_organism': 'assay_organism',
    'target_organism': 'target_organism',
    'activity_type': 'activity_type',
    'activity_value': 'activity_value',
    'min_activity_value': 'min-activity_value',
    'min_ex_activity_value': 'minEx-activity_value',
    'max_activity_value': 'max-activity_value',
    'max_ex_activity_value': 'maxEx-activity_value',
    'activity_unit': 'activity_unit',
    'activity_relation_expr': 'activity_relation',
    'pchembl_value': 'pchembl',
    'min_pchembl_value': 'min-pChembl',
    'min_ex_pchembl_value': 'minEx-pChembl',
    'max_pchembl_value': 'max-pChembl',
    'max_ex_pchembl_value': 'maxEx-pChembl',
    'target_type': 'target_type',
    'lens': '_lens',
}


class TargetPharmacologySearch(PharmacologySearchClient):
    """
    Target pharmacology search against the Open PHACTS API.

    Example:
        >>> async with TargetPharmacologySearch(app_url, app_id, app_key) as searcher:
        ...     response = await searcher.count_query(uri, params)
        ...     total = searcher.parse_count(response.raw)
    """

    def __init__(
        self,
        app_url: str,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        timeout: float = 30.0,
        **client_kwargs: Any,
    ):
        """
        Initialize the client.

        Args:
            app_url: API base URL, e.g. https://beta.openphacts.org/1.5
            app_id: Application ID
            app_key: Application key
            timeout: Request timeout in seconds
            client_kwargs: Extra httpx.AsyncClient arguments (e.g. transport)
        """
        super().__init__("OpenPHACTS", timeout=timeout)
        self.app_url = app_url.rstrip('/')
        self.app_id = app_id
        self.app_key = app_key
        self._client = httpx.AsyncClient(base_url=self.app_url, timeout=timeout, **client_kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # Queries
    # =========================================================================

    def build_filter_params(self, uri: str, params: ResolvedQueryParameters) -> Dict[str, str]:
        """Query parameters shared by count and page requests. Unset filters are omitted."""
        query = {'uri': uri, '_format': 'json'}
        if self.app_id is not None:
            query['app_id'] = self.app_id
        if self.app_key is not None:
            query['app_key'] = self.app_key

        for field, api_name in FILTER_PARAMETER_NAMES.items():
            value = getattr(params, field)
            if value is not None:
                query[api_name] = value
        return query

    async def count_query(self, uri: str, params: ResolvedQueryParameters) -> SearchResponse:
        return await self._get(COUNT_PATH, self.build_filter_params(uri, params))

    async def data_query(
        self,
        uri: str,
        params: ResolvedQueryParameters,
        page: int,
        page_size: int,
    ) -> SearchResponse:
        query = self.build_filter_params(uri, params)
        query['_page'] = str(page)
        query['_pageSize'] = str(page_size)
        if params.sort_expr is not None:
            query['_orderBy'] = params.sort_expr
        return await self._get(PAGES_PATH, query)

    async def _get(self, path: str, query: Dict[str, str]) -> SearchResponse:
        logger.debug(f"{self.server_name} GET {path}")
        try:
            response = await self._client.get(path, params=query)
        except httpx.TimeoutException as e:
            raise SearchTimeoutError(self.server_name, self.timeout, path) from e
        except httpx.HTTPError as e:
            raise SearchConnectionError(
                self.server_name,
                f"{self.server_name} request failed: {e}",
                details={'path': path, 'error_type': type(e).__name__}
            ) from e

        if not response.is_success:
            logger.warning(f"{self.server_name} {path} returned HTTP {response.status_code}")
            return SearchResponse(False, response.status_code, response.text)

        try:
            raw = response.json()
        except ValueError:
            raw = response.text
        return SearchResponse(True, response.status_code, raw)

    # =========================================================================
    # Response parsing
    # =========================================================================

    def parse_count(self, raw: Any) -> int:
        try:
            value = raw['result']['primaryTopic']['targetPharmacologyTotalResults']
        except (KeyError, TypeError):
            raise MalformedResponseError(
                "Count response has no targetPharmacologyTotalResults",
                field='result.primaryTopic.targetPharmacologyTotalResults',
                value=raw,
            )
        count = _as_count(value)
        if count is None:
            raise MalformedResponseError("Count is not an integer",
                                         field='targetPharmacologyTotalResults', value=value)
        if count < 0:
            raise MalformedResponseError("Count is negative",
                                         field='targetPharmacologyTotalResults', value=value)
        return count

    def parse_results(self, raw: Any) -> List[PharmacologyRecord]:
        try:
            items = raw['result']['items']
        except (KeyError, TypeError):
            raise MalformedResponseError("Pharmacology response has no item list",
                                         field='result.items', value=raw)
        if isinstance(items, dict):
            # single-item pages come back as an object
            items = [items]
        if not isinstance(items, list):
            raise MalformedResponseError("Pharmacology items are not a list",
                                         field='result.items', value=items)

        records = []
        for item in items:
            if not isinstance(item, dict):
                raise MalformedResponseError("Pharmacology item is not an object",
                                             field='result.items[]', value=item)
            try:
                records.append(_parse_item(item))
            except ValidationError as e:
                raise MalformedResponseError(f"Invalid pharmacology item: {e.error_count()} field error(s)",
                                             field='result.items[]', value=item.get('_about')) from e
        return records


def _as_count(value: Any) -> Optional[int]:
    """Integers, integral floats and digit strings; None for anything else (booleans included)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if (text[1:] if text.startswith('-') else text).isdecimal():
            return int(text)
    return None


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _label(value: Any) -> Optional[str]:
    """Linked data values are either literals or {_about, prefLabel} objects."""
    if isinstance(value, dict):
        return value.get('prefLabel') or value.get('label') or value.get('_about')
    return value


def _first(matches: List[Dict[str, Any]], *keys: str) -> Any:
    for match in matches:
        for key in keys:
            if match.get(key) is not None:
                return match[key]
    return None


def _parse_item(item: Dict[str, Any]) -> PharmacologyRecord:
    pmid = _label(item.get('pmid'))
    record: Dict[str, Any] = {
        'activity_uri': item.get('_about'),
        'pmid': str(pmid) if pmid is not None else None,
        'activity_relation': item.get('activity_relation'),
        'activity_activity_type': item.get('activity_type'),
        'activity_standard_value': item.get('standardValue', item.get('activity_value')),
        'activity_standard_units': _label(item.get('standardUnits', item.get('activity_unit'))),
        'p_chembl': item.get('pChembl'),
    }

    molecule = item.get('hasMolecule') or item.get('forMolecule') or {}
    if isinstance(molecule, dict):
        record['compound_uri'] = molecule.get('_about')
        # Compound properties are spread over the molecule's exact matches
        matches = [m for m in [molecule] + _as_list(molecule.get('exactMatch')) if isinstance(m, dict)]
        record['compound_pref_label'] = _first(matches, 'prefLabel')
        record['compound_smiles'] = _first(matches, 'smiles')
        record['compound_inchi'] = _first(matches, 'inchi')
        record['compound_inchikey'] = _first(matches, 'inchikey')
        record['compound_full_mwt'] = _first(matches, 'molweight', 'full_mwt')

    assay = item.get('hasAssay') or item.get('onAssay') or {}
    if isinstance(assay, dict):
        record['assay_description'] = assay.get('description')
        record['assay_organism'] = assay.get('assayOrganismName', assay.get('assay_organism'))
        target = assay.get('hasTarget') or assay.get('target') or {}
        if isinstance(target, dict):
            record['target_title'] = _label(target.get('title'))
            organisms = target.get('targetOrganismName', target.get('targetOrganism'))
            record['target_organisms'] = [
                TargetOrganism(organism=_label(organism)) for organism in _as_list(organisms)
            ]

    return PharmacologyRecord(**{k: v for k, v in record.items() if v is not None})
