"""
Filter Resolver

Maps user-facing filter criteria onto the parameter set the pharmacology
search API expects: condition symbols become inclusive or exclusive range
bounds, relation lists become a "|"-joined OR expression, and a sort column
plus direction becomes the API's ordering expression.

Resolution never fails. Unrecognized condition symbols and sort directions
produce no filter.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional

from ..models.pharmacology_models import FilterCriteria, ResolvedQueryParameters

logger = logging.getLogger(__name__)

RELATION_SEPARATOR = "|"

ASCENDING = "ascending"
DESCENDING = "descending"


class RangeBounds(NamedTuple):
    """Value filter for one numeric dimension. At most one field is set."""
    exact: Optional[str] = None
    minimum: Optional[str] = None
    minimum_exclusive: Optional[str] = None
    maximum: Optional[str] = None
    maximum_exclusive: Optional[str] = None


NO_BOUNDS = RangeBounds()


def resolve_range(condition: Optional[str], value: Optional[str]) -> RangeBounds:
    """
    Turn a condition symbol and a value into a range filter.

    Args:
        condition: One of '>', '<', '=', '<=', '>='
        value: Numeric string

    Returns:
        RangeBounds with the matching field set, or NO_BOUNDS when either
        argument is missing or the condition is not recognized.

    Example:
        >>> resolve_range('>=', '5')
        RangeBounds(exact=None, minimum='5', minimum_exclusive=None, maximum=None, maximum_exclusive=None)
    """
    if condition is None or value is None:
        return NO_BOUNDS

    if condition == '>':
        return RangeBounds(minimum_exclusive=value)
    if condition == '<':
        return RangeBounds(maximum_exclusive=value)
    if condition == '=':
        return RangeBounds(exact=value)
    if condition == '<=':
        return RangeBounds(maximum=value)
    if condition == '>=':
        return RangeBounds(minimum=value)

    logger.debug(f"Unrecognized condition {condition!r}, no value filter applied")
    return NO_BOUNDS


def serialize_relations(relations: Optional[Iterable[str]]) -> Optional[str]:
    """
    Join relation symbols into the API's OR expression.

    Every symbol is followed by the separator, so the result always ends
    with one; the API treats "a|b|" and "a|b" alike.

    Returns:
        The expression, or None for a missing or empty list.
    """
    if not relations:
        return None
    expr = "".join(f"{relation}{RELATION_SEPARATOR}" for relation in relations)
    return expr or None


def split_relations(expr: Optional[str]) -> List[str]:
    """Inverse of serialize_relations; empty fragments are dropped."""
    if not expr:
        return []
    return [relation for relation in expr.split(RELATION_SEPARATOR) if relation]


def encode_sort(column: Optional[str], direction: Optional[str]) -> Optional[str]:
    """
    Encode a sort column and direction as the API's ordering expression.

    'ascending' gives the bare variable reference (?column), 'descending'
    wraps it as DESC(?column). Anything else gives None and the API's
    default ordering applies.
    """
    if column is None or direction is None:
        return None
    if direction == ASCENDING:
        return f"?{column}"
    if direction == DESCENDING:
        return f"DESC(?{column})"

    logger.debug(f"Unrecognized sort direction {direction!r}, using default ordering")
    return None


def resolve_filters(criteria: FilterCriteria) -> ResolvedQueryParameters:
    """
    Resolve filter criteria into API query parameters.

    The activity value filter is all-or-nothing: it is only produced when
    unit, activity type, condition and value are all given. The pChembl
    filter needs its condition and value.
    """
    activity = NO_BOUNDS
    if (criteria.activity_unit is not None and criteria.activity_type is not None
            and criteria.activity_condition is not None and criteria.activity_value is not None):
        activity = resolve_range(criteria.activity_condition, criteria.activity_value)
    elif criteria.activity_value is not None:
        logger.debug("Activity value given without unit, type and condition; no activity filter applied")

    pchembl = resolve_range(criteria.pchembl_condition, criteria.pchembl_value)

    return ResolvedQueryParameters(
        assay_organism=criteria.assay_organism,
        target_organism=criteria.target_organism,
        activity_type=criteria.activity_type,
        activity_unit=criteria.activity_unit,
        activity_value=activity.exact,
        min_activity_value=activity.minimum,
        min_ex_activity_value=activity.minimum_exclusive,
        max_activity_value=activity.maximum,
        max_ex_activity_value=activity.maximum_exclusive,
        activity_relation_expr=serialize_relations(criteria.activity_relations),
        pchembl_value=pchembl.exact,
        min_pchembl_value=pchembl.minimum,
        min_ex_pchembl_value=pchembl.minimum_exclusive,
        max_pchembl_value=pchembl.maximum,
        max_ex_pchembl_value=pchembl.maximum_exclusive,
        target_type=criteria.target_type,
        lens=criteria.lens,
        sort_expr=encode_sort(criteria.sort_column, criteria.sort_direction),
    )
