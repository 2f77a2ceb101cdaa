from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from .models import SearchCriteria

# Term the web app reserves for "give me every responder name"
RESERVED_ALL_NAMES = "ALL"

# Query that loads the name index
NAME_INDEX_QUERY = {SearchCriteria.NAME.value: RESERVED_ALL_NAMES}

# When a link carries several parameters, the first one present wins
DEEP_LINK_PRECEDENCE: Tuple[SearchCriteria, ...] = (
    SearchCriteria.UNIQUE_ID,
    SearchCriteria.NAME,
    SearchCriteria.EMAIL,
)


@dataclass(frozen=True)
class DeepLink:
    criteria: SearchCriteria
    term: str


def parse_query(url_or_query: str) -> Dict[str, str]:
    """
    Extract query parameters from a full URL or a bare query string.

    Only the first value of a repeated parameter is kept; blank values are
    kept as empty strings so callers can tell "absent" from "blank".

    Examples:
        parse_query("https://host/page?uniqueId=AB12&name=Bob")
            -> {"uniqueId": "AB12", "name": "Bob"}
        parse_query("?email=alice%40example.com")
            -> {"email": "alice@example.com"}
    """
    text = (url_or_query or "").strip()
    if "?" in text or "://" in text:
        query = urlsplit(text).query
    else:
        query = text

    parsed = parse_qs(query, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


def select_deep_link(params: Mapping[str, Optional[str]]) -> Optional[DeepLink]:
    """
    Decide which lookup, if any, a deep link asks for.

    Strategy:
    1. Walk uniqueId, name, email in that order
    2. The first parameter with a non-blank value decides both the criteria
       and the search term
    3. Lower-precedence parameters are ignored

    Args:
        params: Query parameters, e.g. from parse_query()

    Returns:
        The DeepLink to resolve, or None when the link carries no usable parameter
    """
    for criteria in DEEP_LINK_PRECEDENCE:
        value = (params.get(criteria.value) or "").strip()
        if value:
            return DeepLink(criteria, value)
    return None


def build_query(criteria: SearchCriteria, term: str) -> Dict[str, str]:
    """Exactly one query parameter per lookup."""
    return {criteria.value: term}
