"""Match app users to GoHighLevel users by name or email.

GHL user records carry `id`, `firstName`, `lastName` (plus email etc.).
Matching runs over an already-fetched user list so a single request can
both confirm a stored id and fall back to a name search.

The list comes straight from the CRM: entries that are not mappings are
skipped and non-string name fields are treated as missing.
"""
import logging
from typing import Any, Iterable, Mapping

from app.utils.normalization import normalize_email, normalize_search_text

logger = logging.getLogger(__name__)


def ghl_user_field(ghl_user: Mapping[str, Any], key: str) -> str:
    value = ghl_user.get(key)
    return value.strip() if isinstance(value, str) else ""


def _records(users: Iterable[Any]) -> Iterable[Mapping[str, Any]]:
    return (ghl_user for ghl_user in users if isinstance(ghl_user, Mapping))


def ghl_user_name(ghl_user: Mapping[str, Any]) -> str:
    first = ghl_user_field(ghl_user, "firstName")
    last = ghl_user_field(ghl_user, "lastName")
    return f"{first} {last}".strip()


def find_user_by_id(users: Iterable[Any], ghl_user_id: str) -> Mapping[str, Any] | None:
    for ghl_user in _records(users):
        if ghl_user.get("id") == ghl_user_id:
            return ghl_user
    return None


def find_user_by_email(users: Iterable[Any], email: str | None) -> Mapping[str, Any] | None:
    """Exact, case-insensitive email match."""
    wanted = normalize_email(email)
    if not wanted:
        return None
    for ghl_user in _records(users):
        if normalize_email(ghl_user_field(ghl_user, "email")) == wanted:
            return ghl_user
    return None


def _words_in_name_parts(words: list[str], ghl_user: Mapping[str, Any]) -> bool:
    first = normalize_search_text(ghl_user_field(ghl_user, "firstName")) or ""
    last = normalize_search_text(ghl_user_field(ghl_user, "lastName")) or ""
    return all(word in first or word in last for word in words)


def _name_matches(search: str, ghl_user: Mapping[str, Any]) -> bool:
    full_name = normalize_search_text(ghl_user_name(ghl_user)) or ""
    words = search.split(" ")

    if full_name == search:
        return True

    if search in full_name:
        # "rob" inside "robert koch" is fine; multi-word searches must hit first/last name parts
        if len(words) >= 2:
            return _words_in_name_parts(words, ghl_user)
        return True

    return _words_in_name_parts(words, ghl_user)


def find_user_by_name(
    users: list[Any],
    name: str | None,
    *,
    overrides: Mapping[str, str] | None = None,
    aliases: Iterable[str | None] = (),
    email: str | None = None,
) -> Mapping[str, Any] | None:
    """Find the GHL user for an app user's display name.

    Args:
        users: GHL users for the location
        name: The app user's display name
        overrides: Known name -> GHL id pairs that fuzzy matching gets wrong
        aliases: Other keys to try in `overrides` (e.g. the username)
        email: Tried as an exact match when no name matches

    Returns:
        The first matching GHL user, or None
    """
    for key in (name, *aliases):
        if key and overrides and key in overrides:
            mapped = find_user_by_id(users, overrides[key])
            if mapped is not None:
                logger.info("Matched GHL user %s via override", mapped.get("id"))
                return mapped

    search = normalize_search_text(name)
    if search:
        for ghl_user in _records(users):
            if _name_matches(search, ghl_user):
                logger.info("Matched GHL user %s by name", ghl_user.get("id"))
                return ghl_user

    by_email = find_user_by_email(users, email)
    if by_email is not None:
        logger.info("Matched GHL user %s by email", by_email.get("id"))
        return by_email

    logger.warning("No GHL user matches the requested name")
    return None
