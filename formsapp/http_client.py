"""Shared HTTP session for talking to a remote FormsApp backend."""

import requests

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session speaking JSON.

    No retry adapter is mounted; failed calls go straight back to the caller.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"Accept": "application/json"})
    return _session
