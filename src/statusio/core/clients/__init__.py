"""Provider account-info clients, one module per service.

``ADAPTERS`` is the dispatch table used by the aggregator. Supporting a new
service means adding a client module and one row here.
"""

from ..models import Provider
from . import alldebrid, debridlink, premiumize, realdebrid, torbox
from .base import Adapter

ADAPTERS: dict[Provider, Adapter] = {
    Provider.REALDEBRID: realdebrid.fetch_status,
    Provider.ALLDEBRID: alldebrid.fetch_status,
    Provider.PREMIUMIZE: premiumize.fetch_status,
    Provider.TORBOX: torbox.fetch_status,
    Provider.DEBRIDLINK: debridlink.fetch_status,
}

__all__ = ["ADAPTERS", "Adapter"]
