"""Statusio MCP Server.

Check premium subscription status across Real-Debrid, AllDebrid, Premiumize,
TorBox and Debrid-Link from one place, with cached results and expiry alerts.
"""

__version__ = "1.2.0"
