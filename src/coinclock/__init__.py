# src/coinclock/__init__.py
"""
CoinClock - Historical Crypto Price Server on a Virtual Clock

Serves cryptocurrency price data over HTTP while replaying history:
a virtual clock advances one simulated day per fixed real-time interval
and a background daemon refreshes the whole coin catalog for each day.
"""

__version__ = "1.0.0"
