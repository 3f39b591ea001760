"""
Per-client rate limiting for the contact endpoint.

A single slowapi Limiter with in-memory moving-window storage keyed by the
client address. Only routes decorated with `limiter.limit` are counted.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# 10 requests per sliding 60 second window
CONTACT_RATE_LIMIT = "10/minute"

limiter = Limiter(key_func=get_remote_address, strategy="moving-window")
