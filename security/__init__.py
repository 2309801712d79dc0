"""
security/ - Access Control
==========================
Decorators wrapped around every bot handler: a user whitelist and a
per-user sliding-window rate limit.
"""
