"""
repositories/ - Data Access Layer
==================================
One repository per design point (catalog, recordings, promotions) plus an
integrity checker. Repositories run the SQL and return domain model
objects or plain dicts for the verification queries.
"""
