"""
db/ - Database Layer
====================
PostgreSQL connection pool, the normalized discography schema and the
exam's sample rows. This layer is the lowest in the architecture and has
no dependencies on other layers.
"""
