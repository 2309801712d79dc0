"""
models/ - Domain Models
=======================
Plain dataclasses: the catalog entities stored in PostgreSQL and the
logical relation types the normalization engine works on.
"""
