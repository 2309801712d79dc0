"""
normalization/ - Normalization Engine
=====================================
Pure relational-design logic: dependency theory, normal form checks,
decomposition, sample-data checks and the exam's worked cases.
No database access happens in this layer.
"""
