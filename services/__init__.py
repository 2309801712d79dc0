"""
services/ - Business Logic Layer
=================================
Builds the bot's replies: normalization reports from the engine,
verification printouts from the repositories, exports and charts.
"""
