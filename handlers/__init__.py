"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses the command arguments,
delegates to a Service and sends the reply back. No normalization or
SQL logic lives here.
"""
