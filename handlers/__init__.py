"""
handlers/ - Presentation Layer
================================
Telegram command handlers. Each one parses the command arguments, reads the
caller's Session, calls a Service and formats the reply.
Business rules and store access stay in services/ and repositories/.
"""
