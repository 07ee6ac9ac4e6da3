"""
Audit module.

Append-only trail of who changed which stock record, and how.
"""
