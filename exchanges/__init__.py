"""
Centralized exchange integrations and the error kinds they raise.
"""
