"""
Exchange-neutral trading types shared by adapters and their callers.
"""
