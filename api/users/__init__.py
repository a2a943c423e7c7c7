"""
Users feature: listing, lookup and lifecycle of user documents.
"""
