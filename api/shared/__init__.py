"""
Reusable data-access building blocks: the generic repository, query option
parsing, pagination metadata and the response envelope.
"""
