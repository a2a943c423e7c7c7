"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that every feature uses
(DB client, settings, logging, error types). Keep feature-specific queries
and business logic in the corresponding feature package (e.g. `users/`).
"""
