"""
Pydantic schema definitions for API payloads.

Request schemas accept loosely typed values because every field is
sanitized (clamped or clipped) by the services rather than rejected
at parse time.  Response schemas serialize with the camelCase keys
used in the stored documents.
"""
