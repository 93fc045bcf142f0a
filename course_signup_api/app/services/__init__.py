"""
Service layer abstraction.

Each service encapsulates business logic for a domain and works on
the JSON documents exposed by ``core.db``.  API handlers only
translate service results and errors into HTTP responses.
"""
