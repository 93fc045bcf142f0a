"""
Version 1 of the API.

The routes of this version are mounted under ``/api`` by
``app.main.create_app``.
"""
