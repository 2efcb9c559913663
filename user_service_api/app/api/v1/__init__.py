"""
Version 1 of the HTTP API.

Breaking changes to the HTTP surface should be introduced in a new
version subpackage (e.g. ``v2``) to preserve backwards compatibility.
"""
