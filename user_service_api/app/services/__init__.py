"""
Service layer abstraction.

Services hold the business rules for a domain and sit between the
transport handlers and the repositories.
"""
