"""
Application package.

``core`` holds configuration, logging, errors and database access;
``schemas`` the pydantic contracts; ``repositories`` and ``services``
the storage and business layers; ``api`` and ``transport`` the HTTP
and message-pattern bindings on top of them.
"""
