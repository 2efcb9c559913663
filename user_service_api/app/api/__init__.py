"""
Transport bindings for the service.

``v1`` holds the HTTP routes; ``rpc`` holds the message-pattern
handlers served over TCP.  Both call the same ``UserService``.
"""
