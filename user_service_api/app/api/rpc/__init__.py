"""
Message-pattern handlers.

Each module exposes a ``register_*`` function that adds its handlers
to a ``MessageRouter``; ``microservice.create_microservice`` calls them
when the TCP server is built.
"""
