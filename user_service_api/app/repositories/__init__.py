"""
Repositories own all reads and writes to persistent storage.

One repository per table; services depend on repositories, never on
``sqlite3`` directly.
"""
