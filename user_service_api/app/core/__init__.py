"""Configuration, logging, error types and database helpers."""
