"""Configuration, logging, persistence, identity and time helpers."""
