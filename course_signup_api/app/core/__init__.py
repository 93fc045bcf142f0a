"""Configuration, logging, storage and validation helpers shared by all services."""
