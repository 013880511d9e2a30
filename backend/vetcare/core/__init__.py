"""Cross-cutting concerns: configuration, logging, errors, events and HTTP helpers."""
