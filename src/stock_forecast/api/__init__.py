"""FastAPI REST API for stock-forecast."""
