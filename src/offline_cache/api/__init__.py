"""FastAPI application exposing the worker over HTTP."""
