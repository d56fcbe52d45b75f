"""Adaptador HTTP (FastAPI) sobre o ChatSessionManager."""
