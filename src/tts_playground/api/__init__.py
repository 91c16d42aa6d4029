"""
FastAPI REST API Layer for tts-playground.

    - routes.py: /health, /pricing, /voices, /synthesize, /metrics
    - schemas.py: Request/response pydantic models
    - dependencies.py: FastAPI dependency injection
"""
