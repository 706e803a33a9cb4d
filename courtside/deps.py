from fastapi import Request

from courtside.config import Settings, settings


def get_settings() -> Settings:
    return settings


def get_pool(request: Request):
    return request.app.state.pool


def get_llm(request: Request):
    return request.app.state.llm


def get_backend(request: Request):
    return request.app.state.backend
