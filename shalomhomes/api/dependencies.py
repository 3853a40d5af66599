from fastapi import Request

from ..auth.google import GoogleOAuthClient
from ..config import Settings
from ..storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_google_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.google_oauth
