"""FastAPI dependencies shared by the routes"""

from fastapi import Request

from .services.completion import CompletionGateway
from .services.database import Database


def get_db(request: Request) -> Database:
    db: Database = request.app.state.db
    db.initialize()
    return db


def get_gateway(request: Request) -> CompletionGateway:
    return request.app.state.gateway
