"""Board access checks"""

from ..errors import AccessDenied, BoardNotFound
from ..services.database import Database


def user_can_access_board(db: Database, board: dict, user_id: str) -> bool:
    if board["user_id"] == user_id:
        return True
    return db.is_board_member(board["id"], user_id)


def ensure_board_access(db: Database, board_id: str, user_id: str) -> dict:
    """Return the board if ``user_id`` owns it or is a member.

    Board existence is checked first so a missing board is a 404, not a 403.
    """
    board = db.get_board(board_id)
    if not board:
        raise BoardNotFound()
    if not user_can_access_board(db, board, user_id):
        raise AccessDenied()
    return board
