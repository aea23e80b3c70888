"""Board routes"""

from fastapi import APIRouter, Depends, HTTPException

from ..auth.access import ensure_board_access
from ..auth.jwt import get_current_user
from ..dependencies import get_db
from ..models.board import BoardCreate, JoinBoardRequest
from ..services.conversation import ConversationRecord
from ..services.database import Database

router = APIRouter()


@router.post("")
async def create_board(
    data: BoardCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Create a board with the default columns"""
    board = db.create_board(data.title, user["id"])
    return get_board_tree(db, board)


@router.post("/join")
async def join_board(
    data: JoinBoardRequest,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Join a board with its invite code"""
    board = db.get_board_by_invite_code(data.invite_code)
    if not board:
        raise HTTPException(status_code=404, detail="Invalid invite code or board not found")

    if board["user_id"] == user["id"] or db.is_board_member(board["id"], user["id"]):
        raise HTTPException(status_code=400, detail="You are already a member of this board")

    db.add_board_member(board["id"], user["id"])
    return {"board_id": board["id"], "joined": True}


@router.get("/{board_id}")
async def get_board(
    board_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Get board with columns and tasks"""
    board = ensure_board_access(db, board_id, user["id"])
    return get_board_tree(db, board)


@router.post("/{board_id}/invite-code")
async def get_invite_code(
    board_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Return the board's invite code, generating it on first request"""
    board = ensure_board_access(db, board_id, user["id"])
    if board["user_id"] != user["id"]:
        raise HTTPException(status_code=403, detail="Only the board owner can share the invite code")

    return {"invite_code": db.ensure_invite_code(board_id)}


@router.get("/{board_id}/messages")
async def list_messages(
    board_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Chat history of a board, oldest first"""
    ensure_board_access(db, board_id, user["id"])
    return ConversationRecord(db).history(board_id)


def get_board_tree(db: Database, board: dict) -> dict:
    columns = db.list_columns(board["id"])
    tree = dict(board)
    tree["columns"] = [
        {**column, "tasks": db.list_tasks(column["id"])}
        for column in columns
    ]
    tree["member_ids"] = db.get_board_member_ids(board["id"])
    return tree
