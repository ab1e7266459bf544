from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from sqlmodel import Session

from app.database import get_session
from app.repositories.store_repo import StoreRepository

router = APIRouter(prefix="/store", tags=["Store"])

repo = StoreRepository()

KEY_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"

_MISSING = object()


@router.get("/{key}")
def get_document(
    key: str = Path(pattern=KEY_PATTERN),
    session: Session = Depends(get_session),
) -> Any:
    """
    Return the JSON document stored under `key` (e.g. 'orders', 'users').
    """
    value = repo.get(session, key, _MISSING)
    if value is _MISSING:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Key not found",
        )
    return value


@router.put("/{key}")
def put_document(
    key: str = Path(pattern=KEY_PATTERN),
    value: Any = Body(...),
    session: Session = Depends(get_session),
) -> Any:
    """
    Replace the document stored under `key`. Last write wins.
    """
    repo.put(session, key, value)
    return value


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    key: str = Path(pattern=KEY_PATTERN),
    session: Session = Depends(get_session),
):
    if not repo.delete(session, key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Key not found",
        )
