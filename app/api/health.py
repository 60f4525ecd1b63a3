from fastapi import APIRouter

from app.db.neo4j import check_connection

router = APIRouter()


@router.get("/health")
def health_check():
    """Report whether the database answers; always 200."""
    database = "connected" if check_connection() else "unavailable"
    return {"status": "ok", "database": database}
