"""
Health check endpoint for liveness/readiness probes.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from regit.database import get_db

router = APIRouter(prefix="/healthz", tags=["health"])

@router.get("")
def health_check(request: Request, db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "providers": request.app.state.providers.names()}
