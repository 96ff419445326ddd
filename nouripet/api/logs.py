"""Weight and stool log API endpoints."""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from nouripet.core.database import get_db
from nouripet.models.models import WeightLog, StoolLog
from nouripet.schemas.schemas import (
    WeightLogCreate,
    WeightLogResponse,
    StoolLogCreate,
    StoolLogResponse,
)
from nouripet.api.dogs import get_dog_or_404

router = APIRouter(prefix="/log", tags=["logs"])


# ==================== Weight Logs ====================

@router.post("/weight", response_model=WeightLogResponse, status_code=201)
def create_weight_log(log: WeightLogCreate, db: Session = Depends(get_db)):
    """Log a weight measurement for a dog, in the dog's weight unit."""
    dog = get_dog_or_404(db, log.dog_id)

    weight_log = WeightLog(
        dog_id=log.dog_id,
        weight=log.weight,
        notes=log.notes,
        logged_at=log.logged_at or datetime.utcnow(),
    )
    db.add(weight_log)

    # Also update the dog's current weight
    dog.weight = log.weight

    db.commit()
    db.refresh(weight_log)
    return weight_log


@router.get("/weight/dog/{dog_id}", response_model=list[WeightLogResponse])
def get_weight_logs_for_dog(
    dog_id: int,
    limit: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db)
):
    """Get weight history for a dog."""
    get_dog_or_404(db, dog_id)
    return (
        db.query(WeightLog)
        .filter(WeightLog.dog_id == dog_id)
        .order_by(WeightLog.logged_at.desc())
        .limit(limit)
        .all()
    )


@router.delete("/weight/{log_id}", status_code=204)
def delete_weight_log(log_id: int, db: Session = Depends(get_db)):
    """Delete a weight log entry."""
    log = db.query(WeightLog).filter(WeightLog.id == log_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Weight log not found")

    db.delete(log)
    db.commit()
    return None


# ==================== Stool Logs ====================

@router.post("/stool", response_model=StoolLogResponse, status_code=201)
def create_stool_log(log: StoolLogCreate, db: Session = Depends(get_db)):
    """Log a stool score (1 hard, 7 liquid) for a dog."""
    get_dog_or_404(db, log.dog_id)

    stool_log = StoolLog(
        dog_id=log.dog_id,
        score=log.score,
        notes=log.notes,
        logged_at=log.logged_at or datetime.utcnow(),
    )
    db.add(stool_log)
    db.commit()
    db.refresh(stool_log)
    return stool_log


@router.get("/stool/dog/{dog_id}", response_model=list[StoolLogResponse])
def get_stool_logs_for_dog(
    dog_id: int,
    limit: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db)
):
    """Get stool history for a dog."""
    get_dog_or_404(db, dog_id)
    return (
        db.query(StoolLog)
        .filter(StoolLog.dog_id == dog_id)
        .order_by(StoolLog.logged_at.desc())
        .limit(limit)
        .all()
    )


@router.delete("/stool/{log_id}", status_code=204)
def delete_stool_log(log_id: int, db: Session = Depends(get_db)):
    """Delete a stool log entry."""
    log = db.query(StoolLog).filter(StoolLog.id == log_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Stool log not found")

    db.delete(log)
    db.commit()
    return None
