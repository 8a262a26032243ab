from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.orm import Session
from motorpicks.api.deps import current_user_id
from motorpicks.db.session import get_db
from motorpicks.schemas.picks import PickCreate, PickOut, PickResultOut
from motorpicks.services import notifications
from motorpicks.services import picks as pick_service

router = APIRouter()

@router.post("", response_model=PickOut, status_code=201)
def submit_pick(payload: PickCreate,
                user_id: str = Depends(current_user_id),
                db: Session = Depends(get_db),
                mailer=Depends(notifications.get_mailer)):
    return pick_service.submit_pick(db, user_id, payload, mailer=mailer)

@router.get("/results", response_model=List[PickResultOut])
def my_results(gp_name: Optional[str] = Query(None, description="Filter by GP name"),
               user_id: str = Depends(current_user_id),
               db: Session = Depends(get_db)):
    return pick_service.list_pick_results(db, user_id, gp_name)
