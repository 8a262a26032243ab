from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from motorpicks.api.deps import require_internal_key
from motorpicks.db.session import get_db
from motorpicks.schemas.picks import ProcessPicksResponse
from motorpicks.services import notifications
from motorpicks.services.settlement import settle_all_picks

router = APIRouter()

@router.post("/process-picks", response_model=ProcessPicksResponse,
             dependencies=[Depends(require_internal_key)])
def process_picks(db: Session = Depends(get_db), mailer=Depends(notifications.get_mailer)):
    """Grade every unsettled pick against the official results."""
    results = settle_all_picks(db, mailer=mailer)
    return {"message": "Picks procesados ✅", "results": results}
