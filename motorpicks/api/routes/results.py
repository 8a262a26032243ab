from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from motorpicks.db.session import get_db
from motorpicks.schemas.results import OfficialResultsResponse
from motorpicks.services import results as results_service

router = APIRouter()

@router.get("/{gp_name}", response_model=OfficialResultsResponse)
def official_results(gp_name: str, db: Session = Depends(get_db)):
    rows = results_service.get_official_results(db, gp_name)
    if not rows:
        raise HTTPException(404, f"No official results for '{gp_name}'")
    return {"gp_name": gp_name, "count": len(rows), "results": rows}
