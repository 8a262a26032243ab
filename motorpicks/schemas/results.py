from typing import List, Optional
from pydantic import BaseModel, ConfigDict

class OfficialResultRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    driver: str
    qualy_position: Optional[int] = None
    race_position: Optional[int] = None

class OfficialResultsResponse(BaseModel):
    gp_name: str
    count: int
    results: List[OfficialResultRow]
