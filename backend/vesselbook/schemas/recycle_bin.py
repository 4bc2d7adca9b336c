from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel


class TrashedItem(BaseModel):
    type: str
    type_label: str
    id: int
    label: Optional[str] = None
    description: Optional[str] = None
    deleted_at: datetime


class RecycleBinResponse(BaseModel):
    data: List[TrashedItem]
    counts: Dict[str, int]
    total: int


class EmptyResponse(BaseModel):
    message: str
    deleted: int
