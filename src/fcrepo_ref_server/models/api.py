from datetime import datetime
from typing import List

from pydantic import BaseModel


class VersionOut(BaseModel):
    name: str
    created_at: datetime


class VersionListOut(BaseModel):
    count: int
    items: List[VersionOut]
