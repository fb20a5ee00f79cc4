from __future__ import annotations

from typing import Annotated

from fastapi import Path

from app.schemas.security import MAX_ID

# Out-of-range ids are rejected here instead of overflowing the driver.
RowId = Annotated[int, Path(ge=1, le=MAX_ID)]
