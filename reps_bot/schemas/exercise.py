from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Exercise(BaseModel):
    """Catalog exercise with the metabolic parameters used for calorie estimates."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    emoji: str
    met: Optional[float] = None  # Metabolic Equivalent of Task
    time_per_rep: Optional[float] = None  # seconds under tension per rep
