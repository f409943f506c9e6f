from typing import List, Optional

from pydantic import BaseModel, Field

from accessmenu.services.ingestion_service import DishSubmission, IngestionResult


class DishSubmissionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    explanation: str = Field(..., min_length=1)
    language: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = None
    source: Optional[str] = None

    def to_submission(self) -> DishSubmission:
        return DishSubmission(**self.model_dump())


class IngestionResultOut(BaseModel):
    dish_exists: bool
    saved: bool
    matched_name: Optional[str] = None
    similarity: Optional[float] = None
    menu_language: Optional[str] = None

    @classmethod
    def from_result(cls, result: IngestionResult) -> "IngestionResultOut":
        return cls(
            dish_exists=result.dish_exists,
            saved=result.saved,
            matched_name=result.matched_name,
            similarity=round(result.similarity, 4) if result.similarity is not None else None,
            menu_language=result.menu_language,
        )
