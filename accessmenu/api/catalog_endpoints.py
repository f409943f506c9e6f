"""
Shared dish catalog endpoints.
"""

import asyncio

from fastapi import APIRouter, Depends
import logging

from accessmenu.core.dependencies import get_ingestion_service, get_request_id
from accessmenu.core.exceptions import AccessMenuException, ErrorCode, ValidationRejectedError
from accessmenu.schemas.base import Envelope, StandardErrorResponse
from accessmenu.schemas.catalog import DishSubmissionRequest, IngestionResultOut
from accessmenu.services.ingestion_service import DishIngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.post(
    "/catalog/dishes",
    response_model=Envelope[IngestionResultOut],
    responses={
        422: {"model": StandardErrorResponse, "description": "Invalid submission"},
        503: {"model": StandardErrorResponse, "description": "Catalog write failed"}
    }
)
async def submit_dish(
    body: DishSubmissionRequest,
    ingestion_service: DishIngestionService = Depends(get_ingestion_service),
    request_id: str = Depends(get_request_id)
) -> Envelope[IngestionResultOut]:
    """
    Add a dish to the shared catalog.
    
    A dish whose name is close enough to an existing one is not saved;
    the response names the existing match instead.
    """
    # Store reads and writes are blocking
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, ingestion_service.ingest, body.to_submission())
    
    if result.error == ErrorCode.VALIDATION_ERROR:
        raise ValidationRejectedError(result.message or "Invalid dish submission")
    if result.error is not None:
        raise AccessMenuException(
            result.message or "Catalog write failed",
            error_code=result.error,
            details={'request_id': request_id},
            status_code=503
        )
    
    return Envelope(status="ok", data=IngestionResultOut.from_result(result))
