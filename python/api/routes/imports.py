"""
Import API Routes

Provides endpoints for detecting and importing bank statement files.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from importer import ImportSettings, StatementImporter
from statement_parser.errors import AccountNotFound, InvalidUpload, UnsupportedFormat

from ..auth import get_current_user_id
from ..database import get_importer, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


class Categorization(BaseModel):
    """Categorization breakdown."""

    by_keywords: int
    by_ai: int
    by_default: int


class ImportResponse(BaseModel):
    """Statement import result."""

    imported: int
    skipped: int
    bank_name: str
    categorization: Categorization | None = None
    warnings: list[str] = []


class Requisites(BaseModel):
    """Account requisites from a bank requisites PDF."""

    bank_name: str
    suggested_name: str
    card_last_four: str
    account_number: str | None = None
    currency: str = "RUB"
    owner_name: str | None = None


class DetectAccountResponse(BaseModel):
    """Detected bank and matching account."""

    bank_name: str
    account_number: str | None = None
    matched_account_id: str | None = None
    matched_account_name: str | None = None
    requisites: Requisites | None = None


async def _read_upload(file: UploadFile, settings: ImportSettings) -> bytes:
    content = await file.read()
    if len(content) > settings.max_upload_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {settings.max_upload_size // 1024 // 1024}MB",
        )
    return content


@router.post("/detect", response_model=DetectAccountResponse)
async def detect_account(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    importer: StatementImporter = Depends(get_importer),
    settings: ImportSettings = Depends(get_settings),
) -> DetectAccountResponse:
    """Detect bank and account from a statement or requisites file.

    Args:
        file: Uploaded CSV or PDF
        user_id: Calling user
        importer: Statement importer

    Returns:
        Bank name, account number and the matching account if any
    """
    content = await _read_upload(file, settings)

    try:
        result = importer.detect_account(user_id, file.filename or "", content)
    except (UnsupportedFormat, InvalidUpload) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return DetectAccountResponse(**result.to_dict())


@router.post("/{account_id}", response_model=ImportResponse)
async def import_statement(
    account_id: str,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    importer: StatementImporter = Depends(get_importer),
    settings: ImportSettings = Depends(get_settings),
) -> ImportResponse:
    """Import a statement file into an account.

    Args:
        account_id: Destination account
        file: Uploaded CSV or PDF
        user_id: Calling user
        importer: Statement importer

    Returns:
        Imported and skipped counts with the categorization breakdown
    """
    content = await _read_upload(file, settings)

    try:
        result = importer.import_statement(user_id, account_id, file.filename or "", content)
    except AccountNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (UnsupportedFormat, InvalidUpload) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info(f"User {user_id} imported {result.imported} transactions into {account_id}")
    return ImportResponse(**result.to_dict())
