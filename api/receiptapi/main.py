import os, logging
from fastapi import FastAPI, UploadFile, File, HTTPException, status, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from dotenv import load_dotenv
# .env fills gaps only; real environment variables win
load_dotenv(override=False)

from . import __version__
from .logging_config import setup_structured_logging, log_with_context, log_observer
setup_structured_logging()
logger = logging.getLogger("receiptapi")

from .db import init_db, SessionLocal, get_or_create_user, reference_exists, create_transaction, list_transactions
from .middleware.request_context import RequestContextMiddleware
from .ocr import OCRError
from .parsers.router import parse_any, parse_text
from .quota import QuotaError, apply_quota
from .schemas import ConfirmRequest, ExtractionResponse, TextExtractionRequest, TransactionOut, TransactionPage
from .security import current_user
from .storage import LOCAL_STORAGE_DIR, ensure_storage_dir, is_allowed_image, save_image

try:
    init_db()
except Exception as e:
    logger.error(f"Database initialization failed: {e}")

ensure_storage_dir()

MAX_FILE_MB = float(os.getenv("MAX_FILE_MB", "2"))
SERVICE_NAME = "Receipt Slip Parser"
DUPLICATE_REFERENCE = {"reference_id": ["The reference id has already been taken."]}

app = FastAPI(title=SERVICE_NAME, version=__version__)

cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "x-api-key", "X-API-Key"],
)
app.add_middleware(RequestContextMiddleware)
app.mount("/storage", StaticFiles(directory=str(LOCAL_STORAGE_DIR)), name="storage")


def _log_extraction(request: Request, user_id: str, result: dict, meta: dict, image_url: str | None = None):
    log_with_context(
        logger,
        logging.INFO,
        "Extracted Data",
        request_id=getattr(request.state, "request_id", None),
        user_id=user_id,
        reference_id=result.get("reference_id"),
        txn_date=result.get("date"),
        amount=result.get("amount"),
        transaction_type=result.get("transaction_type"),
        vendor=result.get("vendor"),
        image_url=image_url,
        processing_ms=meta.get("processing_ms"),
    )


@app.get("/health")
def health():
    """JSON health/info endpoint for monitoring and scripts."""
    return {"ok": True, "service": SERVICE_NAME, "version": __version__}


@app.post("/v1/receipts", response_model=ExtractionResponse)
async def upload_receipt(
    request: Request,
    file: UploadFile = File(...),
    user_id: str = Depends(current_user),
):
    if not is_allowed_image(file.filename, file.content_type):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                            detail={"image_url": ["The image must be a file of type: jpeg, png, jpg."]})

    contents = await file.read()
    mb = len(contents) / (1024 * 1024)
    if mb > MAX_FILE_MB:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                            detail={"image_url": [f"File too large ({mb:.2f} MB). Max {MAX_FILE_MB} MB"]})

    try:
        _, image_url = await run_in_threadpool(save_image, file.filename, contents)
        result, meta, _vendor = await run_in_threadpool(parse_any, file.filename, contents, log_observer)
    except OCRError as e:
        logger.error(f"OCR error: {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                            detail={"image_url": ["OCR failed to extract text. Please try again."]})
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error in /v1/receipts")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    _log_extraction(request, user_id, result, meta, image_url)
    return ExtractionResponse(**result, image_url=image_url, meta=meta)


@app.post("/v1/receipts/text", response_model=ExtractionResponse)
def extract_from_text(request: Request, body: TextExtractionRequest, user_id: str = Depends(current_user)):
    """Run the extractors on an existing transcription; no OCR, nothing stored."""
    result, meta, _vendor = parse_text(body.text, log_observer)
    _log_extraction(request, user_id, result, meta)
    return ExtractionResponse(**result, meta=meta)


@app.post("/v1/transactions/confirm", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def confirm_transaction(body: ConfirmRequest, user_id: str = Depends(current_user)):
    logger.info("Image URL in confirm", extra={"image_url": body.image_url, "user_id": user_id})

    with SessionLocal() as dbs:
        if reference_exists(dbs, body.reference_id):
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=DUPLICATE_REFERENCE)

        try:
            txn = create_transaction(
                dbs,
                user_id=user_id,
                reference_id=body.reference_id,
                date=body.date,
                amount=body.amount,
                transaction_type=body.transaction_type,
                image_url=body.image_url,
            )
        except IntegrityError:
            # a concurrent confirm inserted the same reference first
            dbs.rollback()
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=DUPLICATE_REFERENCE)

        user = get_or_create_user(dbs, user_id)
        counters = user.counters()
        try:
            apply_quota(counters, body.date)
        except QuotaError as e:
            # nothing from this request is kept
            dbs.rollback()
            log_with_context(logger, logging.INFO, "Transaction rejected by quota",
                             user_id=user_id, reference_id=body.reference_id, reason=e.message)
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail={e.field: [e.message]})

        user.store_counters(counters)
        dbs.commit()
        dbs.refresh(txn)
        return TransactionOut.from_row(txn)


@app.get("/v1/transactions", response_model=TransactionPage)
def get_transactions(page: int = 1, per_page: int = 10, user_id: str = Depends(current_user)):
    page = max(page, 1)
    per_page = min(max(per_page, 1), 100)
    with SessionLocal() as dbs:
        items, total = list_transactions(dbs, user_id, page=page, per_page=per_page)
        return TransactionPage(
            items=[TransactionOut.from_row(t) for t in items],
            page=page,
            per_page=per_page,
            total=total,
        )
