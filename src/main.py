import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from create_tables import create_tables
from settings import get_settings

from certmgmt.common.blob_store import LocalBlobStore
from certmgmt.common.codec import PayloadCodec
from certmgmt.common.pdf_watermark import PdfWatermarker
from certmgmt.errors import ServiceError
from certmgmt.documents.controllers.document_controller import router as document_router
from certmgmt.certificates.controllers.certificate_controller import router as certificate_router
from certmgmt.verification.controllers.verification_controller import router as verification_router

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Iniciando aplicación...")
    create_tables()
    app.state.blob_store = LocalBlobStore(settings.blob_dir)
    app.state.watermarker = PdfWatermarker(PayloadCodec(settings.qr_secret))
    yield
    # --- Shutdown logic ---
    logger.info("Aplicación detenida")


app = FastAPI(
    title="Certificate Management",
    description="API para emisión y verificación de documentos certificados",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Accept",
        "Accept-Language",
        "Content-Language",
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "Origin",
    ],
    max_age=86400,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


# Routers
app.include_router(document_router, prefix="/documents")
app.include_router(certificate_router, prefix="/certificates")
app.include_router(verification_router, prefix="/verification")

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
