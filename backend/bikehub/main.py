from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from typing import Optional
import logging
import os
from bikehub.config import Settings
from bikehub.errors import error_response, register_error_handlers
from bikehub.repository import build_repository
from bikehub.routers import bikes, image_upload, payments
from bikehub.utils.mpesa import MpesaClient
from bikehub.utils.uploads import UPLOAD_URL_PREFIX, UploadStore

logger = logging.getLogger(__name__)

API_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="BikeHub inventory API")
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    upload_store = UploadStore(settings.upload_dir, settings.max_upload_bytes)
    upload_store.ensure_directory()
    os.makedirs(settings.public_dir, exist_ok=True)

    app.state.upload_store = upload_store
    app.state.repository = build_repository(settings)
    app.state.payment_client = MpesaClient(settings)

    register_error_handlers(app)

    # Include routers
    app.include_router(image_upload.router)
    app.include_router(payments.router)
    app.include_router(bikes.router)

    @app.get("/api/health")
    def health(request: Request):
        repo = request.app.state.repository
        return {"status": "ok", "store": repo.kind, "bikes": repo.count()}

    # Anything else under /api is a JSON 404, never the front end.
    @app.api_route("/api/{path:path}", methods=API_METHODS, include_in_schema=False)
    def api_not_found(path: str):
        return error_response(404, "API endpoint not found")

    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    logger.info("BikeHub app ready (store=%s, uploads=%s)", settings.listing_store, settings.upload_dir)
    return app
