"""HTTP front door: product URL in, extracted record (or spreadsheet) out.

Handlers are plain functions so they run on the server's worker threads and
can be called directly from tests.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response
from jsonschema import ValidationError
from loguru import logger
from omegaconf import DictConfig

from coffee_extractor import CoffeeExtractor
from config.schema import ExtractionSettings
from config_manager import ConfigManager
from errors import CredentialMismatch, MissingCredential
from page_fetcher import PageFetchError, fetch_page_text
from record_exporter import XLSX_MEDIA_TYPE, export_record_bytes
from validation import validate_export_request


# Credential problems are ours to fix; everything else failed upstream
CONFIGURATION_ERRORS = (MissingCredential, CredentialMismatch)

app = FastAPI(title="Coffee Extractor")

DEFAULT_PROFILE = "default"


def load_server_config(profile: Optional[str] = None,
                       config_dir: Optional[Union[str, Path]] = None) -> DictConfig:
    """Compose the config profile named by ``profile`` or ``$CONFIG_PROFILE``."""
    profile = profile or os.environ.get("CONFIG_PROFILE") or DEFAULT_PROFILE
    return ConfigManager(config_dir).load_config(profile)


conf = load_server_config()
extractor = CoffeeExtractor(config=conf)


def health_handler() -> Dict[str, Any]:
    return {"ok": True}


def extract_handler(url: Optional[str] = None, prompt: Optional[str] = None):
    """Fetch ``url`` and extract its coffee record.

    502 when the page cannot be fetched or the provider/parse stage fails,
    500 when credentials are missing or misplaced.
    """
    target = url or conf.server.default_url
    try:
        raw_text = fetch_page_text(target, user_agent=conf.scraper.user_agent, timeout=conf.scraper.timeout)
    except PageFetchError as e:
        logger.error("Scrape failed", url=target, error=str(e))
        return JSONResponse(status_code=502, content={"ok": False, "error": "Scrape failed"})

    result = extractor.extract(raw_text, prompt, settings=ExtractionSettings.from_env())
    if not result.ok:
        status = 500 if isinstance(result.error, CONFIGURATION_ERRORS) else 502
        return JSONResponse(status_code=status,
                            content={"ok": False, "error": result.error.kind, "detail": result.error.to_dict()})
    return {"ok": True, "data": result.record.to_dict()}


def export_handler(payload: Dict[str, Any] = Body(...)):
    """Render the posted record as an .xlsx download."""
    try:
        validate_export_request(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)

    try:
        data = export_record_bytes(payload, url=payload.get("url") or "", sheet_name=conf.export.sheet_name)
    except Exception as e:
        logger.error("Export failed", error=str(e))
        raise HTTPException(status_code=500, detail="Export failed")

    return Response(
        content=data,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{conf.export.filename}"'},
    )


app.get("/healthz")(health_handler)
app.get("/api/extract")(extract_handler)
app.post("/api/export")(export_handler)


if __name__ == "__main__":
    import uvicorn
    from dotenv import load_dotenv

    from logging_manager import setup_logging

    load_dotenv()
    setup_logging(conf)
    logger.info("Web app listening", host=conf.server.host, port=conf.server.port)
    uvicorn.run(app, host=conf.server.host, port=conf.server.port)
