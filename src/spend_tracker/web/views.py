"""
Views for the statement import web service.
"""

import logging
import uuid
from functools import wraps
from pathlib import Path

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from ..config import SUPPORTED_EXTENSIONS, Config, load_config, normalize_extension
from ..services.importer import StatementImporter
from ..state_store import StateStore

logger = logging.getLogger(__name__)

IMPORT_FAILED_MESSAGE = "Internal Server Error during import"


def _get_config() -> Config:
    """Load config, with Django settings taking precedence for paths."""
    config = load_config(settings.SPEND_CONFIG_PATH)
    config.state_db_path = Path(settings.STATE_DB_PATH)
    config.imports.upload_dir = Path(settings.UPLOAD_DIR)
    return config


def _get_store() -> StateStore:
    """Get the state store instance."""
    return StateStore(settings.STATE_DB_PATH)


def _get_importer() -> StatementImporter:
    """Build the import pipeline for one request."""
    return StatementImporter.from_config(_get_config(), store=_get_store())


def _save_upload(upload: UploadedFile, extension: str) -> Path:
    """Write an uploaded file into the upload directory under a random name."""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    target = upload_dir / f"{uuid.uuid4().hex}{extension}"
    with open(target, "wb") as f:
        for chunk in upload.chunks():
            f.write(chunk)
    return target


def api_login_required(view):
    """Like login_required, but answers 401 JSON instead of redirecting."""

    @wraps(view)
    def wrapper(request: HttpRequest, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"message": "Authentication required"}, status=401)
        return view(request, *args, **kwargs)

    return wrapper


# ============================================================================
# Statement Import
# ============================================================================


@api_login_required
@require_http_methods(["POST"])
def upload_import(request: HttpRequest) -> JsonResponse:
    """
    Import a statement file for the logged-in user.

    Multipart field "file". Accepted: .xls .xlsx .pdf .jpg .jpeg .png.
    The uploaded file is removed after processing, whatever the outcome.
    """
    upload = request.FILES.get("file")
    if upload is None:
        return JsonResponse({"message": "No file uploaded"}, status=400)

    extension = normalize_extension(Path(upload.name or "").suffix)
    if extension not in SUPPORTED_EXTENSIONS:
        return JsonResponse({"message": "Unsupported file type"}, status=400)

    owner_id = str(request.user.pk)
    saved_path: Path | None = None
    try:
        importer = _get_importer()
        # config.yaml may narrow the allow-list
        if not importer.is_supported(extension):
            return JsonResponse({"message": "Unsupported file type"}, status=400)
        saved_path = _save_upload(upload, extension)
        result = importer.import_file(
            saved_path,
            extension,
            owner_id=owner_id,
            source_name=upload.name,
        )
    except Exception:
        logger.exception("Import failed for %s (owner %s)", upload.name, owner_id)
        return JsonResponse({"message": IMPORT_FAILED_MESSAGE}, status=500)
    finally:
        if saved_path is not None:
            saved_path.unlink(missing_ok=True)

    return JsonResponse({"message": "Import complete", **result.to_dict()})
