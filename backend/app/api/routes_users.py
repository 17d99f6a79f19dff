"""Registration, login and profile API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from app.core.db import get_db
from app.core.errors import ValidationFailed
from app.schemas.user import LoginRequest, RegisterRequest, RegisterResponse, UserEnvelope, UserOut
from app.services.image_storage import ImageUpload
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/api", tags=["users"])


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service


def bad_form(message: str) -> ValidationFailed:
    return ValidationFailed(message, code="bad_form")


def form_size(form: FormData) -> int:
    """Bytes held by every parsed part, for bodies sent without Content-Length."""
    total = 0
    for _, value in form.multi_items():
        if isinstance(value, UploadFile):
            total += value.size or 0
        else:
            total += len(value.encode())
    return total


@router.post("/register", response_model=RegisterResponse, response_model_exclude_none=True)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    profile_service: ProfileService = Depends(get_profile_service),
) -> RegisterResponse:
    return profile_service.register(db, payload.email)


@router.post("/login", response_model=UserEnvelope)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserEnvelope:
    user = profile_service.login(db, payload.code)
    return UserEnvelope(message="Login successful", user=UserOut.model_validate(user))


@router.get("/user/{code}", response_model=UserOut)
def get_user(
    code: str,
    db: Session = Depends(get_db),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserOut:
    return UserOut.model_validate(profile_service.get_profile(db, code))


@router.put("/user/{code}", response_model=UserEnvelope)
async def update_user(
    code: str,
    request: Request,
    db: Session = Depends(get_db),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserEnvelope:
    if not request.headers.get("content-type", "").lower().startswith("multipart/form-data"):
        raise bad_form("Expected a multipart/form-data body")
    max_bytes = request.app.state.settings.MAX_UPLOAD_BYTES
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_bytes:
        raise bad_form("Request body exceeds the upload size limit")

    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        raise bad_form("Error parsing form") from exc

    try:
        if form_size(form) > max_bytes:
            raise bad_form("Request body exceeds the upload size limit")

        name = form.get("name", "")
        last_name = form.get("last_name", "")
        if not isinstance(name, str) or not isinstance(last_name, str):
            raise bad_form("name and last_name must be text fields")

        image = form.get("image")
        upload = None
        if isinstance(image, UploadFile) and image.filename:
            upload = ImageUpload(filename=image.filename, stream=image.file)

        user = await run_in_threadpool(profile_service.update_profile, db, code, name, last_name, upload)
    finally:
        await form.close()

    return UserEnvelope(message="User updated", user=UserOut.model_validate(user))
