# storefront_http_api/routers/forms.py

"""
Turn multipart (or JSON) submissions into typed request structs.

Admin screens post ``multipart/form-data`` where every value is a string:
numbers arrive as text, tags as a comma-separated list, and attributes /
variants as JSON-encoded arrays. The parsing rules:

- absent or blank numbers fall back to 0 (price, quantity) or None; any
  other value is handed to the model, so "abc" is a 400;
- bad attributes/variants JSON becomes ``[]`` on create and is ignored
  (existing values kept) on update;
- empty file inputs are skipped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

import pydantic
from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from ..config import Settings
from ..dependencies import get_settings_dep
from ..errors import ValidationError
from ..schemas.common import FieldError, RequestModel
from ..schemas.posts import PostCreate, PostUpdate
from ..schemas.products import ProductCreate, ProductUpdate
from ..storage import IncomingFile, file_too_large

M = TypeVar("M", bound=RequestModel)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass
class Submission:
    fields: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, List[IncomingFile]] = field(default_factory=dict)

    def has(self, *names: str) -> bool:
        return any(name in self.fields for name in names)

    def get(self, *names: str) -> Any:
        for name in names:
            if name in self.fields:
                return self.fields[name]
        return None

    def files_for(self, *names: str) -> List[IncomingFile]:
        found: List[IncomingFile] = []
        for name in names:
            found.extend(self.files.get(name, []))
        return found


async def read_upload(upload: UploadFile, max_bytes: int) -> IncomingFile:
    """
    Read one file part, refusing it before buffering when its declared size
    is over ``max_bytes``.
    """
    if upload.size is not None and upload.size > max_bytes:
        raise file_too_large(max_bytes)
    data = await upload.read()
    if len(data) > max_bytes:
        raise file_too_large(max_bytes)
    return IncomingFile(
        filename=upload.filename or "image",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


async def read_submission(
    request: Request,
    settings: Settings = Depends(get_settings_dep),
) -> Submission:
    """
    Read the request body as JSON or form data.

    File limits (count and per-file size) are checked before a part is read
    into memory.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError("Malformed JSON body.") from exc
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object.")
        return Submission(fields=body)

    submission = Submission()
    form = await request.form()
    file_count = sum(1 for _, v in form.multi_items() if isinstance(v, UploadFile) and v.filename)
    limit = settings.MAX_PRODUCT_IMAGES
    if file_count > limit:
        raise ValidationError(f"At most {limit} images can be uploaded at once.")

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                continue
            incoming = await read_upload(value, settings.MAX_UPLOAD_BYTES)
            submission.files.setdefault(key, []).append(incoming)
        else:
            submission.fields[key] = value
    return submission


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any, default: Any = None) -> Any:
    """Absent or blank -> ``default``; everything else is left for the model to validate."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip() or default
    return value


def _bool(value: Any, default: Optional[bool] = None) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = (_text(value) or "").lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return default


def _tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]


def _json_value(value: Any) -> Any:
    """Decode a JSON-encoded string; anything else passes through. Raises ValueError."""
    if isinstance(value, str):
        return json.loads(value) if value.strip() else []
    return value


def _json_list(value: Any) -> Optional[list]:
    try:
        decoded = _json_value(value)
    except ValueError:
        return None
    return decoded if isinstance(decoded, list) else None


def _keywords(value: Any) -> List[str]:
    if isinstance(value, str):
        decoded = _json_list(value) if value.strip().startswith("[") else None
        return [str(v) for v in decoded] if decoded is not None else _tags(value)
    return _tags(value)


# ---------------------------------------------------------------------------
# Struct construction
# ---------------------------------------------------------------------------


def build(model: Type[M], data: Dict[str, Any]) -> M:
    """
    Validate ``data`` into ``model``; pydantic errors become a 400
    ValidationError listing every offending field.
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            FieldError(
                field=".".join(str(part) for part in err.get("loc", ())) or "body",
                message=err.get("msg", "Invalid value"),
            )
            for err in exc.errors()
        ]
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        raise ValidationError(
            f"Invalid request: {summary}",
            details={"errors": [e.model_dump(by_alias=True) for e in errors]},
        ) from exc


def _post_fields(sub: Submission, *, partial: bool) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name in ("title", "content", "excerpt", "status"):
        value = _text(sub.get(name))
        if value is not None:
            data[name] = value
    if partial:
        if sub.has("category"):
            data["category"] = _text(sub.get("category")) or ""
        if sub.has("tags"):
            data["tags"] = _tags(sub.get("tags"))
    else:
        data["category"] = _text(sub.get("category"))
        data["tags"] = _tags(sub.get("tags"))
    return data


def post_create_from(sub: Submission) -> PostCreate:
    return build(PostCreate, _post_fields(sub, partial=False))


def post_update_from(sub: Submission) -> PostUpdate:
    return build(PostUpdate, _post_fields(sub, partial=True))


def post_image_from(sub: Submission) -> Optional[IncomingFile]:
    files = sub.files_for("image", "featuredImage")
    return files[0] if files else None


def _seo(sub: Submission) -> Optional[Dict[str, Any]]:
    seo: Dict[str, Any] = {}
    raw = sub.get("seo")
    if raw is not None:
        try:
            decoded = _json_value(raw)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            seo.update(decoded)
    if sub.has("metaTitle", "meta_title"):
        seo["metaTitle"] = _text(sub.get("metaTitle", "meta_title"))
    if sub.has("metaDescription", "meta_description"):
        seo["metaDescription"] = _text(sub.get("metaDescription", "meta_description"))
    if sub.has("keywords", "metaKeywords"):
        seo["keywords"] = _keywords(sub.get("keywords", "metaKeywords"))
    return seo or None


def product_create_from(sub: Submission) -> ProductCreate:
    data: Dict[str, Any] = {
        "name": _text(sub.get("name")) or "",
        "description": _text(sub.get("description")) or "",
        "price": _number(sub.get("price"), 0.0),
        "original_price": _number(sub.get("originalPrice", "original_price")),
        "brand": _text(sub.get("brand")),
        "category": _text(sub.get("category")),
        "tags": _tags(sub.get("tags")),
        "quantity": _number(sub.get("quantity"), 0),
        "sku": _text(sub.get("sku")),
        "track_inventory": _bool(sub.get("trackInventory", "track_inventory"), True),
        "attributes": _json_list(sub.get("attributes")) or [],
        "variants": _json_list(sub.get("variants")) or [],
        "featured": _bool(sub.get("featured"), False),
        "weight": _number(sub.get("weight")),
    }
    status = _text(sub.get("status"))
    if status is not None:
        data["status"] = status
    seo = _seo(sub)
    if seo is not None:
        data["seo"] = seo
    return build(ProductCreate, data)


def product_update_from(sub: Submission) -> ProductUpdate:
    data: Dict[str, Any] = {}
    for name in ("name", "description", "brand", "sku", "status"):
        if sub.has(name):
            data[name] = _text(sub.get(name))
    if sub.has("category"):
        data["category"] = _text(sub.get("category")) or ""
    if sub.has("tags"):
        data["tags"] = _tags(sub.get("tags"))

    numeric = {
        "price": _number(sub.get("price")),
        "original_price": _number(sub.get("originalPrice", "original_price")),
        "weight": _number(sub.get("weight")),
        "quantity": _number(sub.get("quantity")),
    }
    data.update({key: value for key, value in numeric.items() if value is not None})

    for key, names in (("track_inventory", ("trackInventory", "track_inventory")), ("featured", ("featured",))):
        value = _bool(sub.get(*names))
        if value is not None:
            data[key] = value

    for name in ("attributes", "variants"):
        if sub.has(name):
            decoded = _json_list(sub.get(name))
            if decoded is not None:
                data[name] = decoded

    seo = _seo(sub)
    if seo is not None:
        data["seo"] = seo

    return build(ProductUpdate, {k: v for k, v in data.items() if v is not None})


def product_images_from(sub: Submission) -> List[IncomingFile]:
    return sub.files_for("images", "image")


__all__ = [
    "Submission",
    "read_upload",
    "read_submission",
    "build",
    "post_create_from",
    "post_update_from",
    "post_image_from",
    "product_create_from",
    "product_update_from",
    "product_images_from",
]
