"""RFC 7807 Problem Details error handling."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ProblemDetailError(Exception):
    """Raise for RFC 7807 problem+json responses.

    ``extensions`` are extra members merged into the problem object.
    """

    def __init__(
        self,
        status: int,
        title: str,
        detail: str,
        error_type: str | None = None,
        extensions: dict | None = None,
    ):
        super().__init__(detail)
        self.status = status
        self.title = title
        self.detail = detail
        self.error_type = error_type or "about:blank"
        self.extensions = extensions or {}


class StorefrontError(ProblemDetailError):
    """Base class for page builder domain errors.

    Subclasses fix ``status`` and ``title``; callers only supply the detail.
    """

    status: int = 400
    title: str = "Storefront Error"

    def __init__(self, detail: str, extensions: dict | None = None):
        super().__init__(self.status, self.title, detail, extensions=extensions)


class StoreNotFoundError(StorefrontError):
    status = 404
    title = "Store Not Found"


class PageNotFoundError(StorefrontError):
    status = 404
    title = "Page Not Found"


class StoreSlugTakenError(StorefrontError):
    status = 409
    title = "Store Conflict"


class PageConflictError(StorefrontError):
    """Slug or system-page uniqueness among published pages would be violated."""

    status = 409
    title = "Page Conflict"


class InvalidTransitionError(StorefrontError):
    status = 422
    title = "Invalid Status Transition"

    def __init__(self, current: str, requested: str, allowed: list[str]):
        super().__init__(
            f"Cannot transition page from '{current}' to '{requested}'",
            extensions={"allowed": allowed},
        )
        self.current = current
        self.requested = requested
        self.allowed = allowed


class ExpressionError(StorefrontError):
    """A widget condition expression could not be parsed or evaluated."""

    status = 422
    title = "Invalid Expression"


class FormActionError(StorefrontError):
    """A form submit side effect (email, webhook) failed."""

    status = 502
    title = "Form Action Failed"


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content={
            "type": exc.error_type,
            "title": exc.title,
            "status": exc.status,
            "detail": exc.detail,
            "instance": str(request.url.path),
            **exc.extensions,
        },
        media_type="application/problem+json",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "about:blank",
            "title": exc.detail if isinstance(exc.detail, str) else "Error",
            "status": exc.status_code,
            "detail": exc.detail,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "type": "about:blank",
            "title": "Validation Error",
            "status": 422,
            "detail": jsonable_errors(exc.errors()),
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


def jsonable_errors(errors: list | tuple) -> list[dict]:
    """Strip non-JSON values (e.g. exception objects in ``ctx``) from pydantic errors."""
    cleaned = []
    for err in errors:
        item = dict(err)
        if "ctx" in item:
            item["ctx"] = {k: str(v) for k, v in item["ctx"].items()}
        item.pop("url", None)
        cleaned.append(item)
    return cleaned
