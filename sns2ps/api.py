"""
FastAPI application - registration download service
"""

import unicodedata
from urllib.parse import quote

from fastapi import Depends, FastAPI, Form, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PayloadError
import structlog

from sns2ps import __version__
from sns2ps.config import Settings
from sns2ps.exceptions import (
    ExportError,
    FetchError,
    FetchErrorKind,
    Sns2psError,
    ValidationError,
)
from sns2ps.exporter import export_filename
from sns2ps.pipeline import MatchRequest, RegistrationPipeline

logger = structlog.get_logger(__name__)

LOGIN_FAILED = (
    "Failed to login to Shoot 'n Score It - please check your username and password."
)
NOT_FOUND = (
    "Couldn't find a match with ID {match_id} - "
    "please check your match ID before trying again"
)
REMOTE_FAILED = (
    "Something went wrong talking to Shoot 'n Score It - please try again later."
)
EXPORT_FAILED = "Failed to create the registration file - please try again later."


class MatchInfoInput(BaseModel):
    """JSON body of a match info request"""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    matchid: str = Field("", description="Shoot 'n Score It match ID")
    snsusername: str = Field("", description="Shoot 'n Score It username")
    snspassword: str = Field("", description="Shoot 'n Score It password")


def message(status_code: int, text: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"response": text})


def error_response(error: Sns2psError, match_id: str) -> JSONResponse:
    """Maps a pipeline error onto a status code and user-facing message."""
    logger.warning("request_failed", match_id=match_id, **error.to_dict())
    if isinstance(error, ValidationError):
        return message(400, error.message)
    if isinstance(error, ExportError):
        return message(500, EXPORT_FAILED)
    if isinstance(error, FetchError):
        match error.kind:
            case FetchErrorKind.UNAUTHORIZED:
                return message(401, LOGIN_FAILED)
            case FetchErrorKind.NOT_FOUND:
                return message(404, NOT_FOUND.format(match_id=match_id))
    return message(502, REMOTE_FAILED)


def content_disposition(filename: str) -> str:
    """Attachment header for a download, RFC 6266 style.

    Non-ASCII names get an ASCII fallback in `filename` plus the UTF-8 name
    in `filename*`.
    """
    quoted = quote(filename)
    if quoted == filename:
        return f"attachment; filename={filename}"
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore")
    fallback = "".join(
        c for c in fallback.decode("ascii") if c.isprintable() and c not in "\"\\"
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"


def get_pipeline(request: Request) -> RegistrationPipeline:
    return request.app.state.pipeline


def create_app(
    settings: Settings | None = None,
    pipeline: RegistrationPipeline | None = None,
) -> FastAPI:
    """Builds the FastAPI app.

    Args:
        settings: Process settings (read from the environment if omitted).
        pipeline: Pre-built pipeline, mainly for tests.

    Returns:
        The configured application.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="sns2ps",
        description="Shoot 'n Score It to PractiScore registration export",
        version=__version__,
    )
    app.state.settings = settings
    app.state.pipeline = pipeline or RegistrationPipeline.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Unexpected failures: logged in full, reported without detail."""
        logger.exception("unhandled_error", path=request.url.path)
        return message(500, REMOTE_FAILED)

    @app.get("/", response_class=PlainTextResponse)
    async def health_check():
        """Liveness check"""
        return "OK"

    @app.post("/matchinfo")
    async def get_match_info(
        request: Request, pipeline: RegistrationPipeline = Depends(get_pipeline)
    ):
        """
        Confirms that a match can be downloaded and names the file.

        Returns:
            JSON {"response": message}
        """
        body = await request.body()
        try:
            payload = MatchInfoInput.model_validate_json(body or b"{}")
        except PayloadError:
            logger.warning("match_info_body_invalid")
            payload = MatchInfoInput()
        logger.info("match_info_requested", match_id=payload.matchid)

        try:
            match_request = MatchRequest.validated(
                payload.matchid, payload.snsusername, payload.snspassword
            )
            match = await run_in_threadpool(pipeline.fetch_match, match_request)
        except Sns2psError as e:
            return error_response(e, payload.matchid)

        filename = export_filename(match.name)
        return message(
            200,
            f"Downloading registration for {match.name} - this will save a file "
            f"to your normal download folder named '{filename}'",
        )

    @app.post("/registration")
    def get_registration(
        matchid: str = Form(""),
        username: str = Form(""),
        password: str = Form(""),
        pipeline: RegistrationPipeline = Depends(get_pipeline),
    ):
        """
        Builds the registration CSV for a match and returns it as a download.
        """
        logger.info("registration_requested", match_id=matchid)
        try:
            export = pipeline.run(MatchRequest.validated(matchid, username, password))
        except Sns2psError as e:
            return error_response(e, matchid)

        logger.info("sending_csv", filename=export.filename, rows=export.row_count)
        return Response(
            content=export.content,
            media_type="text/csv",
            headers={"Content-Disposition": content_disposition(export.filename)},
        )

    return app
