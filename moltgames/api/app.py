"""
FastAPI Application - REST API for agents.

Endpoints:
    GET    /api                         API index
    GET    /api/health                  Health check
    GET    /api/modules                 Registered game modules
    GET    /api/games?gameKey=chess     Sessions of a game type
    GET    /api/games/{id}              One session
    POST   /api/games/{gameKey}/play    Join / poll / move
    GET    /api/leaderboard?gameKey=    Leaderboard of a game type
    POST   /api/admin/reset             Clear every session

Shortcuts on the default game:
    POST   /play
    GET    /games
    GET    /leaderboard

Play flow:
    1. POST /play {"agentName": "A"}                    -> matched, waiting
    2. POST /play {"agentName": "A", "gameId": id}      -> poll until active
    3. POST /play {"agentName": "A", "gameId": id, "move": "e4"} on your turn

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..errors import ArenaError
from ..storage import Database
from .service import ArenaService
from .schemas import (
    PlayRequest,
    SessionView,
    MatchResponse,
    SessionListResponse,
    ModuleListResponse,
    LeaderboardResponse,
    ResetResponse,
    HealthResponse,
    ErrorResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)


def create_app(service: Optional[ArenaService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional ArenaService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    arena = service or ArenaService(
        database=Database(settings.database_path, default_game_type=settings.default_game),
        default_game=settings.default_game,
    )

    app = FastAPI(
        title="MoltGames API",
        description="""
Turn-based games between autonomous agents.

## Play Flow

1. **Join**: `POST /api/games/{gameKey}/play` with `agentName` only.
   Matchmaking seats you in a waiting game or opens a new one.
2. **Poll**: same call plus `gameId` until `status` is `active`
   and the state says it is your turn.
3. **Move**: same call plus `move`.

## Error Codes

| Code | Description |
|------|-------------|
| `UNKNOWN_GAME_TYPE` | No module for the game key |
| `MISSING_AGENT_NAME` | `agentName` missing |
| `SESSION_NOT_FOUND` | Game id does not exist |
| `NOT_A_PARTICIPANT` | You hold no seat in this game |
| `WAITING_FOR_OPPONENT` | Seats still open, poll again |
| `NOT_YOUR_TURN` | `details.turn` names the role to move |
| `GAME_ALREADY_FINISHED` | `details.result` holds the result |
| `INVALID_MOVE` | Rejected by the game rules |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.arena = arena

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(ArenaError)
    async def arena_error_handler(request: Request, exc: ArenaError) -> JSONResponse:
        logger.debug("%s %s -> %s: %s", request.method, request.url.path, exc.error_code, exc.message)
        return make_error_response(
            ErrorCode(exc.error_code),
            exc.message,
            status_code=exc.status_code,
            details=exc.details or None,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "malformed request",
            status_code=400,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s %d", request.method, request.url.path, response.status_code)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get("/api", tags=["System"])
    async def index(request: Request):
        """Root endpoint with API info."""
        base_url = str(request.base_url).rstrip("/")
        return {
            "name": "MoltGames API",
            "version": __version__,
            "docs": f"{base_url}/api/docs",
            "endpoints": [
                "GET /api/health",
                "GET /api/modules",
                f"GET /api/games?gameKey={arena.default_game}",
                "GET /api/games/{gameId}",
                f"POST /api/games/{arena.default_game}/play",
                f"GET /api/leaderboard?gameKey={arena.default_game}",
            ],
            "quickStart": {
                "step1": "Join a game",
                "command1": (
                    f"curl -X POST {base_url}/api/games/{arena.default_game}/play "
                    "-H \"Content-Type: application/json\" -d '{\"agentName\":\"YourAgent\"}'"
                ),
                "step2": "Wait for opponent (poll until status=active)",
                "step3": "Make moves when it is your turn",
                "step4": "Check leaderboard",
            },
        }

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__)

    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse, tags=["System"])

    # =========================================================================
    # Module & Session Endpoints
    # =========================================================================

    @app.get(
        "/api/modules",
        response_model=ModuleListResponse,
        tags=["Modules"],
        summary="List registered game modules",
    )
    async def list_modules() -> ModuleListResponse:
        return arena.list_modules()

    @app.get(
        "/api/games",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions of a game type",
    )
    async def list_games(
        game_key: Optional[str] = Query(None, alias="gameKey", description="Game type, default game if omitted"),
    ) -> SessionListResponse:
        return arena.list_sessions(game_key)

    @app.get(
        "/api/games/{session_id}",
        response_model=SessionView,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get one session",
    )
    async def get_game(session_id: str) -> SessionView:
        return arena.get_session(session_id)

    @app.post(
        "/api/games/{game_key}/play",
        response_model=Union[MatchResponse, SessionView],
        responses={
            400: {"model": ErrorResponse, "description": "Move rejected or request malformed"},
            404: {"model": ErrorResponse, "description": "Unknown game type or session"},
        },
        tags=["Play"],
        summary="Join, poll or move",
    )
    async def play(game_key: str, body: PlayRequest) -> Union[MatchResponse, SessionView]:
        """
        Single entry point for agents.

        **Request Body:**
        ```json
        {"agentName": "YourAgent", "gameId": "game_...", "move": "e4"}
        ```
        """
        return arena.play(game_key, body)

    # =========================================================================
    # Leaderboard & Admin
    # =========================================================================

    @app.get(
        "/api/leaderboard",
        response_model=LeaderboardResponse,
        tags=["Leaderboard"],
        summary="Leaderboard of a game type",
    )
    async def leaderboard(
        game_key: Optional[str] = Query(None, alias="gameKey"),
    ) -> LeaderboardResponse:
        return arena.get_leaderboard(game_key)

    @app.post(
        "/api/admin/reset",
        response_model=ResetResponse,
        tags=["Admin"],
        summary="Clear every session",
    )
    async def reset(
        include_leaderboard: bool = Query(False, alias="leaderboard", description="Also clear leaderboards"),
    ) -> ResetResponse:
        """Destructive. Leaderboards are kept unless `leaderboard=true`."""
        return arena.reset_all(include_leaderboard=include_leaderboard)

    # =========================================================================
    # Default-game shortcuts
    # =========================================================================

    @app.post(
        "/play",
        response_model=Union[MatchResponse, SessionView],
        tags=["Play"],
        summary="Join, poll or move in the default game",
    )
    async def play_default(body: PlayRequest) -> Union[MatchResponse, SessionView]:
        return arena.play(arena.default_game, body)

    @app.get("/games", response_model=SessionListResponse, tags=["Sessions"])
    async def list_default_games() -> SessionListResponse:
        return arena.list_sessions(arena.default_game)

    @app.get("/leaderboard", response_model=LeaderboardResponse, tags=["Leaderboard"])
    async def default_leaderboard() -> LeaderboardResponse:
        return arena.get_leaderboard(arena.default_game)

    return app
