import uvicorn
from fastapi import FastAPI

from trivia_master.api.routes.games import router as games_router
from trivia_master.api.routes.health import router as health_router
from trivia_master.core.config import Settings, get_settings
from trivia_master.core.logging import configure_logging
from trivia_master.game.questions.loader import QuestionSetLoader
from trivia_master.game.questions.opentdb import OpenTdbQuestionSource, QuestionSource
from trivia_master.game.sessions.service import GameSessionService
from trivia_master.game.sessions.store import SessionStore
from trivia_master.game.stats.service import GameStatsService


def create_app(
    settings: Settings | None = None,
    *,
    question_source: QuestionSource | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_output=settings.app_env != "dev")

    if question_source is None:
        question_source = OpenTdbQuestionSource(
            base_url=settings.trivia_api_url,
            timeout_seconds=settings.trivia_api_timeout_seconds,
        )
    store = SessionStore()

    app = FastAPI(
        title="Trivia Master API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.session_store = store
    app.state.session_service = GameSessionService(
        store=store,
        loader=QuestionSetLoader(question_source),
    )
    app.state.stats_service = GameStatsService(store=store)

    app.include_router(health_router)
    app.include_router(games_router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "trivia_master.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
