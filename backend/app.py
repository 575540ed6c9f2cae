from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.config import Settings, configure_logging, load_settings
from backend.routes import router
from party_kit.errors import PartyKitError
from party_kit.storage import Storage


def create_app(settings: Settings | None = None) -> FastAPI:
    resolved = settings or load_settings()
    configure_logging(resolved.log_level)

    app = FastAPI(title="Party Kit")
    app.state.settings = resolved
    app.state.store = Storage(resolved.data_dir, presets_dir=resolved.presets_dir)
    app.state.realtime_host = resolved.realtime_host()
    app.include_router(router, prefix="/api")

    @app.exception_handler(PartyKitError)
    async def party_kit_error(request: Request, exc: PartyKitError):
        return JSONResponse({"detail": str(exc)}, status_code=exc.status_code)

    return app


# Default app instance for uvicorn (uses DATA_DIR etc. from the environment)
app = create_app()
