# app/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.api import api_router
from app.data.database import init_db
from app.utils.settings import APP_ENV
from app.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)

# TABELE TWORZONE PRZY STARCIE (BEZ MIGRACJI)
try:
    init_db()
    logger.info("Tabele bazy danych utworzone")
except Exception as e:
    logger.error(f"Nie udalo sie utworzyc tabel: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shop Service",
        version="1.0.0",
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        #szczegoly bledu tylko w developmencie
        logger.exception(f"Nieobsluzony blad {request.method} {request.url.path}")
        content = {"detail": "Wewnetrzny blad serwera"}
        if APP_ENV == "development":
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    # Include routers
    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
