import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .adapters.entry.http.basket_router import router as basket_router
from .config import get_settings
from .workers.execution_supervisor import ExecutionSupervisor


def _setup_logging():
    """
    Configure basic logging.
    """
    log_level = get_settings().LOG_LEVEL.upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(supervisor: Optional[ExecutionSupervisor] = None) -> FastAPI:
    supervisor = supervisor or ExecutionSupervisor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context for startup/shutdown lifecycle.
        """
        _setup_logging()
        logging.getLogger(__name__).info("Starting basket-orchestrator (lifespan startup)...")
        await supervisor.start()

        app.state.supervisor = supervisor

        try:
            yield
        finally:
            logging.getLogger(__name__).info("Shutting down basket-orchestrator (lifespan shutdown)...")
            await supervisor.stop()

    app = FastAPI(title="basket-orchestrator", version="0.1.0", lifespan=lifespan)
    app.include_router(basket_router)

    @app.get("/healthz")
    async def healthz():
        """
        Liveness probe endpoint.
        """
        return {"status": "ok"}

    return app


app = create_app()


def serve():
    import uvicorn

    s = get_settings()
    uvicorn.run("basket_orchestrator.main:app", host=s.HOST, port=s.PORT, reload=False)


if __name__ == "__main__":
    serve()
