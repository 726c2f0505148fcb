from fastapi import FastAPI

from config.logging_config import get_logger, setup_logging
from services.ux_audit_service.audit_pipeline import UxAuditPipeline
from services.ux_audit_service.config import Settings, settings
from services.ux_audit_service.crawler.page_snapshot import build_snapshot_provider
from services.ux_audit_service.db.session import dispose_engine, get_sessionmaker, init_db
from services.ux_audit_service.db.store import AuditStore
from services.ux_audit_service.integrations.llm_client import AuditRequester
from services.ux_audit_service.integrations.psi_api import PageSpeedScorer
from services.ux_audit_service.middleware import LoggingMiddleware, setup_cors, setup_error_handlers
from services.ux_audit_service.routes import audit_router, health_router

logger = get_logger(__name__)


async def build_pipeline(app_settings: Settings) -> UxAuditPipeline:
    await init_db()
    provider = build_snapshot_provider(app_settings)
    await provider.start()
    logger.info("Snapshot engine selected", extra={"engine": provider.name})
    return UxAuditPipeline(
        snapshot_provider=provider,
        generator=AuditRequester.from_settings(app_settings),
        speed_scorer=PageSpeedScorer(
            api_key=app_settings.psi_api_key,
            strategy=app_settings.psi_strategy,
            timeout_s=app_settings.psi_timeout_s,
        ),
        store=AuditStore(get_sessionmaker()),
        snapshot_timeout_s=app_settings.snapshot_timeout_s,
        temperature=app_settings.llm_temperature,
    )


def create_app(app_settings: Settings = settings, pipeline: UxAuditPipeline | None = None) -> FastAPI:
    app = FastAPI(title=app_settings.service_name, version="0.1.0")
    app.state.pipeline = pipeline
    app.state.owns_pipeline = pipeline is None

    setup_error_handlers(app)
    app.add_middleware(LoggingMiddleware, service_name=app_settings.service_name)
    setup_cors(app, app_settings.allowed_origins())

    app.include_router(health_router)
    app.include_router(audit_router)

    @app.on_event("startup")
    async def _startup() -> None:
        setup_logging(
            service_name=app_settings.service_name,
            level=app_settings.log_level,
            environment=app_settings.environment,
        )
        if app.state.pipeline is None:
            app.state.pipeline = await build_pipeline(app_settings)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        if not app.state.owns_pipeline or app.state.pipeline is None:
            return
        await app.state.pipeline.snapshot_provider.close()
        await app.state.pipeline.generator.close()
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("services.ux_audit_service.main:app", host="0.0.0.0", port=settings.port, reload=False)
