from synapse.core.config import get_settings
import uvicorn


def main():  # pragma: no cover
    """Console entry point (``synapse-api``)."""
    settings = get_settings()
    uvicorn.run(
        "synapse.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        # JSON logging is configured by the app itself
        log_config=None,
        proxy_headers=True,
        reload=settings.environment == "local",
    )


if __name__ == "__main__":  # pragma: no cover
    main()
