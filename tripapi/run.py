import uvicorn

from tripapi.config.logging_setup import setup_logging
from tripapi.providers.settings import get_settings

# Configure logging from the YAML file
setup_logging()


def main():
    """Start the API server locally."""
    settings = get_settings()
    host = settings.tripapi_host
    port = settings.tripapi_port

    print(f"Starting API at http://{host}:{port}")
    print("Press CTRL+C to quit.")

    uvicorn.run(
        "tripapi.main:app",
        host=host,
        port=port,
        reload=True,
        reload_dirs=["tripapi/"],
        reload_includes=["*.py"],
        log_config=None  # Keep the configuration set up above
    )


if __name__ == "__main__":
    main()
