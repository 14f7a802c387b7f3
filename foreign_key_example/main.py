# ==============================================================================
# MAIN APPLICATION ENTRY POINT
# ==============================================================================
# Run with: uvicorn foreign_key_example.main:app --reload
# ==============================================================================

from foreign_key_example.startup import Startup

app = Startup().create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        "foreign_key_example.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
