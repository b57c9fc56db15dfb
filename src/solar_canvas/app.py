from solar_canvas.api.server import create_app
from solar_canvas.config import configure_logging, load_settings

settings = load_settings()
configure_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("solar_canvas.app:app", host=settings.host, port=settings.port)
