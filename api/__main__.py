"""
Development server:
    python -m api
Production runs the factory under a WSGI server instead, e.g.
    gunicorn "api:create_app()"
"""
from . import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host=app.config.get("HOST", "0.0.0.0"),
        port=int(app.config.get("PORT", 8000)),
        debug=bool(app.config.get("DEBUG")),
    )
