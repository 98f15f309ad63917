# app.py (gunicorn entry point: `gunicorn app:app`)

from fertilizer_ordering import create_app

app = create_app()


# Local run only
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=app.config["APP_ENV"] != "production")
