import os

from wsgi import app


# ========================== Run ==========================
if __name__ == "__main__":
    app.run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        debug=app.config.get("DEBUG", False),
    )
