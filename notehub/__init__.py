import os
from flask import Flask, jsonify, request
from flask_limiter import RateLimitExceeded
from dotenv import load_dotenv
from sqlalchemy import text

from .config import DevConfig, ProdConfig, TestConfig
from .extensions import db, migrate, cors, limiter
from .common.errors import register_error_handlers
from .common.logging import setup_json_logging, register_request_logging
from .common.utils import IdConverter
from .storage import build_storage


def create_app():
    # Charge .env si présent (dev)
    load_dotenv()

    app = Flask(__name__)

    # ids de chemin bornés à la plage des colonnes INTEGER
    app.url_map.converters["id"] = IdConverter

    # Choix config selon env
    env = os.getenv("APP_ENV") or os.getenv("FLASK_ENV", "development")
    if env in ("test", "testing"):
        app.config.from_object(TestConfig)
    elif env == "production":
        app.config.from_object(ProdConfig)
    else:
        app.config.from_object(DevConfig)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)

    setup_json_logging(app)
    register_request_logging(app)

    # Stockage des fichiers (remplaçable dans les tests)
    app.extensions["blob_storage"] = build_storage(app.config)

    # --- Helpers ---
    def _csv(value, default_if_empty):
        """Convertit une chaîne CSV en liste, sinon retourne la valeur telle quelle ou un défaut."""
        if value is None:
            return default_if_empty
        if isinstance(value, str) and "," in value:
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default_if_empty
        return value

    # --- CORS: whitelist + headers ---
    origins = _csv(app.config.get("CORS_ORIGINS", "*"), "*")
    allow_headers = _csv(app.config.get("CORS_ALLOW_HEADERS"), ["Content-Type"])
    expose_headers = _csv(app.config.get("CORS_EXPOSE_HEADERS"), ["Content-Type"])

    cors.init_app(app, resources={
        r"/*": {
            "origins": origins,
            "allow_headers": allow_headers,
            "expose_headers": expose_headers,
            "supports_credentials": False,
        }
    })

    # --- Limiter: storage & défaut configurable ---
    limiter.init_app(app)   # PAS d'arguments ici ; Limiter lit RATELIMIT_* depuis app.config

    # Importer les modèles pour que Flask-Migrate/Alembic voie les tables
    from .catalog import models as catalog_models  # noqa: F401
    from .notes import models as notes_models      # noqa: F401
    from .reviews import models as reviews_models  # noqa: F401

    # Handlers d'erreurs JSON uniformes
    register_error_handlers(app)

    # --- Security headers (UN SEUL after_request) ---
    @app.after_request
    def set_security_headers(resp):
        # API JSON: CSP très restrictif (pas d'HTML attendu)
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "no-referrer"

        # HSTS uniquement si HTTPS (prod / reverse-proxy)
        if (env == "production" or app.config.get("ENFORCE_HTTPS")) and (
            request.is_secure or request.headers.get("X-Forwarded-Proto", "") == "https"
        ):
            resp.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"

        return resp

    # --- 429 Rate limit JSON ---
    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(e):
        return jsonify({"error": {"code": "rate_limited", "message": "Rate limit exceeded.", "details": {}}}), 429

    # --- Blueprints ---
    from .catalog.routes import bp as catalog_bp
    app.register_blueprint(catalog_bp)

    from .notes.routes import bp as notes_bp
    app.register_blueprint(notes_bp)

    from .reviews.routes import bp as reviews_bp
    app.register_blueprint(reviews_bp)

    from .dashboard.routes import bp as dashboard_bp
    app.register_blueprint(dashboard_bp)

    from .docs.routes import bp as docs_bp
    app.register_blueprint(docs_bp)

    # Smoke check hérité du front
    @app.get("/test")
    def smoke_test():
        return jsonify({"message": "API is working!"}), 200

    # Liveness probe (ping DB simple)
    @app.get("/healthz")
    def healthz():
        db_status = "up"
        try:
            with db.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            db_status = "down"
        return jsonify({
            "status": "ok",
            "env": env,
            "db": db_status
        })

    # Readiness probe (DB + Redis si configuré)
    @app.get("/readyz")
    def readyz():
        status = {"db": "down", "redis": "n/a"}
        ok = True

        # DB
        try:
            with db.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            status["db"] = "up"
        except Exception:
            ok = False
            status["db"] = "down"

        # Redis (uniquement si RATELIMIT_STORAGE_URI utilise redis)
        try:
            uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
            if uri.startswith(("redis://", "rediss://")):
                import redis  # import tardif
                r = redis.from_url(uri)
                r.ping()
                status["redis"] = "up"
            else:
                status["redis"] = "n/a"
        except Exception:
            ok = False
            status["redis"] = "down"

        status["status"] = "ok" if ok else "error"
        return jsonify(status), (200 if ok else 503)

    return app
