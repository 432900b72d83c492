# app.py — Chief Media marketplace backend (auth + enquiries + vendors + invoices)
import os, logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from flask import Flask, jsonify
from flask.logging import default_handler
from flask_cors import CORS

from extensions import db

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DB = f"sqlite:///{(BASE_DIR / 'marketplace.db').as_posix()}"

SQLALCHEMY_DATABASE_URI = DEFAULT_DB
_raw_db = os.environ.get("DATABASE_URL")
if _raw_db:
    if _raw_db.startswith("postgres://"):
        _raw_db = _raw_db.replace("postgres://", "postgresql+psycopg2://", 1)
    elif _raw_db.startswith("postgresql://"):
        _raw_db = _raw_db.replace("postgresql://", "postgresql+psycopg2://", 1)
    if "sslmode=" not in _raw_db and "+psycopg2://" in _raw_db:
        _raw_db += ("&" if "?" in _raw_db else "?") + "sslmode=require"
    SQLALCHEMY_DATABASE_URI = _raw_db

ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}


def _env_list(name, default):
    return [x.strip() for x in os.getenv(name, default).split(",") if x.strip()]


def create_app(test_config=None):
    app = Flask(__name__)
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "cm-dev-secret"),
        SQLALCHEMY_DATABASE_URI=SQLALCHEMY_DATABASE_URI,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ENGINE_OPTIONS=ENGINE_OPTIONS,
        STORAGE_PATH=os.getenv("STORAGE_PATH", str(Path(app.instance_path, "local_storage.json"))),
        JWT_SECRET=os.getenv("JWT_SECRET", "cm-dev-secret"),
        JWT_TTL_MIN=int(os.getenv("JWT_TTL_MIN", "720")),
        ADMIN_EMAIL=os.getenv("ADMIN_EMAIL", "isabelle@chiefmedia.sg"),
        ADMIN_PASSWORD=os.getenv("ADMIN_PASSWORD", "admin123"),
        REALTOR_DOMAINS=_env_list("REALTOR_DOMAINS", "@kwsingapore.com,@propertylimbrothers.com"),
        VERIFICATION_TTL_MIN=int(os.getenv("VERIFICATION_TTL_MIN", "10")),
        STRAPI_BASE_URL=os.getenv("STRAPI_BASE_URL", "https://cheerful-bouquet-5ddcfa597e.strapiapp.com").rstrip("/"),
        STRAPI_TIMEOUT=float(os.getenv("STRAPI_TIMEOUT", "12")),
        SMTP_HOST=os.getenv("SMTP_HOST"),
        SMTP_PORT=int(os.getenv("SMTP_PORT", "587")),
        SMTP_USER=os.getenv("SMTP_USER"),
        SMTP_PASS=os.getenv("SMTP_PASS"),
        MAIL_FROM=os.getenv("MAIL_FROM", "noreply@chiefmedia.sg"),
        CORS_ORIGINS=_env_list("CORS_ORIGINS", "*"),
        LOG_DIR=os.getenv("LOG_DIR", str(BASE_DIR / "logs")),
    )
    if test_config:
        app.config.update(test_config)

    db.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)
    _init_logging(app)

    # Models must be imported before create_all so their tables are registered
    import models_auth  # noqa: F401
    from routes_auth import bp_auth
    from routes_enquiries import bp_enquiries
    from routes_vendors import bp_vendors
    from routes_invoices import bp_invoices
    from routes_pages import bp_pages

    app.register_blueprint(bp_auth)
    app.register_blueprint(bp_enquiries)
    app.register_blueprint(bp_vendors)
    app.register_blueprint(bp_invoices)
    app.register_blueprint(bp_pages)

    with app.app_context():
        db.create_all()

    @app.get("/health")
    @app.get("/healthz")
    def health():
        return jsonify(ok=True, service="chiefmedia-backend")

    return app


def _init_logging(app):
    app.logger.setLevel(logging.INFO)
    app.logger.removeHandler(default_handler)
    # app.logger is shared by name across app instances (tests build many)
    names = {h.get_name() for h in app.logger.handlers}
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    if "backend-stream" not in names:
        sh = logging.StreamHandler(); sh.set_name("backend-stream")
        sh.setFormatter(fmt); app.logger.addHandler(sh)
    if "backend-file" in names:
        return
    try:
        logs_dir = Path(app.config["LOG_DIR"]); logs_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(logs_dir / "backend.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.set_name("backend-file"); fh.setFormatter(fmt); app.logger.addHandler(fh)
    except OSError as e:
        app.logger.warning("File logging disabled: %s", e)
    app.logger.info("Logging ready")


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "10000")), debug=True)
