import logging
import os

from flask import Flask, jsonify
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from videplacard_backend.api import init_app as init_api
from videplacard_backend.config import DEFAULT_LLM_MODEL, DEFAULT_LLM_TEMPERATURE
from videplacard_backend.models import Base, get_database_url
from videplacard_backend.services.llm import LLMSettings, init_llm_client
from videplacard_backend.services.store import (
    InMemoryKeyValueStore,
    SqlKeyValueStore,
)


def create_app() -> Flask:
    """Application factory for the Vide-Placard backend."""
    app = Flask(__name__)

    _configure_logging(app)
    _init_store(app)

    @app.get("/healthz")
    def healthcheck():
        return jsonify(status="ok")

    @app.get("/api/healthz")
    def api_healthcheck():
        return jsonify(status="ok")

    llm_api_key = os.environ.get("VIDEPLACARD_LLM_API_KEY") or os.environ.get(
        "OPENAI_API_KEY"
    )
    llm_model = os.environ.get("VIDEPLACARD_LLM_MODEL", DEFAULT_LLM_MODEL)
    llm_temperature = _read_temperature(app)

    if llm_api_key:
        app.extensions["llm_client"] = init_llm_client(
            LLMSettings(
                api_key=llm_api_key,
                model=llm_model,
                temperature=llm_temperature,
            )
        )
    else:
        app.logger.warning(
            "VIDEPLACARD_LLM_API_KEY/OPENAI_API_KEY not set; recipe and scan "
            "endpoints will return a configuration error"
        )

    init_api(app)

    return app


def _configure_logging(app: Flask) -> None:
    """Ensure application and root loggers emit INFO-level logs."""

    logging.basicConfig(level=logging.INFO)
    logging.getLogger().setLevel(logging.INFO)
    app.logger.setLevel(logging.INFO)


def _read_temperature(app: Flask) -> float:
    raw_temperature = os.environ.get("VIDEPLACARD_LLM_TEMPERATURE")
    if raw_temperature is None:
        return DEFAULT_LLM_TEMPERATURE
    try:
        return float(raw_temperature)
    except ValueError:
        app.logger.warning(
            "invalid VIDEPLACARD_LLM_TEMPERATURE=%s; using %s",
            raw_temperature,
            DEFAULT_LLM_TEMPERATURE,
        )
        return DEFAULT_LLM_TEMPERATURE


def _init_store(app: Flask) -> None:
    """Configure the key-value store backing both persisted collections."""

    try:
        database_url = get_database_url()
    except RuntimeError:
        app.logger.warning(
            "DATABASE_URL not set; using an in-memory store that is lost on restart"
        )
        app.extensions["kv_store"] = InMemoryKeyValueStore()
        return

    engine = create_engine(database_url, pool_pre_ping=True)
    if database_url.startswith("sqlite"):
        # Local development databases are not managed by Alembic.
        Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    app.extensions["db_engine"] = engine
    app.extensions["kv_store"] = SqlKeyValueStore(SessionLocal)


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000)
