"""
Aplicación principal del servicio de usuarios
Registra el blueprint de usuarios, los manejadores de errores y el store JSON
"""
import logging

from flask import Flask, jsonify

from . import config
from .controllers.usuarios_controller import usuarios_bp
from .middleware.errors import register_error_handlers
from .middleware.locking import build_write_lock
from .services.usuarios_service import UsuariosStore

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_mapping(config.as_mapping())
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    # Mantener el orden de los campos tal como están guardados (id primero)
    app.json.sort_keys = False

    write_lock = build_write_lock(
        app.config["LOCK_BACKEND"],
        app.config["DATA_FILE"],
        redis_url=app.config["REDIS_URL"],
        timeout=app.config["LOCK_TIMEOUT"],
        wait=app.config["LOCK_WAIT"],
        client=app.config.get("REDIS_CLIENT"),
    )
    store = UsuariosStore(app.config["DATA_FILE"], write_lock=write_lock)
    # Crear archivo si no existe
    store.ensure_exists()
    app.extensions["usuarios_store"] = store

    register_error_handlers(app)
    app.register_blueprint(usuarios_bp)

    @app.route("/", methods=["GET"])
    def index():
        return "Bienvenido a la API!"

    @app.route("/health", methods=["GET"])
    def health():
        """Endpoint de salud del servicio"""
        return jsonify({"status": "ok", "service": "usuarios"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    logger.info("El servidor esta escuchando en el puerto %s", app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"])
