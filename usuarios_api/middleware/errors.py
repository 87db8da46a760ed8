"""
Errores del servicio de usuarios y sus manejadores para Flask.
Todas las respuestas de error son {"mensaje": ...} con el status HTTP.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class UsuariosError(Exception):
    status_code = 500
    mensaje = "Error interno del servidor"

    def __init__(self, mensaje=None):
        super().__init__(mensaje or self.mensaje)
        if mensaje:
            self.mensaje = mensaje


class InvalidId(UsuariosError):
    status_code = 400
    mensaje = "Debe proporcionar un ID valido(solo se aceptan numeros)"


class NotFound(UsuariosError):
    status_code = 404
    mensaje = "No se encontró ningún usuario con el ID proporcionado"


class EmptyBody(UsuariosError):
    status_code = 400
    mensaje = "Debe proporcionar al menos un dato para crear un nuevo usuario"


class InvalidBody(UsuariosError):
    status_code = 400
    mensaje = "El cuerpo de la solicitud debe ser un objeto JSON"


class MissingId(UsuariosError):
    status_code = 400
    mensaje = "Debe proporcionar un ID para eliminar un usuario"


class StoreUnavailable(UsuariosError):
    """El archivo de datos no se pudo leer, parsear o escribir"""
    status_code = 500
    mensaje = "No se pudo acceder a la base de datos de usuarios"


HTTP_MENSAJES = {
    404: "La ruta solicitada no existe",
    405: "Método no permitido para esta ruta",
}


def register_error_handlers(app):
    """Registra los manejadores que convierten excepciones en respuestas JSON"""

    @app.errorhandler(UsuariosError)
    def handle_usuarios_error(e):
        if isinstance(e, StoreUnavailable):
            logger.error("Store no disponible: %s (causa: %r)", e.mensaje, e.__cause__)
        return jsonify({"mensaje": e.mensaje}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        mensaje = HTTP_MENSAJES.get(e.code, e.description)
        return jsonify({"mensaje": mensaje}), e.code
