"""
Blueprint de usuarios
"""
import re

from flask import Blueprint, current_app, jsonify, request

from ..middleware.errors import EmptyBody, InvalidBody, InvalidId, MissingId

usuarios_bp = Blueprint('usuarios', __name__)

ID_PATTERN = re.compile(r"-?[0-9]+")


def get_store():
    return current_app.extensions["usuarios_store"]


def parse_id(raw_id):
    """Convierte el segmento de la ruta a entero o lanza InvalidId"""
    # int() acepta "1_0", " 7", "+7" y dígitos no ASCII; aquí solo [0-9]
    if not ID_PATTERN.fullmatch(raw_id):
        raise InvalidId()
    return int(raw_id)


@usuarios_bp.route("/usuarios", methods=["GET"])
@usuarios_bp.route("/usuarios/", methods=["GET"])
def get_usuarios():
    return jsonify(get_store().list_usuarios())


@usuarios_bp.route("/usuarios/<usuario_id>", methods=["GET"])
def get_usuario(usuario_id):
    usuario = get_store().get_usuario(parse_id(usuario_id))
    return jsonify(usuario)


@usuarios_bp.route("/usuarios", methods=["POST"])
@usuarios_bp.route("/usuarios/", methods=["POST"])
def add_usuario():
    body = request.get_json(silent=True)

    # Verificar que venga al menos un dato del usuario
    if not isinstance(body, dict) or not body:
        raise EmptyBody()

    nuevo_usuario = get_store().create_usuario(body)
    return jsonify(nuevo_usuario)


@usuarios_bp.route("/usuarios/<usuario_id>", methods=["PUT"])
def update_usuario(usuario_id):
    usuario_id = parse_id(usuario_id)

    body = request.get_json(silent=True)
    if body is None:
        body = {}
    elif not isinstance(body, dict):
        raise InvalidBody()

    usuario = get_store().update_usuario(usuario_id, body)
    return jsonify({"mensaje": "El usuario se actualizo correctamente", "usuario": usuario})


@usuarios_bp.route("/usuarios/<usuario_id>", methods=["DELETE"])
def delete_usuario(usuario_id):
    get_store().delete_usuario(parse_id(usuario_id))
    return jsonify({"mensaje": "El usuario se elimino correctamente"})


# Mensaje específico cuando no se indica qué usuario eliminar
@usuarios_bp.route("/usuarios", methods=["DELETE"])
@usuarios_bp.route("/usuarios/", methods=["DELETE"])
def delete_sin_id():
    raise MissingId()
