"""
Servicio de usuarios - acceso directo al archivo JSON que hace de base de datos.

Cada operación carga el documento completo desde disco, trabaja sobre esa
copia en memoria y, si modifica algo, reescribe el archivo entero. No hay
cache entre requests.
"""
import json
import logging
import os
import stat
import tempfile

from ..middleware.errors import NotFound, StoreUnavailable
from ..middleware.locking import NoLock

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644


def empty_document():
    return {"usuarios": []}


def find_available_id(usuarios):
    """
    Devuelve el menor entero positivo que no está en uso como ID.

    Recorre los IDs ordenados desde 1; el primer hueco es el ID disponible.
    Si no hay huecos el resultado es len(usuarios) + 1.
    """
    sorted_ids = sorted({u["id"] for u in usuarios if u["id"] >= 1})

    available_id = 1
    for id_ in sorted_ids:
        if id_ != available_id:
            break
        available_id += 1
    return available_id


class UsuariosStore:
    def __init__(self, data_file, write_lock=None):
        self.data_file = data_file
        self.write_lock = write_lock or NoLock()

    def ensure_exists(self):
        """Crea el archivo con un documento vacío si todavía no existe"""
        if os.path.exists(self.data_file):
            return
        directory = os.path.dirname(os.path.abspath(self.data_file))
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise StoreUnavailable() from e
        self.save(empty_document())
        logger.warning("No existía %s, se creó vacío", self.data_file)

    def load(self):
        try:
            with open(self.data_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreUnavailable() from e

        if not isinstance(data, dict) or not isinstance(data.get("usuarios"), list):
            raise StoreUnavailable("El archivo de datos no tiene una lista 'usuarios'")
        return data

    def save(self, data):
        # Ordenar los usuarios por ID antes de escribir
        data["usuarios"].sort(key=lambda u: u["id"])

        # Se escribe a un temporal y se renombra para no truncar el archivo si algo falla
        directory = os.path.dirname(os.path.abspath(self.data_file))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".usuarios-", suffix=".tmp")
        except OSError as e:
            raise StoreUnavailable() from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp crea el archivo con 0600; se conservan los permisos del original
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.data_file)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreUnavailable() from e

    def _file_mode(self):
        try:
            return stat.S_IMODE(os.stat(self.data_file).st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    # --- Operaciones ---

    def list_usuarios(self):
        return self.load()["usuarios"]

    def get_usuario(self, usuario_id):
        data = self.load()
        usuario = next((u for u in data["usuarios"] if u["id"] == usuario_id), None)
        if usuario is None:
            raise NotFound()
        return usuario

    def create_usuario(self, body):
        with self.write_lock.hold():
            data = self.load()
            nuevo_usuario = {"id": find_available_id(data["usuarios"])}
            # El ID lo asigna el store, nunca el cliente
            nuevo_usuario.update({k: v for k, v in body.items() if k != "id"})
            data["usuarios"].append(nuevo_usuario)
            self.save(data)

        logger.info("Usuario creado con ID %s", nuevo_usuario["id"])
        return nuevo_usuario

    def update_usuario(self, usuario_id, body):
        with self.write_lock.hold():
            data = self.load()
            usuarios = data["usuarios"]
            index = self._find_index(usuarios, usuario_id)

            usuarios[index] = {
                **usuarios[index],
                **{k: v for k, v in body.items() if k != "id"},
            }
            usuario = usuarios[index]
            self.save(data)

        logger.info("Usuario %s actualizado", usuario_id)
        return usuario

    def delete_usuario(self, usuario_id):
        with self.write_lock.hold():
            data = self.load()
            usuarios = data["usuarios"]
            index = self._find_index(usuarios, usuario_id)
            eliminado = usuarios.pop(index)
            self.save(data)

        logger.info("Usuario %s eliminado", usuario_id)
        return eliminado

    @staticmethod
    def _find_index(usuarios, usuario_id):
        for index, usuario in enumerate(usuarios):
            if usuario["id"] == usuario_id:
                return index
        raise NotFound()
