"""
Configuración del servicio de usuarios, leída desde variables de entorno
"""
import os


def _int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# Archivo JSON que hace de base de datos
DATA_FILE = os.getenv("USUARIOS_DATA_FILE", "db.json")

# Bloqueo de escritura: "local", "redis" o "none"
LOCK_BACKEND = os.getenv("USUARIOS_LOCK_BACKEND", "local").strip().lower()
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
LOCK_TIMEOUT = _int(os.getenv("USUARIOS_LOCK_TIMEOUT"), 10)  # segundos
LOCK_WAIT = _int(os.getenv("USUARIOS_LOCK_WAIT"), 5)  # segundos

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = _int(os.getenv("PORT"), 3000)


def as_mapping():
    """Valores por defecto para app.config"""
    return {
        "DATA_FILE": DATA_FILE,
        "LOCK_BACKEND": LOCK_BACKEND,
        "REDIS_URL": REDIS_URL,
        "LOCK_TIMEOUT": LOCK_TIMEOUT,
        "LOCK_WAIT": LOCK_WAIT,
        "LOG_LEVEL": LOG_LEVEL,
        "HOST": HOST,
        "PORT": PORT,
    }
