"""
Bloqueo de escritura para el ciclo leer-modificar-escribir del archivo JSON.

Sin bloqueo, dos requests que modifican a la vez pueden pisarse: el segundo
en escribir borra los cambios del primero. Con "local" se serializan los
threads de un mismo proceso; con "redis" se serializan todos los procesos
que comparten el mismo Redis.
"""
import logging
import os
import threading
from contextlib import contextmanager

import redis

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Un lock por archivo, compartido por todo el proceso
_local_locks = {}
_local_locks_guard = threading.Lock()


class NoLock:
    """Sin serialización: se acepta la carrera de escrituras perdidas"""

    @contextmanager
    def hold(self):
        yield


class LocalWriteLock:
    def __init__(self, data_file):
        key = os.path.abspath(data_file)
        with _local_locks_guard:
            self._lock = _local_locks.setdefault(key, threading.Lock())

    @contextmanager
    def hold(self):
        with self._lock:
            yield


class RedisWriteLock:
    def __init__(self, client, name, timeout=10, wait=5):
        self.client = client
        self.name = name
        self.timeout = timeout
        self.wait = wait

    @contextmanager
    def hold(self):
        lock = self.client.lock(self.name, timeout=self.timeout, blocking_timeout=self.wait)
        try:
            acquired = lock.acquire()
        except redis.exceptions.RedisError as e:
            raise StoreUnavailable("No se pudo contactar a Redis para bloquear la escritura") from e
        if not acquired:
            raise StoreUnavailable("No se pudo obtener el bloqueo de escritura")

        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # El lock expiró antes de terminar (LOCK_TIMEOUT demasiado corto)
                logger.warning("El bloqueo %s expiró antes de liberarse", self.name)
            except redis.exceptions.RedisError as e:
                # Los datos ya se escribieron; el lock expira solo
                logger.warning("No se pudo liberar el bloqueo %s: %s", self.name, e)


def build_write_lock(backend, data_file, redis_url=None, timeout=10, wait=5, client=None):
    """Construye el bloqueo configurado en LOCK_BACKEND"""
    if backend == "none":
        return NoLock()
    if backend == "local":
        return LocalWriteLock(data_file)
    if backend == "redis":
        if client is None:
            client = redis.Redis.from_url(redis_url, decode_responses=True)
        name = f"lock:usuarios:{os.path.abspath(data_file)}"
        return RedisWriteLock(client, name, timeout=timeout, wait=wait)
    raise ValueError(f"LOCK_BACKEND desconocido: {backend!r}")
