# core/errores.py
"""
Errores de dominio. Cada uno lleva el status HTTP con el que se responde;
el mapeo a la respuesta lo hace el handler registrado en app.py.
"""
from __future__ import annotations
import functools
import logging

logger = logging.getLogger("uvicorn.error")


class ErrorFinanzas(Exception):
    status_code = 500

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class ErrorValidacion(ErrorFinanzas):
    status_code = 400


class ErrorAutenticacion(ErrorFinanzas):
    status_code = 401

    def __init__(self, mensaje: str = "Usuario no autenticado."):
        super().__init__(mensaje)


class NoEncontrado(ErrorFinanzas):
    status_code = 404


class Conflicto(ErrorFinanzas):
    status_code = 409


class ErrorInterno(ErrorFinanzas):
    status_code = 500


def frontera(mensaje: str):
    """
    Límite de operación: deja pasar los errores de dominio y convierte
    cualquier otra excepción en ErrorInterno(mensaje). El detalle sólo
    queda en el log.
    """
    def deco(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ErrorFinanzas:
                raise
            except Exception:
                logger.exception("%s (%s)", mensaje, fn.__qualname__)
                raise ErrorInterno(mensaje)
        return wrapper
    return deco


def exigir_usuario(usuario_id) -> int:
    if usuario_id is None or usuario_id == "":
        raise ErrorAutenticacion()
    return usuario_id
