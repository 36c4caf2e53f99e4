# core/gastos.py
from __future__ import annotations
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from finanzas.core.errores import ErrorValidacion, NoEncontrado, exigir_usuario, frontera
from finanzas.core.resumen import a_decimal


def _validar(descripcion, categoria, valor) -> Dict[str, Any]:
    if not descripcion or not categoria or valor in (None, ""):
        raise ErrorValidacion("Descripción, categoría y valor son obligatorios.")
    v = a_decimal(valor)
    if v < 0:
        raise ErrorValidacion("El valor no puede ser negativo.")
    return {"descripcion": str(descripcion).strip(), "categoria": str(categoria).strip(), "valor": v}


class Gastos:
    def __init__(self, store, reloj: Callable[[], datetime] = datetime.now):
        self.store = store
        self.reloj = reloj

    @frontera("Error al registrar gasto.")
    def registrar(self, usuario_id, descripcion, categoria, valor) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        data = _validar(descripcion, categoria, valor)
        data.update(usuario_id=usuario_id, fecha=self.reloj())
        return self.store.insertar("gastos", data)

    @frontera("Error al listar gastos.")
    def listar(self, usuario_id) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        return self.store.listar("gastos", usuario_id, orden="fecha", desc=True)

    @frontera("Error al actualizar gasto.")
    def actualizar(self, usuario_id, id: int, descripcion, categoria, valor) -> None:
        exigir_usuario(usuario_id)
        data = _validar(descripcion, categoria, valor)
        if self.store.actualizar("gastos", id, usuario_id, data) == 0:
            raise NoEncontrado("Gasto no encontrado.")

    @frontera("Error al eliminar gasto.")
    def eliminar(self, usuario_id, id: Optional[int]) -> None:
        exigir_usuario(usuario_id)
        if id is None:
            raise ErrorValidacion("ID inválido.")
        if self.store.eliminar("gastos", id, usuario_id) == 0:
            raise NoEncontrado("Gasto no encontrado.")
