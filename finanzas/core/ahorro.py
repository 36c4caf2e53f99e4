# core/ahorro.py
from __future__ import annotations
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional

from finanzas.core.errores import ErrorValidacion, NoEncontrado, exigir_usuario, frontera
from finanzas.core.resumen import CERO, a_decimal


def progreso(actual, meta) -> Optional[int]:
    """Porcentaje de la meta alcanzado; None cuando no hay meta."""
    actual, meta = Decimal(str(actual or 0)), Decimal(str(meta or 0))
    if meta <= 0:
        return None
    return int((actual / meta * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def ancho_barra(actual, meta) -> Optional[int]:
    p = progreso(actual, meta)
    return None if p is None else min(100, p)

class Ahorro:
    def __init__(self, store, reloj: Callable[[], datetime] = datetime.now):
        self.store = store
        self.reloj = reloj

    def _hoy(self):
        return self.reloj().date()

    @frontera("Error al obtener los datos de ahorro.")
    def obtener(self, usuario_id) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        row = self.store.obtener_ahorro(usuario_id)
        if row is None:
            return {"valor_actual": CERO, "valor_meta": CERO, "fecha_actualizacion": None}
        return row

    @frontera("Error al guardar el ahorro.")
    def guardar(self, usuario_id, valor_actual, valor_meta) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        if valor_actual is None or valor_meta is None:
            raise ErrorValidacion("Valor actual y meta son obligatorios.")
        actual = a_decimal(valor_actual, "valor actual")
        meta = a_decimal(valor_meta, "meta")
        if actual < 0 or meta < 0:
            raise ErrorValidacion("Los valores no pueden ser negativos.")
        return self.store.guardar_ahorro(usuario_id, actual, meta, self._hoy())

    @frontera("Error al agregar valor al ahorro.")
    def agregar(self, usuario_id, valor) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        d = a_decimal(valor)
        if d <= 0:
            raise ErrorValidacion("El valor debe ser mayor que cero.")
        return self.store.sumar_ahorro(usuario_id, d, self._hoy())

    @frontera("Error al retirar valor del ahorro.")
    def retirar(self, usuario_id, valor) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        d = a_decimal(valor)
        if d <= 0:
            raise ErrorValidacion("El valor debe ser mayor que cero.")
        row = self.store.restar_ahorro(usuario_id, d, self._hoy())
        if row is None:
            raise NoEncontrado("No hay registro de ahorro para este usuario.")
        return row
