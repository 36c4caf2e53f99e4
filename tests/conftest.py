from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from finanzas.app import app
from finanzas.auth import get_current_user
from finanzas.deps import get_reloj, get_store

AHORA = datetime(2024, 3, 15, 10, 30, 0)
USUARIO = 1


class MemoriaStore:
    """Mismos métodos que PgStore, sobre listas en memoria."""

    def __init__(self):
        self.tablas = {"gastos": [], "cuentas_fijas": [], "ingresos": []}
        self.ahorros = {}
        self._ids = {}
        self.fallos = {}  # {"actualizar": {3}, "eliminar": {2}, "insertar": True, ...}

    def _fallar(self, metodo, id=None):
        f = self.fallos.get(metodo)
        if f is True or (f and id in f):
            raise RuntimeError(f"fallo simulado en {metodo} id={id}")

    def _filas(self, tabla, usuario_id):
        return [r for r in self.tablas[tabla] if r["usuario_id"] == usuario_id]

    # ------------------------------ CRUD genérico ------------------------------
    def insertar(self, tabla, datos):
        self._fallar("insertar")
        self._ids[tabla] = self._ids.get(tabla, 0) + 1
        row = dict(datos, id=self._ids[tabla])
        self.tablas[tabla].append(row)
        return dict(row)

    def listar(self, tabla, usuario_id, orden="id", desc=False):
        self._fallar("listar")
        rows = sorted(self._filas(tabla, usuario_id), key=lambda r: r["id"])
        rows = sorted(rows, key=lambda r: r[orden], reverse=desc)
        return [dict(r) for r in rows]

    def actualizar(self, tabla, id, usuario_id, datos):
        self._fallar("actualizar", id)
        for r in self._filas(tabla, usuario_id):
            if r["id"] == id:
                r.update(datos)
                return 1
        return 0

    def eliminar(self, tabla, id, usuario_id):
        self._fallar("eliminar", id)
        antes = len(self.tablas[tabla])
        self.tablas[tabla] = [
            r for r in self.tablas[tabla] if not (r["id"] == id and r["usuario_id"] == usuario_id)
        ]
        return antes - len(self.tablas[tabla])

    def suma(self, tabla, campo, usuario_id, filtros=None):
        rows = [r for r in self._filas(tabla, usuario_id)
                if all(r.get(k) == v for k, v in (filtros or {}).items())]
        if not rows:
            return None
        return sum((Decimal(str(r[campo])) for r in rows), Decimal("0"))

    # --------------------------------- Gastos ---------------------------------
    def gastos_entre(self, usuario_id, inicio, fin):
        rows = [r for r in self._filas("gastos", usuario_id) if inicio <= r["fecha"] <= fin]
        return sorted(rows, key=lambda r: (r["fecha"], r["id"]), reverse=True)

    def gastos_de_categoria(self, usuario_id, categoria):
        rows = [r for r in self._filas("gastos", usuario_id) if r["categoria"] == categoria]
        return sorted(rows, key=lambda r: (r["fecha"], r["id"]), reverse=True)

    def suma_gastos(self, usuario_id, inicio=None, fin=None, categoria=None):
        self._fallar("suma_gastos")
        rows = self._filas("gastos", usuario_id)
        if inicio is not None and fin is not None:
            rows = [r for r in rows if inicio <= r["fecha"] <= fin]
        if categoria is not None:
            rows = [r for r in rows if r["categoria"] == categoria]
        if not rows:
            return None
        return sum((Decimal(str(r["valor"])) for r in rows), Decimal("0"))

    def suma_por_categoria(self, usuario_id, inicio, fin):
        totales = {}
        for r in self.gastos_entre(usuario_id, inicio, fin):
            totales[r["categoria"]] = totales.get(r["categoria"], Decimal("0")) + Decimal(str(r["valor"]))
        return [{"categoria": c, "total": t} for c, t in sorted(totales.items())]

    # --------------------------------- Ahorro ---------------------------------
    def obtener_ahorro(self, usuario_id):
        row = self.ahorros.get(usuario_id)
        return dict(row) if row else None

    def guardar_ahorro(self, usuario_id, valor_actual, valor_meta, fecha):
        row = self.ahorros.setdefault(usuario_id, {"id": len(self.ahorros) + 1, "usuario_id": usuario_id})
        row.update(valor_actual=valor_actual, valor_meta=valor_meta, fecha_actualizacion=fecha)
        return dict(row)

    def sumar_ahorro(self, usuario_id, valor, fecha):
        row = self.ahorros.get(usuario_id)
        if row is None:
            return self.guardar_ahorro(usuario_id, valor, Decimal("0"), fecha)
        row.update(valor_actual=row["valor_actual"] + valor, fecha_actualizacion=fecha)
        return dict(row)

    def restar_ahorro(self, usuario_id, valor, fecha):
        row = self.ahorros.get(usuario_id)
        if row is None:
            return None
        row.update(valor_actual=max(Decimal("0"), row["valor_actual"] - valor), fecha_actualizacion=fecha)
        return dict(row)


@pytest.fixture
def store():
    return MemoriaStore()


@pytest.fixture
def reloj():
    return lambda: AHORA


@pytest.fixture
def client(store, reloj):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_reloj] = lambda: reloj
    app.dependency_overrides[get_current_user] = lambda: USUARIO
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonimo(store, reloj):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_reloj] = lambda: reloj
    yield TestClient(app)
    app.dependency_overrides.clear()
