from datetime import date
from decimal import Decimal

import pytest

from finanzas.core.ahorro import Ahorro, ancho_barra, progreso
from finanzas.core.errores import ErrorValidacion, NoEncontrado

from conftest import USUARIO


def test_obtener_sin_registro(store, reloj):
    assert Ahorro(store, reloj).obtener(USUARIO) == {
        "valor_actual": 0, "valor_meta": 0, "fecha_actualizacion": None}


def test_guardar_inserta_y_luego_actualiza(store, reloj):
    a = Ahorro(store, reloj)
    row = a.guardar(USUARIO, "100,50", 1000)
    assert row["valor_actual"] == Decimal("100.50")
    assert row["fecha_actualizacion"] == date(2024, 3, 15)
    row = a.guardar(USUARIO, 200, "2000")
    assert (row["valor_actual"], row["valor_meta"]) == (Decimal("200"), Decimal("2000"))
    assert len(store.ahorros) == 1


@pytest.mark.parametrize("actual, meta", [(-1, 10), (10, -1), ("abc", 10), (None, 10), (10, None)])
def test_guardar_invalido(store, reloj, actual, meta):
    with pytest.raises(ErrorValidacion):
        Ahorro(store, reloj).guardar(USUARIO, actual, meta)
    assert store.ahorros == {}


def test_agregar_sin_registro_crea_con_meta_cero(store, reloj):
    row = Ahorro(store, reloj).agregar(USUARIO, "25")
    assert row["valor_actual"] == Decimal("25")
    assert row["valor_meta"] == 0


def test_agregar_suma(store, reloj):
    a = Ahorro(store, reloj)
    a.guardar(USUARIO, 100, 500)
    assert a.agregar(USUARIO, 50)["valor_actual"] == Decimal("150")


@pytest.mark.parametrize("valor", [0, -5, "x", None, "inf"])
def test_agregar_y_retirar_invalidos(store, reloj, valor):
    a = Ahorro(store, reloj)
    with pytest.raises(ErrorValidacion):
        a.agregar(USUARIO, valor)
    with pytest.raises(ErrorValidacion):
        a.retirar(USUARIO, valor)


def test_retirar_sin_registro(store, reloj):
    with pytest.raises(NoEncontrado):
        Ahorro(store, reloj).retirar(USUARIO, 10)


@pytest.mark.parametrize("actual, retiro, esperado", [
    (100, 30, Decimal("70")),
    (100, 100, Decimal("0")),
    (100, 250, Decimal("0")),
    (0, 1, Decimal("0")),
])
def test_retirar_nunca_queda_negativo(store, reloj, actual, retiro, esperado):
    a = Ahorro(store, reloj)
    a.guardar(USUARIO, actual, 0)
    assert a.retirar(USUARIO, retiro)["valor_actual"] == esperado


def test_progreso():
    assert progreso(250, 1000) == 25
    assert progreso(1, 3) == 33
    assert progreso(5, 0) is None
    assert progreso(1500, 1000) == 150
    assert ancho_barra(1500, 1000) == 100
    assert ancho_barra(0, 0) is None
