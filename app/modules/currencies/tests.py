"""
Tests para el módulo de Monedas

Cubren:
- Regla de moneda principal única
- Validación de tasa en monedas secundarias manuales
- Soft delete y protección de la moneda principal
- Actualización automática de tasas con proveedores simulados (httpx.MockTransport)
"""

import inspect
import pytest
import httpx
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from fastapi.testclient import TestClient

from app.main import app
from app.modules.currencies.models import Currency
from app.modules.currencies.router import update_rates
from app.modules.currencies.exchange_rates import ExchangeRateService
from app.modules.currencies.tasks import rates_update_due


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def automatic_currencies(db_session):
    usd = Currency(name="Dólar", code="USD", symbol="$", exchange_rate=Decimal("36"),
                   is_automatic=True, api_symbol="bcv")
    eur = Currency(name="Euro", code="EUR", symbol="€", exchange_rate=Decimal("39"),
                   is_automatic=True, api_symbol="bcv")
    db_session.add_all([usd, eur])
    db_session.commit()
    return usd, eur


def provider_transport(bcv_rate="40.50", eur_rate="0.90", binance_prices=None):
    """Transport que responde como dolarapi, open.er-api y Binance P2P"""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if "dolarapi" in url:
            return httpx.Response(200, json={"promedio": bcv_rate})
        if "er-api" in url:
            return httpx.Response(200, json={"rates": {"EUR": eur_rate}})
        if "binance" in url:
            ads = [
                {"adv": {"price": price, "maxSingleTransAmount": limit}}
                for price, limit in (binance_prices or [])
            ]
            return httpx.Response(200, json={"data": ads})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


# ===== CRUD =====

class TestCurrencyCrud:
    """Alta, consulta y baja de monedas"""

    def test_create_primary_currency_has_no_rate(self):
        response = client.post("/api/currencies", json={
            "name": "Bolívar", "code": "ves", "symbol": "Bs", "is_primary": True, "exchange_rate": 1
        })
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "VES"
        assert data["is_primary"] is True
        assert data["exchange_rate"] is None

    def test_new_primary_unsets_previous(self, primary_currency, db_session):
        response = client.post("/api/currencies", json={
            "name": "Dólar", "code": "USD", "symbol": "$", "is_primary": True
        })
        assert response.status_code == 201

        db_session.expire_all()
        previous = db_session.get(Currency, primary_currency.id)
        assert previous.is_primary is False

    def test_manual_secondary_requires_rate(self, primary_currency):
        response = client.post("/api/currencies", json={
            "name": "Dólar", "code": "USD", "symbol": "$"
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Las monedas secundarias manuales requieren tasa de cambio"

    def test_automatic_secondary_without_rate(self, primary_currency):
        response = client.post("/api/currencies", json={
            "name": "Dólar", "code": "USD", "symbol": "$", "is_automatic": True, "api_symbol": "bcv"
        })
        assert response.status_code == 201
        assert response.json()["api_symbol"] == "bcv"

    def test_duplicate_code_conflict(self, usd_currency):
        response = client.post("/api/currencies", json={
            "name": "Dólar americano", "code": "USD", "symbol": "$", "exchange_rate": 36
        })
        assert response.status_code == 409

    def test_list_primary_first(self, usd_currency, primary_currency):
        response = client.get("/api/currencies")
        assert response.status_code == 200
        codes = [c["code"] for c in response.json()]
        assert codes[0] == "VES"
        assert "USD" in codes

    def test_get_unknown_currency(self):
        response = client.get("/api/currencies/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404

    def test_cannot_delete_primary_with_others_active(self, primary_currency, usd_currency):
        response = client.delete(f"/api/currencies/{primary_currency.id}")
        assert response.status_code == 400

    def test_delete_secondary_is_soft(self, primary_currency, usd_currency):
        response = client.delete(f"/api/currencies/{usd_currency.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        active = client.get("/api/currencies").json()
        assert all(c["code"] != "USD" for c in active)

    def test_update_rates_requires_supervisor(self, cashier_headers):
        response = client.post("/api/currencies/update-rates", headers=cashier_headers)
        assert response.status_code == 403

    def test_update_rates_endpoint_runs_in_threadpool(self, auth_headers, automatic_currencies, monkeypatch):
        # httpx.Client es bloqueante: la ruta corre en el threadpool
        assert not inspect.iscoroutinefunction(update_rates)

        real_client = httpx.Client
        monkeypatch.setattr(httpx, "Client", lambda **kwargs: real_client(transport=provider_transport(), **kwargs))
        response = client.post("/api/currencies/update-rates", headers=auth_headers)
        assert response.status_code == 200
        assert sorted(response.json()["updated"]) == ["EUR", "USD"]

    def test_cannot_unset_only_primary(self, primary_currency, db_session):
        response = client.patch(f"/api/currencies/{primary_currency.id}", json={"is_primary": False})
        assert response.status_code == 400
        assert response.json()["message"] == "Debe existir una moneda principal: marque otra moneda como principal"

        db_session.expire_all()
        assert db_session.get(Currency, primary_currency.id).is_primary is True

    def test_primary_moves_when_another_is_marked(self, primary_currency, usd_currency, db_session):
        response = client.patch(f"/api/currencies/{usd_currency.id}", json={"is_primary": True})
        assert response.status_code == 200
        assert response.json()["exchange_rate"] is None

        db_session.expire_all()
        assert db_session.get(Currency, primary_currency.id).is_primary is False


# ===== TASAS AUTOMÁTICAS =====

class TestExchangeRateService:
    """Consulta de proveedores y actualización de tasas"""

    def test_update_rates_usd_and_eur(self, db_session, automatic_currencies):
        with httpx.Client(transport=provider_transport()) as http_client:
            result = ExchangeRateService(db_session, http_client).update_rates()

        assert sorted(result.updated) == ["EUR", "USD"]
        usd, eur = automatic_currencies
        db_session.refresh(usd)
        db_session.refresh(eur)
        assert usd.exchange_rate == Decimal("40.500000")
        assert eur.exchange_rate == Decimal("45.000000")
        assert usd.last_rate_update is not None

    def test_failed_provider_keeps_previous_rate(self, db_session, automatic_currencies):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        with httpx.Client(transport=transport) as http_client:
            result = ExchangeRateService(db_session, http_client).update_rates()

        assert result.updated == []
        assert sorted(result.skipped) == ["EUR", "USD"]
        usd, _ = automatic_currencies
        db_session.refresh(usd)
        assert usd.exchange_rate == Decimal("36")

    def test_binance_ignores_small_ads(self, db_session):
        prices = [("50.0", "100"), ("38.1", "5000"), ("38.2", "5000"), ("38.3", "5000"), ("38.4", "5000")]
        with httpx.Client(transport=provider_transport(binance_prices=prices)) as http_client:
            rate = ExchangeRateService(db_session, http_client).fetch_binance_p2p()
        assert rate == Decimal("38.4")

    def test_binance_with_few_ads_takes_last(self, db_session):
        prices = [("38.1", "5000"), ("38.2", "5000")]
        with httpx.Client(transport=provider_transport(binance_prices=prices)) as http_client:
            rate = ExchangeRateService(db_session, http_client).fetch_binance_p2p()
        assert rate == Decimal("38.2")

    def test_unknown_provider_returns_zero(self, db_session):
        with httpx.Client(transport=provider_transport()) as http_client:
            assert ExchangeRateService(db_session, http_client).fetch_base_rate("desconocido") == Decimal("0")

    def test_non_object_json_returns_zero(self, db_session, automatic_currencies):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2, 3]))
        with httpx.Client(transport=transport) as http_client:
            service = ExchangeRateService(db_session, http_client)
            assert service.fetch_bcv() == Decimal("0")
            assert service.fetch_binance_p2p() == Decimal("0")
            assert service.fetch_eur_usd_rate() == Decimal("0")
            result = service.update_rates()
        assert sorted(result.skipped) == ["EUR", "USD"]

    def test_binance_ads_with_wrong_shape_return_zero(self, db_session):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": ["38.1", None]}))
        with httpx.Client(transport=transport) as http_client:
            assert ExchangeRateService(db_session, http_client).fetch_binance_p2p() == Decimal("0")


class TestRatesUpdateDue:
    """Frecuencia de la tarea periódica"""

    def test_disabled(self):
        company = SimpleNamespace(auto_update_rates=False, last_rates_update=None, update_frequency=60)
        assert rates_update_due(company, datetime.utcnow()) is False

    def test_never_updated(self):
        company = SimpleNamespace(auto_update_rates=True, last_rates_update=None, update_frequency=60)
        assert rates_update_due(company, datetime.utcnow()) is True

    def test_respects_frequency(self):
        now = datetime(2025, 1, 1, 12, 0)
        company = SimpleNamespace(auto_update_rates=True, last_rates_update=now - timedelta(minutes=30),
                                  update_frequency=60)
        assert rates_update_due(company, now) is False
        assert rates_update_due(company, now + timedelta(minutes=30)) is True
