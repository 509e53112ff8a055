"""In-memory stand-in for the parts of the Supabase client the service uses."""

from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Callable

# Real city centroids: Goiania/GO, Anapolis/GO (~52 km away), Uberlandia/MG (~270 km away).
GOIANIA = (-16.6869, -49.2648)
ANAPOLIS = (-16.3281, -48.9535)
UBERLANDIA = (-18.9186, -48.2772)


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._on_conflict: str | None = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: int | None = None

    # operations
    def select(self, *columns, **kwargs):
        self._op = "select"
        return self

    def delete(self):
        self._op = "delete"
        return self

    def upsert(self, payload, on_conflict: str = "", **kwargs):
        self._op = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def insert(self, payload, **kwargs):
        self._op = "insert"
        self._payload = payload
        return self

    # filters
    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        if value in ("null", None):
            self._filters.append(lambda row: row.get(column) is None)
        else:
            self._filters.append(lambda row: row.get(column) is value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order.append((column, desc))
        return self

    def limit(self, size: int):
        self._limit = size
        return self

    def execute(self) -> FakeResponse:
        rows = self._payload if isinstance(self._payload, list) else [self._payload]
        self._db.calls.append((self._table, self._op))
        self._db.check_failure(self._table, self._op, rows if self._payload is not None else [])

        store = self._db.tables.setdefault(self._table, [])
        if self._op == "select":
            result = [copy.deepcopy(row) for row in store if all(f(row) for f in self._filters)]
            for column, desc in reversed(self._order):
                result.sort(key=lambda row: (row.get(column) is None, row.get(column) or 0), reverse=desc)
            if self._limit is not None:
                result = result[: self._limit]
            return FakeResponse(result)

        if self._op == "delete":
            removed = [row for row in store if all(f(row) for f in self._filters)]
            self._db.tables[self._table] = [row for row in store if row not in removed]
            return FakeResponse(removed)

        if self._op == "upsert":
            keys = [k.strip() for k in (self._on_conflict or "").split(",") if k.strip()]
            for row in rows:
                existing = next(
                    (i for i, current in enumerate(store) if keys and all(current.get(k) == row.get(k) for k in keys)),
                    None,
                )
                if existing is None:
                    store.append(dict(row))
                else:
                    store[existing] = dict(row)
            return FakeResponse(rows)

        store.extend(dict(row) for row in rows)
        return FakeResponse(rows)


class FakeAuth:
    def __init__(self):
        self.tokens: dict[str, str] = {}

    def get_user(self, token: str):
        if token not in self.tokens:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[token]))


class FakeSupabase:
    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables: dict[str, list[dict]] = {name: list(rows) for name, rows in (tables or {}).items()}
        self.calls: list[tuple[str, str]] = []
        self.auth = FakeAuth()
        self._failures: list[Callable[[str, str, list[dict]], bool]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_when(self, predicate: Callable[[str, str, list[dict]], bool]) -> None:
        self._failures.append(predicate)

    def check_failure(self, table: str, op: str, rows: list[dict]) -> None:
        for predicate in self._failures:
            if predicate(table, op, rows):
                raise RuntimeError(f"simulated {op} failure on {table}")


def city(city_id: str, name: str, state: str, lat: float | None = None, lng: float | None = None) -> dict:
    return {"id": city_id, "name": name, "state": state, "lat": lat, "lng": lng}


def area_row(
    area_id: str,
    user_id: str = "user-1",
    city_data: dict | None = None,
    radius_km: float | None = 50,
    area_type: str = "MOTORISTA_ORIGEM",
    is_active: bool = True,
    created_at: str = "2024-01-01T00:00:00+00:00",
) -> dict:
    return {
        "id": area_id,
        "user_id": user_id,
        "city_id": city_data["id"] if city_data else None,
        "radius_km": radius_km,
        "type": area_type,
        "is_active": is_active,
        "created_at": created_at,
        "cities": city_data,
    }


def freight_row(
    freight_id: str,
    lat: float | None = None,
    lng: float | None = None,
    city_name: str | None = None,
    state: str | None = None,
    city_id: str | None = None,
    status: str = "OPEN",
    driver_id: str | None = None,
    created_at: str = "2024-02-01T00:00:00+00:00",
) -> dict:
    return {
        "id": freight_id,
        "status": status,
        "driver_id": driver_id,
        "origin_lat": lat,
        "origin_lng": lng,
        "origin_city": city_name,
        "origin_state": state,
        "origin_city_id": city_id,
        "created_at": created_at,
    }


def service_request_row(
    request_id: str,
    service_type: str = "GUINCHO",
    lat: float | None = None,
    lng: float | None = None,
    city_name: str | None = None,
    state: str | None = None,
    city_id: str | None = None,
    status: str = "OPEN",
    provider_id: str | None = None,
    created_at: str = "2024-02-01T00:00:00+00:00",
) -> dict:
    return {
        "id": request_id,
        "status": status,
        "provider_id": provider_id,
        "service_type": service_type,
        "location_lat": lat,
        "location_lng": lng,
        "city_name": city_name,
        "state": state,
        "city_id": city_id,
        "created_at": created_at,
    }
