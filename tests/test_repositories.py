from src.freight_matching.data.candidates_repository import (
    load_candidates_by_ids,
    load_open_freights,
    load_open_service_requests,
    parse_freight_row,
)
from src.freight_matching.data.coverage_repository import load_active_areas, parse_area_row
from tests.fakes import GOIANIA, area_row, city, freight_row, service_request_row

URBAN = ("FRETE_MOTO", "GUINCHO", "MUDANCA", "PICAPE", "FRETE_URBANO", "MOTO", "GUINCHO_URBANO")


def test_parse_area_row_defaults_radius_and_reads_centroid():
    row = area_row("A1", city_data=city("c1", "Goiânia", "GO", *GOIANIA), radius_km=None)

    area = parse_area_row(row, default_radius_km=50)

    assert area.radius_km == 50
    assert area.centroid == GOIANIA
    assert area.city_id == "c1"
    assert area.kind == "ORIGIN"


def test_parse_area_row_without_city_has_no_centroid():
    area = parse_area_row(area_row("A1", area_type="MOTORISTA_DESTINO"), default_radius_km=50)

    assert area.city_ref is None
    assert area.centroid is None
    assert area.kind == "DESTINATION"


def test_load_active_areas_filters_driver_and_activity(fake_db):
    fake_db.tables["user_cities"] = [
        area_row("A2", created_at="2024-03-01T00:00:00+00:00"),
        area_row("A1", created_at="2024-01-01T00:00:00+00:00", area_type="MOTORISTA_DESTINO"),
        area_row("inactive", is_active=False),
        area_row("other-driver", user_id="user-9"),
        area_row("provider-area", area_type="PRESTADOR_SERVICO"),
    ]

    areas = load_active_areas(fake_db, "user-1", default_radius_km=50)

    assert [a.area_id for a in areas] == ["A1", "A2"]


def test_parse_freight_row_treats_nan_as_missing():
    candidate = parse_freight_row(freight_row("F1", lat=float("nan"), lng=-49.2, city_name=" Goiânia "))

    assert candidate.lat is None
    assert candidate.lng == -49.2
    assert candidate.city_label == "Goiânia"


def test_load_open_freights_excludes_assigned_and_closed(fake_db):
    fake_db.tables["freights"] = [
        freight_row("old", created_at="2024-01-01T00:00:00+00:00"),
        freight_row("new", created_at="2024-05-01T00:00:00+00:00"),
        freight_row("assigned", driver_id="profile-7"),
        freight_row("cancelled", status="CANCELLED"),
    ]

    freights = load_open_freights(fake_db, limit=200)

    assert [f.candidate_id for f in freights] == ["new", "old"]


def test_load_open_freights_is_bounded(fake_db):
    fake_db.tables["freights"] = [
        freight_row(f"F{i:03d}", created_at=f"2024-01-01T00:{i // 60:02d}:{i % 60:02d}+00:00") for i in range(250)
    ]

    freights = load_open_freights(fake_db, limit=200)

    assert len(freights) == 200
    assert freights[0].candidate_id == "F249"


def test_service_requests_outside_allow_list_are_never_read(fake_db):
    fake_db.tables["service_requests"] = [
        service_request_row("cleaning", service_type="LIMPEZA", lat=GOIANIA[0], lng=GOIANIA[1]),
        service_request_row("tow", service_type="GUINCHO", lat=GOIANIA[0], lng=GOIANIA[1]),
        service_request_row("taken", service_type="MUDANCA", provider_id="profile-8"),
    ]

    requests = load_open_service_requests(fake_db, service_types=URBAN, limit=200)

    assert [r.candidate_id for r in requests] == ["tow"]
    assert requests[0].kind == "SERVICE_REQUEST"


def test_load_candidates_by_ids_keeps_only_open(fake_db):
    fake_db.tables["freights"] = [
        freight_row("F1"),
        freight_row("F2", status="IN_TRANSIT"),
        freight_row("F3"),
    ]

    candidates = load_candidates_by_ids(fake_db, "FREIGHT", ["F1", "F2"])

    assert [c.candidate_id for c in candidates] == ["F1"]
    assert load_candidates_by_ids(fake_db, "FREIGHT", []) == []
