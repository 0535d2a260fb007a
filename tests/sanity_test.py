from datetime import date

from fastapi.testclient import TestClient

from main import app

client = TestClient(app)

BIRTH = {"day": "15", "month": "5", "year": "1990"}
TARGET = {"day": "15", "month": "5", "year": "2024"}


def form_fields(birth, target):
    data = {f"birth_{k}": v for k, v in birth.items()}
    data.update({f"target_{k}": v for k, v in target.items()})
    return data


def test_landing():
    r = client.get("/")
    assert r.status_code == 200
    assert "Calculadora da Idade" in r.text
    assert str(date.today().year) in r.text


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_calculate_json():
    r = client.post("/calculate", json={"birth": BIRTH, "target": TARGET})
    assert r.status_code == 200
    data = r.json()["result"]
    assert (data["years"], data["months"], data["days"]) == (34, 0, 0)
    assert data["target_date_formatted"] == "15/05/2024"
    assert data["birth_date_formatted"] == "15/05/1990"
    assert data["zodiac"] == "Touro"
    assert data["summary"] == "34 anos"
    assert data["is_future"] is True


def test_calculate_json_missing_birth():
    r = client.post("/calculate", json={"birth": {"day": "", "month": "5", "year": "1990"}, "target": TARGET})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "missing_field"
    assert error["field"] == "birth"


def test_calculate_json_missing_target():
    r = client.post("/calculate", json={"birth": BIRTH})
    assert r.status_code == 422
    assert r.json()["error"]["field"] == "target"


def test_calculate_json_invalid_target():
    r = client.post("/calculate", json={"birth": BIRTH, "target": {"day": "31", "month": "4", "year": "2024"}})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "invalid_date"
    assert error["field"] == "target"
    assert error["message"] == "A data de cálculo informada é inválida."


def test_calculate_json_huge_field():
    r = client.post("/calculate", json={"birth": {"day": "9" * 5000, "month": "1", "year": "2000"}, "target": TARGET})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "invalid_date"
    assert error["field"] == "birth"


def test_calculate_malformed_json_body():
    r = client.post("/calculate", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "missing_field"
    assert error["field"] == "birth"


def test_calculate_non_object_parts():
    r = client.post("/calculate", json={"birth": ["1"], "target": "x"})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "missing_field"
    assert error["field"] == "birth"

    r = client.post("/calculate", json=["not", "an", "object"])
    assert r.status_code == 422


def test_calculate_json_order_violation():
    r = client.post("/calculate", json={"birth": TARGET, "target": BIRTH})
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["kind"] == "order_violation"
    assert error["field"] is None


def test_calculate_form_renders_result():
    c = TestClient(app)
    r = c.post("/calculate", data=form_fields(BIRTH, TARGET))
    assert r.status_code == 200
    assert "34 anos" in r.text
    assert "Touro" in r.text

    # last result survives a reload through the session cookie
    r = c.get("/")
    assert "34 anos" in r.text

    r = c.get("/reset")
    assert r.status_code == 200
    r = c.get("/")
    assert "a pessoa terá" not in r.text


def test_calculate_form_renders_error():
    r = client.post("/calculate", data=form_fields({"day": "31", "month": "2", "year": "2020"}, TARGET))
    assert r.status_code == 422
    assert "A data de nascimento informada é inválida (ex: 31/02)." in r.text


def test_zodiac_endpoint():
    r = client.get("/zodiac/25/12")
    assert r.status_code == 200
    assert r.json()["zodiac"] == "Capricórnio"
    assert client.get("/zodiac/20/1").json()["zodiac"] == "Aquário"
    assert client.get("/zodiac/40/1").status_code == 422
    assert client.get("/zodiac/1/13").status_code == 422


def test_today():
    r = client.get("/today")
    assert r.status_code == 200
    today = date.today()
    assert r.json()["today"] == {"day": str(today.day), "month": str(today.month), "year": str(today.year)}
    assert r.json()["formatted"] == today.strftime("%d/%m/%Y")


def test_theme_toggle():
    c = TestClient(app)
    first = c.post("/theme", json={}).json()["theme"]
    second = c.post("/theme", json={}).json()["theme"]
    assert {first, second} == {"light", "dark"}
    r = c.get("/")
    assert f'class="{second}"' in r.text


def test_unknown_route():
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "Endpoint not found: /nope"


if __name__ == "__main__":
    test_landing()
    test_calculate_json()
    test_zodiac_endpoint()
    print("All sanity checks passed")
