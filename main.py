"""
main.py — Calculadora da Idade backend
======================================
Notes:
- Single form page: birth date + target date -> age in years/months/days + zodiac
- Accepts JSON (fetch clients) or form-encoded posts (plain HTML form)
- Theme flag and last result live in the signed session cookie only
- Date rules live in date_logic.py, zodiac table in astrology.py
"""

import os
import traceback
from datetime import date, datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from astrology import zodiac_for, zodiac_range
from date_logic import (
    DateParts,
    check_request,
    compute_age,
    describe_age,
    format_date_string,
    today_parts,
)

# ============================================================
# CONFIG
# ============================================================

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")
STATIC_DIR = os.path.join(BASE_DIR, "static")
SECRET_KEY = os.environ.get("IDADE_SECRET_KEY", "calculadora-da-idade-dev-key")
HOST = os.environ.get("IDADE_HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT") or os.environ.get("IDADE_PORT") or "8000")
DEBUG_MODE = os.environ.get("IDADE_DEBUG", "false").lower() in ("1", "true", "yes")
THEMES = ("light", "dark")
DEFAULT_THEME = os.environ.get("IDADE_DEFAULT_THEME", "light").lower()
if DEFAULT_THEME not in THEMES:
    DEFAULT_THEME = "light"

app = FastAPI(title="Calculadora da Idade", debug=False)
app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)

if not os.path.isdir(STATIC_DIR):
    print(f"[main WARNING] static directory missing at expected path: {STATIC_DIR}")

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# ============================================================
# Logging helpers
# ============================================================
def log_debug(msg: str):
    if DEBUG_MODE:
        print(f"[{datetime.now().isoformat()}] DEBUG: {msg}")

def log_error(msg: str):
    print(f"[{datetime.now().isoformat()}] ERROR: {msg}")

# ============================================================
# Session helpers
# ============================================================
def get_theme(request: Request) -> str:
    theme = request.session.get("theme", DEFAULT_THEME)
    return theme if theme in THEMES else DEFAULT_THEME

def toggle_theme(request: Request) -> str:
    theme = "dark" if get_theme(request) == "light" else "light"
    request.session["theme"] = theme
    return theme

def store_result(request: Request, payload: dict):
    request.session["last_result"] = payload

def clear_result(request: Request):
    for k in ["last_result", "last_birth", "last_target"]:
        request.session.pop(k, None)

# ============================================================
# Request parsing / result building
# ============================================================
def is_json_request(request: Request) -> bool:
    return "application/json" in request.headers.get("content-type", "")

async def read_date_parts(request: Request):
    """Returns (birth_parts, target_parts) from either a JSON body or the HTML form."""
    if is_json_request(request):
        try:
            data = await request.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return DateParts.from_mapping(data.get("birth")), DateParts.from_mapping(data.get("target"))

    form = await request.form()
    birth = DateParts.from_mapping({k[len("birth_"):]: v for k, v in form.items() if k.startswith("birth_")})
    target = DateParts.from_mapping({k[len("target_"):]: v for k, v in form.items() if k.startswith("target_")})
    return birth, target

def build_result(birth, target) -> dict:
    age = compute_age(birth, target)
    zodiac = zodiac_for(birth.day, birth.month)
    payload = age.to_dict()
    payload.update({
        "birth_date_formatted": format_date_string(birth),
        "summary": describe_age(age),
        "zodiac": zodiac,
        "zodiac_range": zodiac_range(zodiac),
    })
    return payload

def render_form(request: Request, birth: Optional[DateParts] = None, target: Optional[DateParts] = None,
                result: Optional[dict] = None, error: Optional[dict] = None, status_code: int = 200):
    context = {
        "theme": get_theme(request),
        "birth": (birth or DateParts()).to_dict(),
        "target": (target or today_parts()).to_dict(),
        "result": result,
        "error": error,
    }
    return templates.TemplateResponse(request, "index.html", context, status_code=status_code)

# ============================================================
# ROUTES
# ============================================================

@app.get("/", response_class=HTMLResponse)
async def landing(request: Request):
    try:
        birth = request.session.get("last_birth")
        target = request.session.get("last_target")
        return render_form(
            request,
            birth=DateParts.from_mapping(birth) if birth else None,
            target=DateParts.from_mapping(target) if target else None,
            result=request.session.get("last_result"),
        )
    except Exception:
        log_error(f"landing() failure: {traceback.format_exc()}")
        return HTMLResponse("<h1>Calculadora da Idade</h1><p>Erro ao carregar a página.</p>", status_code=500)

@app.post("/calculate")
async def calculate(request: Request):
    json_client = is_json_request(request)
    try:
        birth_parts, target_parts = await read_date_parts(request)
        birth, target, error = check_request(birth_parts, target_parts)

        if error:
            log_debug(f"calculate rejected: {error.kind} ({error.field})")
            if json_client:
                return JSONResponse({"error": error.to_dict()}, status_code=422)
            return render_form(request, birth_parts, target_parts, error=error.to_dict(), status_code=422)

        result = build_result(birth, target)
        store_result(request, result)
        request.session["last_birth"] = birth_parts.to_dict()
        request.session["last_target"] = target_parts.to_dict()
        log_debug(f"calculate ok: {result['birth_date_formatted']} -> {result['target_date_formatted']}")

        if json_client:
            return JSONResponse({"result": result})
        return render_form(request, birth_parts, target_parts, result=result)
    except Exception:
        log_error(f"calculate() crash: {traceback.format_exc()}")
        return JSONResponse({"error": "Failed to calculate age."}, status_code=500)

@app.get("/zodiac/{day}/{month}", response_class=JSONResponse)
async def get_zodiac(day: int, month: int):
    if month < 1 or month > 12 or day < 1 or day > 31:
        return JSONResponse({"error": "invalid day/month"}, status_code=422)
    sign = zodiac_for(day, month)
    return JSONResponse({"day": day, "month": month, "zodiac": sign, "range": zodiac_range(sign)})

@app.get("/today", response_class=JSONResponse)
async def get_today():
    today = date.today()
    return JSONResponse({"today": today_parts(today).to_dict(), "formatted": format_date_string(today)})

@app.post("/theme")
async def switch_theme(request: Request):
    theme = toggle_theme(request)
    log_debug(f"theme switched to {theme}")
    if is_json_request(request):
        return JSONResponse({"theme": theme})
    return RedirectResponse("/", status_code=303)

@app.get("/reset", response_class=JSONResponse)
async def reset_session(request: Request):
    clear_result(request)
    return JSONResponse({"message": "Resultado limpo."})

@app.get("/health", response_class=JSONResponse)
async def health():
    return JSONResponse({"status": "ok"})

# ============================================================
# Startup / Shutdown
# ============================================================
@app.on_event("startup")
async def startup_event():
    log_debug("Calculadora da Idade starting...")
    if not os.path.isdir(TEMPLATES_DIR):
        log_error(f"templates directory missing at expected path: {TEMPLATES_DIR}")

@app.on_event("shutdown")
async def shutdown_event():
    log_debug("Calculadora da Idade shutting down...")

# ============================================================
# Error handlers (kept simple)
# ============================================================
@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return JSONResponse({"error": f"Endpoint not found: {request.url.path}"}, status_code=404)

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    log_error(f"500 error on {request.method} {request.url.path}: {traceback.format_exc()}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
