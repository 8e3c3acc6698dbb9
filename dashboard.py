"""Flask dashboard for the BMI calculator."""

import logging
import uuid

from flask import Flask, abort, jsonify, render_template, request, session

from bmi import BmiCategory, category_table, compute_bmi
from config import (
    BASE_DIR,
    DASHBOARD_HOST,
    DASHBOARD_PORT,
    DEBOUNCE_MS,
    GEMINI_API_KEY,
    MAX_SESSIONS,
    SECRET_KEY,
)
from gauge import build_gauge
from state import (
    SessionStore,
    apply_height_edit,
    apply_weight_edit,
    receive_tips_result,
    recalculate,
    switch_height_unit,
    switch_weight_unit,
)
from tips import get_health_tips, make_client
from units import HeightUnit, WeightUnit, height_to_m, parse_number, weight_to_kg

log = logging.getLogger(__name__)

app = Flask(__name__, template_folder=BASE_DIR / "templates")
app.secret_key = SECRET_KEY

store = SessionStore(max_sessions=MAX_SESSIONS)
tips_client = make_client(GEMINI_API_KEY)


def session_id() -> str:
    """Return this browser's calculator session id, assigning one if needed."""
    if "sid" not in session:
        session["sid"] = uuid.uuid4().hex
    return session["sid"]


def render_page_context(state) -> dict:
    return {
        "state": state,
        "categories": category_table(),
        "gauge": build_gauge(state.result.bmi) if state.result else None,
        "debounce_ms": DEBOUNCE_MS,
    }


@app.route("/")
def index():
    """Render the calculator."""
    state = store.get(session_id())
    return render_template("index.html", **render_page_context(state))


# HTMX partial routes
@app.route("/partials/weight", methods=["POST"])
def partials_weight():
    """Apply a weight edit and return the result card."""
    text = request.form.get("weight", "")
    state = store.update(session_id(), lambda s: recalculate(apply_weight_edit(s, text)))
    return render_template("partials/result.html", **render_page_context(state))


@app.route("/partials/height", methods=["POST"])
def partials_height():
    """Apply a height edit and return the result card."""
    cm = request.form.get("height_cm")
    feet = request.form.get("height_ft")
    inches = request.form.get("height_in")
    state = store.update(
        session_id(),
        lambda s: recalculate(apply_height_edit(s, cm=cm, feet=feet, inches=inches)),
    )
    return render_template("partials/result.html", **render_page_context(state))


@app.route("/partials/units/weight/<unit>", methods=["POST"])
def partials_weight_unit(unit: str):
    """Switch the weight unit and return the whole calculator."""
    try:
        weight_unit = WeightUnit(unit)
    except ValueError:
        abort(404)
    state = store.update(session_id(), lambda s: recalculate(switch_weight_unit(s, weight_unit)))
    return render_template("partials/calculator.html", **render_page_context(state))


@app.route("/partials/units/height/<unit>", methods=["POST"])
def partials_height_unit(unit: str):
    """Switch the height unit and return the whole calculator."""
    try:
        height_unit = HeightUnit(unit)
    except ValueError:
        abort(404)
    state = store.update(session_id(), lambda s: recalculate(switch_height_unit(s, height_unit)))
    return render_template("partials/calculator.html", **render_page_context(state))


@app.route("/partials/tips", methods=["POST"])
def partials_tips():
    """Fetch tips for the current result and return the tips card."""
    sid = session_id()
    state, token = store.begin_tips(sid)
    if token is not None:
        tips = get_health_tips(state.result.bmi, state.result.category, tips_client)
        state = store.update(sid, receive_tips_result, token, tips)
    return render_template("partials/tips.html", **render_page_context(state))


# JSON API routes
@app.route("/api/categories")
def api_categories():
    """Return the BMI category table."""
    return jsonify(category_table())


@app.route("/api/bmi")
def api_bmi():
    """Compute BMI and gauge geometry from query parameters."""
    try:
        weight_unit = WeightUnit(request.args.get("weight_unit", WeightUnit.KG.value))
        height_unit = HeightUnit(request.args.get("height_unit", HeightUnit.CM.value))
    except ValueError:
        return jsonify({"error": "Unknown unit"}), 400

    height = parse_number(request.args.get("height"))
    weight_kg = weight_to_kg(parse_number(request.args.get("weight")), weight_unit)
    height_m = height_to_m(
        height_unit,
        cm=height,
        feet=height,
        inches=parse_number(request.args.get("inches")),
    )

    result = compute_bmi(weight_kg, height_m)
    return jsonify(
        {
            "result": result.as_dict() if result else None,
            "gauge": build_gauge(result.bmi).as_dict() if result else None,
        }
    )


@app.route("/api/tips", methods=["POST"])
def api_tips():
    """Return health tips for a BMI value and category."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or data.get("bmi") is None or not data.get("category"):
        return jsonify({"error": "bmi and category are required"}), 400

    try:
        bmi = float(data["bmi"])
        category = BmiCategory(data["category"])
    except (TypeError, ValueError):
        return jsonify({"error": "Invalid bmi or category"}), 400

    tips = get_health_tips(bmi, category, tips_client)
    return jsonify(tips.as_dict())


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    log.info("Starting dashboard on %s:%d", DASHBOARD_HOST, DASHBOARD_PORT)
    app.run(host=DASHBOARD_HOST, port=DASHBOARD_PORT, debug=False)
