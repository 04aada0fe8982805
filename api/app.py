from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from retirement_model import (
    DeterministicProjector,
    InputRecord,
    InvalidInputError,
    MonteCarloConfig,
    MonteCarloSimulator,
    apply_defaults,
    load_defaults,
    normalize_keys,
)
from retirement_model.montecarlo.config import DEFAULT_BIN_WIDTH


logger = logging.getLogger(__name__)

app = Flask(__name__)

SERVICE_NAME = "retirement-model-api"


def _load_service_defaults(path: Optional[str]) -> Tuple[Dict[str, Any], Optional[str]]:
    if not path:
        return {}, None
    loaded, advisory = load_defaults(path)
    return apply_defaults({}, loaded), advisory


DEFAULTS, DEFAULTS_ADVISORY = _load_service_defaults(os.getenv("RETIREMENT_DEFAULTS_PATH"))


def _to_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def _error(message: str) -> Tuple[Any, int]:
    return jsonify({"success": False, "error": message}), 400


def _read_payload() -> Tuple[Optional[Dict[str, Any]], Optional[Tuple[Any, int]]]:
    payload = request.get_json(silent=True)
    if payload is None:
        return None, _error("Request JSON body is required")
    if not isinstance(payload, dict):
        return None, _error("Request JSON body must be an object")
    return payload, None


def _build_inputs(payload: Dict[str, Any]) -> InputRecord:
    merged = {**DEFAULTS, **normalize_keys(payload)}
    return InputRecord.from_mapping(merged)


def _projection_summary(inputs: InputRecord) -> Dict[str, Any]:
    result = DeterministicProjector(inputs).project()
    return {
        "summary": {
            "final_balance": round(result.final_balance, 2),
            "average_withdrawal_rate": round(result.average_withdrawal_rate, 4),
            "money_lasts_until_age": result.money_lasts_until_age,
            "survived": result.survived,
            "primary_benefit": round(result.primary_benefit, 2),
            "spouse_benefit": round(result.spouse_benefit, 2),
        },
        "details": {
            "inputs": inputs.to_dict(),
            "yearly_snapshots": [snapshot.to_dict() for snapshot in result.snapshots],
        },
    }


def _simulate(inputs: InputRecord, config: MonteCarloConfig) -> Dict[str, Any]:
    results = MonteCarloSimulator(inputs, config).run()
    summary = results.summarize()
    projection = DeterministicProjector(inputs).project()

    details = summary.to_dict()
    details["inputs"] = inputs.to_dict()
    return {
        "summary": {
            "success_probability": round(summary.success_rate, 4),
            "median_terminal_balance": round(summary.median, 2),
            "deterministic_final_balance": round(projection.final_balance, 2),
            "num_simulations": summary.num_simulations,
            "seed": summary.seed,
        },
        "details": details,
    }


@app.get("/health")
def health() -> Tuple[Any, int]:
    return jsonify({
        "ok": True,
        "service": SERVICE_NAME,
        "defaults_loaded": bool(DEFAULTS),
        "defaults_advisory": DEFAULTS_ADVISORY,
    }), 200


@app.post("/retirement/api/v1/project")
def project() -> Tuple[Any, int]:
    payload, error = _read_payload()
    if error is not None:
        return error
    try:
        inputs = _build_inputs(payload)
    except InvalidInputError as e:
        return _error(str(e))
    return jsonify({"success": True, **_projection_summary(inputs)}), 200


@app.post("/retirement/api/v1/simulate")
def simulate() -> Tuple[Any, int]:
    payload, error = _read_payload()
    if error is not None:
        return error
    try:
        inputs = _build_inputs(payload)
    except InvalidInputError as e:
        return _error(str(e))

    try:
        config = MonteCarloConfig(bin_width=_to_float(payload.get("bin_width"), DEFAULT_BIN_WIDTH))
    except ValueError as e:
        return _error(str(e))

    logger.debug("Simulating %d trials (seed=%s)", inputs.simulations, inputs.seed)
    return jsonify({"success": True, **_simulate(inputs, config)}), 200


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False)
