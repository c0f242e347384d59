from __future__ import annotations

import logging
from typing import Optional

from flask import Blueprint, Flask, Response, current_app, jsonify, request
from pydantic import ValidationError

from config.settings import Settings, get_settings
from models import ApprovalUpdateRequest
from pipelines.dashboard import load_dashboard
from ports import MutationSinkPort, SheetReaderPort
from services.aggregation import filter_leads
from services.approval import ApprovalUpdater
from services.reporting import default_export_filename, export_leads_csv
from services.sink_client import build_default_sink
from sources.sheet_export import SheetExportClient
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")

REQUIRED_UPDATE_FIELDS = ("ordinal", "targetState", "postUrl", "firstName", "lastName")


def _reader() -> SheetReaderPort:
    return current_app.extensions["sheet_dashboard"]["reader"]


def _settings() -> Settings:
    return current_app.extensions["sheet_dashboard"]["settings"]


def _filtered_leads():
    data = load_dashboard(_reader(), _settings())
    return filter_leads(
        data.unified_leads,
        request.args.get("post") or None,
        request.args.get("q") or None,
    )


@api_bp.route("/dashboard", methods=["GET"])
def api_dashboard():
    data = load_dashboard(_reader(), _settings())
    return jsonify(data.model_dump(mode="json"))


@api_bp.route("/leads", methods=["GET"])
def api_leads():
    leads = _filtered_leads()
    return jsonify({"count": len(leads), "leads": [lead.model_dump(mode="json") for lead in leads]})


@api_bp.route("/leads/export", methods=["GET"])
def api_leads_export():
    leads = _filtered_leads()
    try:
        body = export_leads_csv(leads)
    except ValueError as e:
        return jsonify({"error": str(e)}), 404
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{default_export_filename()}"'},
    )


@api_bp.route("/message/update", methods=["POST"])
def api_message_update():
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return jsonify({"success": False, "error": "Invalid request", "details": "Body must be a JSON object"}), 400
    missing = [name for name in REQUIRED_UPDATE_FIELDS if body.get(name) in (None, "")]
    if missing:
        return jsonify({"success": False, "error": "Missing required fields", "details": ", ".join(missing)}), 400
    try:
        update = ApprovalUpdateRequest.model_validate(body)
    except ValidationError as e:
        return jsonify({"success": False, "error": "Invalid request", "details": str(e)}), 400

    updater: ApprovalUpdater = current_app.extensions["sheet_dashboard"]["updater"]
    result = updater.apply(update)
    return jsonify(result.to_payload()), result.http_status


def create_app(
    reader: Optional[SheetReaderPort] = None,
    sink: Optional[MutationSinkPort] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    settings = settings or get_settings()
    init_logging(settings.log_level)
    reader = reader or SheetExportClient(settings)
    if sink is None:
        sink = build_default_sink(settings)
    if sink is None:
        logger.warning("No script URL configured; approval updates will be refused", extra={"step": "web"})

    app = Flask(__name__)
    app.extensions["sheet_dashboard"] = {
        "reader": reader,
        "settings": settings,
        "updater": ApprovalUpdater(reader, sink, settings),
    }
    app.register_blueprint(api_bp)
    return app
