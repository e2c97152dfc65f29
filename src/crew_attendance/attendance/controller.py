from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import InvalidTransition, ValidationError
from .model import PunchEvent
from .service import TodayView

logger = logging.getLogger(__name__)


def _punch_json(p: PunchEvent) -> dict:
    return {
        "id": p.punch_id,
        "worker_id": p.worker_id,
        "kind": p.kind.value,
        "label": p.kind.label,
        "timestamp": p.timestamp.isoformat(),
        "worksite_ref": p.worksite_ref,
        "edited": p.edited,
        "note": p.note,
    }


def _today_json(view: TodayView) -> dict:
    worked = view.worked
    return {
        "worker_id": view.worker_id,
        "date": view.work_date.strftime("%Y-%m-%d"),
        "state": view.state.value if view.state else None,
        "status": view.status.value,
        "allowed": [k.value for k in view.allowed],
        "punches": [_punch_json(p) for p in view.punches],
        "worked_minutes": worked.worked_minutes if worked else 0.0,
        "worked_hours": worked.label if worked else None,
        "in_progress": bool(worked and worked.live),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/workers/<worker_id>/punches", methods=["POST"], endpoint="record_punch")
    def record_punch(worker_id: str):
        data = request.get_json(silent=True) or {}
        kind = str(data.get("kind") or "").strip()
        if not kind:
            return jsonify({"success": False, "message": "kind is required"}), 400

        try:
            punch = container.attendance_service.record_punch(
                worker_id,
                kind,
                worksite_ref=data.get("worksite_ref"),
                note=data.get("note"),
            )
        except InvalidTransition as e:
            return jsonify({
                "success": False,
                "message": str(e),
                "state": e.state.value if e.state else None,
            }), 409
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Failed to record %s punch for %s", kind, worker_id)
            return jsonify({"success": False, "message": "System error while recording punch"}), 500

        view = container.attendance_service.today(worker_id, now=punch.timestamp)
        return jsonify({
            "success": True,
            "punch": _punch_json(punch),
            "status": view.status.value,
            "allowed": [k.value for k in view.allowed],
        }), 201

    @app.route("/api/workers/<worker_id>/today", methods=["GET"], endpoint="worker_today")
    def worker_today(worker_id: str):
        try:
            view = container.attendance_service.today(worker_id)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify({"success": True, **_today_json(view)}), 200
