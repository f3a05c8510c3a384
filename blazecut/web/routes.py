"""HTTP routes for BlazeCut."""

import json
import logging
import queue
import threading
import uuid
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from blazecut import ffutil
from blazecut.engine import preview, process
from blazecut.errors import BlazecutError, InvalidRequest
from blazecut.manifest import preview_from_dict, request_from_dict
from blazecut.projects import ProjectStore
from blazecut.workspace import clean_temp_file

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}
# Finished jobs kept for status and result lookups; older ones are dropped
MAX_FINISHED_JOBS = 100


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("expected a JSON object body")
    return data


def _job(job_id: str) -> dict | None:
    return _jobs.get(job_id)


def _prune_jobs() -> None:
    finished = [jid for jid, job in _jobs.items() if job["status"] != "processing"]
    for jid in finished[: max(len(finished) - MAX_FINISHED_JOBS, 0)]:
        del _jobs[jid]


def _store() -> ProjectStore:
    return ProjectStore(current_app.config.get("DATA_DIR"))


@bp.route("/api/tools")
def tools():
    return jsonify(ffutil.tool_status())


@bp.route("/api/probe", methods=["POST"])
def probe():
    data = _payload()
    if "path" not in data:
        raise InvalidRequest("'path' is required")
    ffutil.check_ffmpeg()
    result = ffutil.probe(Path(data["path"]))
    return jsonify({
        "duration": result.duration,
        "width": result.width,
        "height": result.height,
        "fps": result.fps,
        "codec": result.codec,
        "bitrate": result.bitrate,
    })


@bp.route("/api/jobs", methods=["POST"])
def start_job():
    edit = request_from_dict(_payload())

    job_id = uuid.uuid4().hex[:12]
    progress_queue: queue.Queue = queue.Queue()
    cancel_event = threading.Event()
    job = {
        "status": "processing",
        "error": None,
        "progress_queue": progress_queue,
        "cancel_event": cancel_event,
    }
    _prune_jobs()
    _jobs[job_id] = job
    work_dir = Path(current_app.config["WORK_DIR"])

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(
                edit, on_progress=on_progress, work_root=work_dir, cancel_event=cancel_event
            )
            job["result"] = {
                "output_path": str(result.output_path),
                "segments_rendered": result.segments_rendered,
                "segments_skipped": result.segments_skipped,
                "transitions_applied": result.transitions_applied,
            }
            job["status"] = "done"
        except BlazecutError as e:
            job["status"] = "cancelled" if e.kind == "Cancelled" else "error"
            job["error"] = e.to_dict()
        except Exception as e:
            logger.exception("Job %s crashed", job_id)
            job["status"] = "error"
            job["error"] = {"error": "Error", "message": str(e)}
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"job_id": job_id, "status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    job = _job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    q = job["progress_queue"]

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "done":
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                else:
                    data = json.dumps(job["error"])
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    job = _job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    resp = {"status": job["status"]}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["error"]:
        resp["error"] = job["error"]
    return jsonify(resp)


@bp.route("/api/jobs/<job_id>/cancel", methods=["POST"])
def cancel_job(job_id: str):
    job = _job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    if job["status"] != "processing":
        return jsonify({"error": f"Job is already {job['status']}"}), 409
    job["cancel_event"].set()
    return jsonify({"status": "cancelling"})


@bp.route("/api/jobs/<job_id>/result")
def download_result(job_id: str):
    job = _job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    return send_file(Path(job["result"]["output_path"]).resolve(), as_attachment=False)


@bp.route("/api/preview", methods=["POST"])
def make_preview():
    req = preview_from_dict(_payload())
    path = preview(req, preview_root=Path(current_app.config["WORK_DIR"]))
    return jsonify({"path": str(path)})


@bp.route("/api/temp/clean", methods=["POST"])
def clean_temp():
    data = _payload()
    if "path" not in data:
        raise InvalidRequest("'path' is required")
    clean_temp_file(data["path"])
    return jsonify({"status": "removed"})


@bp.route("/api/projects")
def list_projects():
    return jsonify({"projects": _store().list()})


@bp.route("/api/projects/<project_id>", methods=["GET"])
def get_project(project_id: str):
    content = _store().load(project_id)
    return Response(content, mimetype="application/json")


@bp.route("/api/projects/<project_id>", methods=["PUT"])
def save_project(project_id: str):
    content = request.get_data(as_text=True)
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidRequest(f"project body is not valid JSON: {e}") from e
    _store().save(project_id, content)
    return jsonify({"status": "saved"})


@bp.route("/api/projects/<project_id>", methods=["DELETE"])
def delete_project(project_id: str):
    _store().delete(project_id)
    return jsonify({"status": "deleted"})
