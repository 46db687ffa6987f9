"""Web API routes for TakeSync."""

import json
import queue
import threading
import uuid
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from takesync.engine import EngineResult, process
from takesync.ffutil import FFprobeNotFoundError
from takesync.manifest import Manifest, OutputConfig, ScanConfig
from takesync.media import MediaItem

bp = Blueprint("web", __name__)

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


def _item_json(item: MediaItem) -> dict:
    start, end = item.start, item.end
    return {
        "path": str(item.path),
        "type": item.media_type.value if item.media_type else None,
        "duration": item.duration.total_seconds() if item.duration else None,
        "start": start.isoformat() if start else None,
        "end": end.isoformat() if end else None,
    }


def _result_json(result: EngineResult) -> dict:
    return {
        "ffprobe_version": result.ffprobe_version,
        "items_found": len(result.items),
        "groups": [
            {
                "video": _item_json(g.group.video),
                "audios": [_item_json(a) for a in g.group.audios],
                "project": g.project.target_name(),
            }
            for g in result.groups
        ],
    }


@bp.route("/api/scan", methods=["POST"])
def start_scan():
    config = request.get_json(silent=True) or {}
    directories = config.get("directories")
    if not directories or not isinstance(directories, list):
        return jsonify({"error": "'directories' must be a non-empty list"}), 400
    try:
        workers = int(config.get("workers", 4))
    except (TypeError, ValueError, OverflowError):
        workers = 0
    if workers < 1:
        return jsonify({"error": "'workers' must be a positive integer"}), 400

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id

    manifest = Manifest(
        directories=[Path(d) for d in directories],
        scan=ScanConfig(
            workers=workers,
            copy_to_tmp=bool(config.get("copy_to_tmp", False)),
        ),
        output=OutputConfig(output_dir=job_dir),
    )

    progress_queue: queue.Queue = queue.Queue()
    job = {
        "dir": job_dir,
        "status": "processing",
        "error": None,
        "progress_queue": progress_queue,
        "projects": [],
    }
    _jobs[job_id] = job

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(manifest, on_progress=on_progress)
            job["projects"] = [g.project_path for g in result.groups]
            job["result"] = _result_json(result)
            job["status"] = "done"
        except FFprobeNotFoundError as e:
            job["status"] = "error"
            job["error"] = f"ffprobe unavailable: {e}"
        except Exception as e:
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"job_id": job_id, "status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job["progress_queue"]

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {"status": job["status"]}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)


@bp.route("/api/jobs/<job_id>/projects/<int:index>")
def download_project(job_id: str, index: int):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    projects = job["projects"]
    if index >= len(projects) or projects[index] is None:
        return jsonify({"error": "Project not found"}), 404

    return send_file(
        Path(projects[index]).absolute(),
        mimetype="text/plain",
        as_attachment=True,
        download_name=Path(projects[index]).name,
    )
