from flask import Blueprint, request, jsonify
from core import store
from core.errors import NotFoundError
from core.models import Task
from core.validation import parse_task_id, validate_create, validate_update

bp = Blueprint("tasks", __name__)


def _body():
    return request.get_json(silent=True)


@bp.get("/tasks")
def list_tasks():
    return jsonify([Task.from_record(t).to_json() for t in store.list_tasks()])


@bp.post("/tasks")
def create_task():
    fields = validate_create(_body())
    record = store.create_task(**fields)
    return jsonify(Task.from_record(record).to_json()), 201


@bp.put("/tasks/<task_id>")
def update_task(task_id):
    """
    body: any subset of {title, description, status, dueDate}
    Omitted keys keep their stored value; null clears description/dueDate.
    """
    tid = parse_task_id(task_id)
    if store.get_task_by_id(tid) is None:
        raise NotFoundError()
    changes = validate_update(_body())
    record = store.update_task(tid, changes)
    if record is None:
        raise NotFoundError()
    return jsonify(Task.from_record(record).to_json())


@bp.delete("/tasks/<task_id>")
def delete_task(task_id):
    tid = parse_task_id(task_id)
    if store.get_task_by_id(tid) is None:
        raise NotFoundError()
    if not store.delete_task(tid):
        raise NotFoundError()
    return "", 204
