from __future__ import annotations
from flask import Flask, request, jsonify, Response
from pathlib import Path

import os
import time
import json
import logging
from collections import deque, defaultdict

from venturesim.api import service
from venturesim.catalog import load_catalog
from venturesim.config.env import get_projection_config, get_store_config
from venturesim.config.log import configure_logging
from venturesim.exports.bundle import mimetype_for, zip_artifacts
from venturesim.notify.outbox import OutboxNotifier
from venturesim.projection.parameters import parameters_from_dict
from venturesim.store.registry import SimulationStore

logger = logging.getLogger(__name__)

app = Flask(__name__)
configure_logging(app)

CATALOG = load_catalog()
STORE = SimulationStore.load(get_store_config().data_root)
NOTIFIER = OutboxNotifier()
OPENAPI_PATH = Path(__file__).with_name("openapi.json")

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '5'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)


def _store() -> SimulationStore:
    return app.config.get('STORE') or STORE


def _notifier():
    return app.config.get('NOTIFIER') or NOTIFIER


def _compound_growth() -> bool:
    flag = app.config.get('COMPOUND_GROWTH')
    if flag is None:
        return get_projection_config().compound_growth
    return bool(flag)


def _user_id() -> str:
    return (request.headers.get('X-User-Id') or 'anonymous').strip() or 'anonymous'


def _payload() -> dict:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))

# POST routes that create records are rate limited
_LIMITED_POSTS = ('/simulations', '/ab-tests', '/templates')


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            logger.warning(f"rejected {request.method} {request.path}: bad or missing API key")
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    # Drop old entries outside window
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        logger.warning(f"rate limited {ip} on {request.path}")
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


@app.before_request
def _auth_and_rate_limit():
    if request.path == '/openapi.json':
        return None
    unauthorized = _check_api_key()
    if unauthorized is not None:
        return unauthorized
    if request.method == 'POST' and request.path in _LIMITED_POSTS:
        rl = _check_rate_limit(_client_ip())
        if rl is not None:
            return rl
    return None


@app.errorhandler(ValueError)
def _bad_request(e: ValueError):
    logger.warning(f"bad request on {request.path}: {e}")
    return jsonify({'error': str(e)}), 400


def _not_found(what: str = 'not_found'):
    return jsonify({'error': what}), 404


# catalog & live projection

@app.get('/business-models')
def list_business_models():
    return jsonify({
        'models': [p.to_dict() for p in CATALOG.all()],
        'presets': service.list_presets(),
    })


@app.post('/projections')
def post_projection():
    return jsonify(service.run_projection(CATALOG, _payload(), _compound_growth()))


# simulations

@app.post('/simulations')
def post_simulation():
    rec, projection = service.save_simulation(_store(), _notifier(), CATALOG, _user_id(), _payload(),
                                              _compound_growth())
    return jsonify({'simulation': service.record_payload(rec), 'projection': projection}), 201


@app.get('/simulations')
def list_simulations():
    return jsonify({'simulations': [service.record_payload(r) for r in _store().list_simulations(_user_id())]})


@app.get('/simulations/<sid>')
def get_simulation(sid: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    points, metrics = service.reproject(CATALOG, rec, _compound_growth())
    body = service.record_payload(rec)
    body['points'] = [p.to_dict() for p in points]
    return jsonify(body)


@app.put('/simulations/<sid>')
def put_simulation(sid: str):
    try:
        rec = service.update_simulation(_store(), CATALOG, _user_id(), sid, _payload(), _compound_growth())
    except KeyError:
        return _not_found()
    return jsonify(service.record_payload(rec))


@app.delete('/simulations/<sid>')
def delete_simulation(sid: str):
    if not _store().delete_simulation(sid):
        return _not_found()
    return jsonify({'deleted': sid})


# versions

@app.get('/simulations/<sid>/versions')
def list_versions(sid: str):
    if _store().get_simulation(sid) is None:
        return _not_found()
    return jsonify({'versions': [v.to_dict() for v in _store().list_versions(sid)]})


@app.post('/simulations/<sid>/versions/<int:number>/restore')
def restore_version(sid: str, number: int):
    try:
        rec = _store().restore_version(sid, number)
    except KeyError:
        return _not_found()
    return jsonify(service.record_payload(rec))


# scenarios

@app.get('/simulations/<sid>/scenarios')
def list_scenarios(sid: str):
    if _store().get_simulation(sid) is None:
        return _not_found()
    return jsonify({'scenarios': [s.to_dict() for s in _store().list_scenarios(sid)]})


@app.post('/simulations/<sid>/scenarios')
def post_scenario(sid: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    scenario = service.save_scenario(_store(), CATALOG, rec, _payload(), _compound_growth())
    return jsonify(scenario.to_dict()), 201


@app.post('/simulations/<sid>/scenarios/preset')
def post_preset(sid: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    try:
        body = service.preview_preset(CATALOG, rec, str(_payload().get('preset') or ''), _compound_growth())
    except KeyError:
        return _not_found('preset_not_found')
    return jsonify(body)


# shares

@app.get('/simulations/<sid>/shares')
def list_shares(sid: str):
    if _store().get_simulation(sid) is None:
        return _not_found()
    return jsonify({'shares': [s.to_dict() for s in _store().list_shares(sid)]})


@app.post('/simulations/<sid>/shares')
def post_share(sid: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    share = service.share_simulation(_store(), _notifier(), _user_id(), rec, _payload())
    return jsonify(share.to_dict()), 201


@app.delete('/simulations/<sid>/shares/<share_id>')
def delete_share(sid: str, share_id: str):
    if not _store().remove_share(share_id, simulation_id=sid):
        return _not_found()
    return jsonify({'deleted': share_id})


# templates

@app.get('/templates')
def list_templates():
    model = request.args.get('businessModel')
    return jsonify({'templates': [t.to_dict() for t in _store().list_templates(_user_id(), model)]})


@app.post('/templates')
def post_template():
    payload = _payload()
    model = service.resolve_profile(CATALOG, payload).title
    params = payload.get('parameters') or {}
    tpl = _store().save_template(_user_id(), str(payload.get('templateName') or ''), model,
                                 parameters_from_dict(params).to_dict(),
                                 description=str(payload.get('description') or ''))
    return jsonify(tpl.to_dict()), 201


@app.delete('/templates/<tid>')
def delete_template(tid: str):
    if not _store().delete_template(tid):
        return _not_found()
    return jsonify({'deleted': tid})


# A/B tests

@app.post('/ab-tests')
def post_ab_test():
    test = service.create_ab_test(_store(), CATALOG, _user_id(), _payload())
    return jsonify(service.ab_test_payload(CATALOG, test, _compound_growth())), 201


@app.get('/ab-tests/<tid>')
def get_ab_test(tid: str):
    test = _store().get_ab_test(tid)
    if test is None:
        return _not_found()
    return jsonify(service.ab_test_payload(CATALOG, test, _compound_growth()))


# comparison & insights

@app.get('/compare')
def get_compare():
    ids = [i for i in (request.args.get('ids') or '').split(',') if i]
    return jsonify(service.compare_simulations(_store(), ids))


@app.get('/insights')
def get_insights():
    return jsonify(service.insights(_store(), _user_id()))


# exports

@app.get('/simulations/<sid>/artifacts/<name>')
def get_artifact(sid: str, name: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    body = service.simulation_artifacts(CATALOG, rec, _compound_growth()).get(name)
    if body is None:
        return _not_found('artifact_not_found')
    return Response(body, mimetype=mimetype_for(name))


@app.get('/simulations/<sid>/download.zip')
def download_zip(sid: str):
    rec = _store().get_simulation(sid)
    if rec is None:
        return _not_found()
    data = zip_artifacts(service.simulation_artifacts(CATALOG, rec, _compound_growth()))
    return Response(data, mimetype='application/zip', headers={
        'Content-Disposition': f'attachment; filename="{sid}.zip"'
    })


@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except (OSError, ValueError):
        return jsonify({'error': 'openapi_not_found'}), 404
    return jsonify(spec)


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000)
