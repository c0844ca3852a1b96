from flask_socketio import emit
from flask import current_app, request
from typespeed import socketio
from typespeed.services.game import GameEngine
from typespeed.services.history import LocalHistory
from typespeed.errors import TransportError
from typespeed.services.remote import ScoreClient
from typing import Dict, Any, Optional


_engines: Dict[str, GameEngine] = {}
_histories: Dict[str, LocalHistory] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _history_for(app) -> LocalHistory:
    path = app.config.get('LOCAL_HISTORY_DIR', 'history')
    if path not in _histories:
        _histories[path] = LocalHistory(path, int(app.config.get('LOCAL_HISTORY_LIMIT', 50)))
    return _histories[path]


def _level_seconds(app) -> Dict[str, int]:
    cfg = app.config
    return {
        'Easy': int(cfg.get('EASY_SECONDS', 5)),
        'Normal': int(cfg.get('NORMAL_SECONDS', 3)),
        'Hard': int(cfg.get('HARD_SECONDS', 2)),
    }


def _countdown_worker(sid: str, generation: int) -> None:
    # One tick per second until the word is answered, expires or is replaced
    while True:
        socketio.sleep(1)
        engine = _engines.get(sid)
        if engine is None:
            return
        remaining = engine.tick(generation)
        if remaining is None or remaining <= 0:
            return


def _engine_for(sid: str, namespace: str) -> GameEngine:
    engine = _engines.get(sid)
    if engine is not None:
        return engine

    app = current_app._get_current_object()

    def listener(event: str, payload: Dict[str, Any]) -> None:
        # socketio.emit works from request handlers and background tasks alike
        socketio.emit(event, payload, to=sid, namespace=namespace)

    def scheduler(generation: int) -> None:
        socketio.start_background_task(_countdown_worker, sid, generation)

    base_url = app.config.get('SCORE_SERVICE_URL')
    client = ScoreClient(base_url, float(app.config.get('REMOTE_TIMEOUT_SEC', 5))) if base_url else None
    engine = GameEngine(
        history=_history_for(app),
        level_seconds=_level_seconds(app),
        score_client=client,
        listener=listener,
        # Tests drive the countdown with explicit tick events
        scheduler=None if app.config.get('TESTING') else scheduler,
    )
    _engines[sid] = engine
    return engine


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    engine = _engines.pop(_get_sid(), None)
    if not engine:
        return
    # Abandoned rounds are not recorded
    engine.countdown.cancel()
    if engine.score_client is not None:
        engine.score_client.close()


def handle_start_round(data):
    level = (data or {}).get('level') or 'Normal'
    engine = _engine_for(_get_sid(), request.namespace)
    try:
        engine.start_round(level)
    except ValueError as exc:
        emit('error', {'message': str(exc)})


def handle_input(data):
    engine = _engines.get(_get_sid())
    if engine:
        engine.update_input((data or {}).get('text'))


def handle_submit_answer(data):
    engine = _engines.get(_get_sid())
    if not engine or not engine.active:
        emit('error', {'message': 'No active round'})
        return
    engine.submit_answer((data or {}).get('text'))


def handle_tick(data=None):
    engine = _engines.get(_get_sid())
    if engine:
        engine.tick()


def _remote_history(data) -> Optional[Dict[str, Any]]:
    base_url = current_app.config.get('SCORE_SERVICE_URL')
    if not base_url:
        return None
    client = ScoreClient(base_url, float(current_app.config.get('REMOTE_TIMEOUT_SEC', 5)))
    try:
        return client.fetch(
            level=data.get('level'),
            limit=data.get('limit'),
            include_statistics=bool(data.get('includeStatistics')),
        )
    except TransportError as exc:
        # Local history stays authoritative
        current_app.logger.warning(f"[history-remote] fetch failed: {exc}")
        return None
    finally:
        client.close()


def handle_get_history(data=None):
    history = _history_for(current_app)
    payload = {'scores': [r.model_dump() for r in history.list()]}
    remote = _remote_history(data or {})
    if remote is not None:
        payload['remote'] = remote.get('scores', [])
        if 'statistics' in remote:
            payload['statistics'] = remote['statistics']
    emit('history', payload)


def handle_clear_history(data=None):
    history = _history_for(current_app)
    history.clear()
    emit('history', {'scores': []})


def handle_get_stats(data=None):
    engine = _engine_for(_get_sid(), request.namespace)
    emit('stats', engine.snapshot())


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' and expose a manual 'tick' event
    in place of the background countdown.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('start_round', handle_start_round, namespace=ns)
        socketio.on_event('input', handle_input, namespace=ns)
        socketio.on_event('submit_answer', handle_submit_answer, namespace=ns)
        socketio.on_event('get_history', handle_get_history, namespace=ns)
        socketio.on_event('clear_history', handle_clear_history, namespace=ns)
        socketio.on_event('get_stats', handle_get_stats, namespace=ns)
        if testing:
            socketio.on_event('tick', handle_tick, namespace=ns)
