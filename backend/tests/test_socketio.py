def _named(events, name):
    return [e['args'][0] for e in events if e['name'] == name]


def _start(sio_client, level='Easy'):
    sio_client.get_received('/ws')  # flush
    sio_client.emit('start_round', {'level': level}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert _named(received, 'round_started')
    return _named(received, 'word')[-1]


def test_socket_connect(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_start_round_and_wrong_answer(sio_client):
    word = _start(sio_client)
    assert word['seconds'] == 5
    assert word['total'] == 30
    assert len(word['upcoming']) == 10

    sio_client.emit('submit_answer', {'text': 'zzzz'}, namespace='/ws')
    ended = _named(sio_client.get_received('/ws'), 'round_ended')
    assert ended and ended[0]['success'] is False
    assert ended[0]['score'] == 0


def test_correct_answer_draws_next_word(sio_client):
    word = _start(sio_client)
    sio_client.emit('submit_answer', {'text': word['word']}, namespace='/ws')
    nxt = _named(sio_client.get_received('/ws'), 'word')
    assert nxt and nxt[0]['score'] == 1
    assert nxt[0]['word'] != word['word']


def test_timeout_uses_typed_input(sio_client):
    word = _start(sio_client)
    sio_client.emit('input', {'text': word['word']}, namespace='/ws')
    for _ in range(word['seconds']):
        sio_client.emit('tick', namespace='/ws')
    received = sio_client.get_received('/ws')
    assert [t['remaining'] for t in _named(received, 'tick')] == [4, 3, 2, 1, 0]
    assert _named(received, 'word')[0]['score'] == 1


def test_invalid_answer_reports_error(sio_client):
    _start(sio_client)
    sio_client.emit('submit_answer', {'text': 'abc123'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    errors = _named(received, 'validation_error')
    assert errors[0]['reason'] == 'non-alphabetic'
    assert _named(received, 'word')[0]['score'] == 0


def test_history_and_clear(sio_client):
    _start(sio_client)
    sio_client.emit('submit_answer', {'text': 'zzzz'}, namespace='/ws')
    sio_client.get_received('/ws')

    sio_client.emit('get_history', namespace='/ws')
    history = _named(sio_client.get_received('/ws'), 'history')[0]
    assert len(history['scores']) == 1
    assert history['scores'][0]['level'] == 'Easy'

    sio_client.emit('clear_history', namespace='/ws')
    assert _named(sio_client.get_received('/ws'), 'history')[0]['scores'] == []


def test_errors_without_round_or_with_bad_level(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('submit_answer', {'text': 'hello'}, namespace='/ws')
    assert _named(sio_client.get_received('/ws'), 'error')

    sio_client.emit('start_round', {'level': 'Extreme'}, namespace='/ws')
    errors = _named(sio_client.get_received('/ws'), 'error')
    assert 'Extreme' in errors[0]['message']


def test_stats(sio_client):
    _start(sio_client, level='Hard')
    sio_client.emit('get_stats', namespace='/ws')
    stats = _named(sio_client.get_received('/ws'), 'stats')[0]
    assert stats['level'] == 'Hard'
    assert stats['active'] is True
    assert stats['total'] == 25


def test_countdown_worker_ignores_stale_generation(make_engine, monkeypatch):
    from typespeed import socketio_events
    monkeypatch.setattr(socketio_events.socketio, 'sleep', lambda seconds: None)
    engine = make_engine(seconds=2)
    engine.start_round('Easy')
    stale = engine.countdown.generation
    engine.submit_answer(engine.state.current_word)
    monkeypatch.setitem(socketio_events._engines, 'sid-1', engine)

    socketio_events._countdown_worker('sid-1', stale)
    assert engine.countdown.remaining == 2
    assert engine.state.score == 1

    engine.update_input('zzzz')
    socketio_events._countdown_worker('sid-1', engine.countdown.generation)
    assert not engine.active
    assert engine.state.score == 1


def test_background_countdown_outside_testing(tmp_path, monkeypatch):
    from typespeed import create_app, socketio, socketio_events

    class LiveConfig:
        TESTING = False
        SECRET_KEY = 'live-secret'
        SQLALCHEMY_DATABASE_URI = 'sqlite://'
        SQLALCHEMY_TRACK_MODIFICATIONS = False
        HARD_SECONDS = 2
        LOCAL_HISTORY_DIR = str(tmp_path / 'history')
        SCORE_SERVICE_URL = ''

    scheduled = []
    original = socketio.start_background_task

    def start_background_task(target, *args, **kwargs):
        if target is socketio_events._countdown_worker:
            scheduled.append(args)
            return None
        return original(target, *args, **kwargs)

    monkeypatch.setattr(socketio, 'start_background_task', start_background_task)
    monkeypatch.setattr(socketio, 'sleep', lambda seconds: None)

    live_app = create_app(LiveConfig)
    live_client = socketio.test_client(live_app, namespace='/ws')
    try:
        live_client.emit('start_round', {'level': 'Hard'}, namespace='/ws')
        assert len(scheduled) == 1
        live_client.get_received('/ws')

        live_client.emit('input', {'text': 'zzzz'}, namespace='/ws')
        socketio_events._countdown_worker(*scheduled[-1])
        received = live_client.get_received('/ws')
        assert [t['remaining'] for t in _named(received, 'tick')] == [1, 0]
        ended = _named(received, 'round_ended')
        assert ended and ended[0]['success'] is False
        assert len(scheduled) == 1
    finally:
        live_client.disconnect(namespace='/ws')


class _FakeScoreClient:
    calls = []
    fail = False

    def __init__(self, base_url, timeout=5.0):
        self.base_url = base_url

    def fetch(self, level=None, limit=None, include_statistics=False):
        from typespeed.errors import TransportError
        self.calls.append((level, limit, include_statistics))
        if self.fail:
            raise TransportError('connection refused')
        return {
            'success': True,
            'count': 1,
            'scores': [{'id': 1, 'level': 'Hard', 'score': 3, 'total': 25, 'percentage': 12, 'date': 'd'}],
            'statistics': [],
        }

    def close(self):
        pass


def test_history_includes_remote_scores(flask_app, sio_client, monkeypatch):
    from typespeed import socketio_events
    monkeypatch.setattr(socketio_events, 'ScoreClient', _FakeScoreClient)
    monkeypatch.setattr(_FakeScoreClient, 'calls', [])
    flask_app.config['SCORE_SERVICE_URL'] = 'http://scores.test'
    sio_client.get_received('/ws')

    sio_client.emit('get_history', {'level': 'Hard', 'includeStatistics': True}, namespace='/ws')
    history = _named(sio_client.get_received('/ws'), 'history')[0]
    assert history['scores'] == []
    assert history['remote'][0]['id'] == 1
    assert history['statistics'] == []
    assert _FakeScoreClient.calls == [('Hard', None, True)]


def test_history_without_remote_on_transport_error(flask_app, sio_client, monkeypatch):
    from typespeed import socketio_events
    monkeypatch.setattr(socketio_events, 'ScoreClient', _FakeScoreClient)
    monkeypatch.setattr(_FakeScoreClient, 'fail', True)
    flask_app.config['SCORE_SERVICE_URL'] = 'http://scores.test'
    sio_client.get_received('/ws')

    sio_client.emit('get_history', namespace='/ws')
    history = _named(sio_client.get_received('/ws'), 'history')[0]
    assert history == {'scores': []}
