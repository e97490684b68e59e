import json


def _join(sio, name, hint=0):
    sio.emit('join', json.dumps({'username': name, 'turnOrder': hint}), namespace='/')


def test_three_players_join_then_one_disconnects(flask_app, sio_factory, drain):
    alice, bob, cara = sio_factory(), sio_factory(), sio_factory()
    for sio, name in ((alice, 'Alice'), (bob, 'Bob'), (cara, 'Cara')):
        _join(sio, name)

    [(_, joined)] = drain(cara, 'joined')
    assert joined['playerCount'] == '3'
    assert joined['player']['turnOrder'] == 2

    alice.emit('roster_query', namespace='/')
    events = drain(alice)
    assert [name for name, _ in events] == ['joined', 'peer_joined', 'peer_joined', 'roster_reply']
    roster = events[-1][1]
    assert [(p['username'], p['turnOrder']) for p in roster['players']] == [('Alice', 0), ('Bob', 1), ('Cara', 2)]
    assert roster['playerCount'] == '3'
    drain(bob)

    bob.disconnect(namespace='/')

    for sio in (alice, cara):
        left = drain(sio)
        assert len(left) == 1
        name, body = left[0]
        assert name == 'peer_left'
        assert body['player']['username'] == 'Bob'
        assert body['playerCount'] == '2'

    cara.emit('roster_query', namespace='/')
    [(_, roster)] = drain(cara, 'roster_reply')
    assert [(p['username'], p['turnOrder']) for p in roster['players']] == [('Alice', 0), ('Cara', 1)]
    assert roster['playerCount'] == '2'


def test_state_change_reaches_everyone_but_sender(sio_factory, drain):
    alice, bob, lurker = sio_factory(), sio_factory(), sio_factory()
    _join(alice, 'Alice')
    _join(bob, 'Bob')
    for sio in (alice, bob, lurker):
        drain(sio)

    alice.emit('turn_change', json.dumps({'playerTurn': 1}), namespace='/')
    alice.emit('kick_force_change', json.dumps({'kickForce': 42}), namespace='/')

    assert drain(alice) == []
    assert drain(bob) == [('turn_change', {'playerTurn': 1}), ('kick_force_change', {'kickForce': 42})]
    # never joined, so no broadcasts
    assert drain(lurker) == []


def test_bad_join_is_isolated(flask_app, sio_factory, drain):
    bad, good = sio_factory(), sio_factory()
    bad.emit('join', json.dumps({'turnOrder': 0}), namespace='/')

    events = drain(bad)
    assert len(events) == 1
    name, body = events[0]
    assert name == 'join_error'
    assert 'username' in body['message']
    assert flask_app.extensions['session_router'].roster()['playerCount'] == '0'

    _join(good, 'Dana')
    [(name, body)] = drain(good)
    assert name == 'joined'
    assert body['playerCount'] == '1'
    assert drain(bad) == []


def test_malformed_state_change_replies_error(sio_factory, drain):
    alice, bob = sio_factory(), sio_factory()
    _join(alice, 'Alice')
    _join(bob, 'Bob')
    drain(alice)
    drain(bob)

    bob.emit('direction_change', '{oops', namespace='/')
    [(name, body)] = drain(bob)
    assert name == 'direction_change_error'
    assert body['message'].startswith('Error updating player direction')
    assert drain(alice) == []


def test_explicit_leave(sio_factory, drain):
    alice, bob = sio_factory(), sio_factory()
    _join(alice, 'Alice')
    _join(bob, 'Bob')
    drain(alice)
    drain(bob)

    alice.emit('leave', namespace='/')
    [(name, body)] = drain(alice)
    assert name == 'left'
    assert body['playerCount'] == '1'
    [(name, body)] = drain(bob)
    assert name == 'peer_left'
    assert body['player']['username'] == 'Alice'


def test_duplicate_join_gets_error_on_the_wire(flask_app, sio_factory, drain):
    alice, bob = sio_factory(), sio_factory()
    _join(alice, 'Alice')
    _join(bob, 'Bob')
    drain(alice)
    drain(bob)

    _join(alice, 'Alice')
    [(name, body)] = drain(alice)
    assert name == 'join_error'
    assert 'already exists' in body['message']
    assert drain(bob) == []
    assert flask_app.extensions['session_router'].roster()['playerCount'] == '2'


def test_turn_change_before_join_gets_error_on_the_wire(flask_app, sio_factory, drain):
    alice, stranger = sio_factory(), sio_factory()
    _join(alice, 'Alice')
    drain(alice)

    stranger.emit('turn_change', json.dumps({'playerTurn': 0}), namespace='/')
    [(name, body)] = drain(stranger)
    assert name == 'turn_change_error'
    assert body['message'].startswith('Error updating player turn')
    assert drain(alice) == []
    assert flask_app.extensions['session_router'].turn_state()['playerTurn'] is None
