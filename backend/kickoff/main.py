from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Kickoff session server!'})


@main.route('/api/session/roster', methods=['GET'])
def get_roster():
    """
    Returns the current roster in turn order with the player count as text.
    """
    return jsonify(current_app.extensions['session_router'].roster()), 200


@main.route('/api/session/state', methods=['GET'])
def get_turn_state():
    """
    Returns the last broadcast value of each shared turn field.
    """
    return jsonify(current_app.extensions['session_router'].turn_state()), 200
