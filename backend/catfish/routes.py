from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Catfish game server!'})


@main.route('/api/game/state', methods=['GET'])
def get_game_state():
    """Current clock tuple, roster, host and phase durations."""
    return jsonify(current_app.extensions['catfish'].snapshot())
