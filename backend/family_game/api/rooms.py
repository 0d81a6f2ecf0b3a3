from flask import Blueprint, jsonify
from family_game import get_engine

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room_state(room_code):
    view = get_engine().room_view(room_code)
    if view is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(view)
