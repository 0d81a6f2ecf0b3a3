from flask import Blueprint, jsonify
from family_game import get_engine

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the family game server!'})

@main.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(get_engine().list_rooms())})
