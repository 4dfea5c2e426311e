from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from playplatform import db
from playplatform.models import Player
from playplatform.services.scores import player_token

auth = Blueprint('auth', __name__)

@auth.route('/')
def index():
    return jsonify({'message': 'Welcome to the PlayPlatform server!'})

@auth.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    player = Player()
    errors = player.apply_changes(data, registration=True)
    if errors:
        return jsonify({'errors': errors}), 422

    db.session.add(player)
    db.session.commit()
    login_user(player, remember=True)
    return jsonify(player.to_dict()), 201

@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    username = data.get('username')
    player = Player.query.filter_by(username=username).first() if isinstance(username, str) else None
    if player and player.check_password(data.get('password')):
        login_user(player, remember=True)
        return jsonify(player.to_dict())
    return jsonify({'error': 'Invalid username or password'}), 401

@auth.route('/check_login', methods=['GET'])
def check_login():
    if not current_user.is_authenticated:
        return jsonify({'error': 'Not logged in'}), 401
    return jsonify(current_user.to_dict())

@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})

@auth.route('/token', methods=['GET'])
@login_required
def token():
    """Signed player token for joining a score topic over the socket."""
    return jsonify({'token': player_token(current_user)})
