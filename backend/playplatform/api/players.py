from flask import Blueprint, jsonify, request
from playplatform import db
from playplatform.models import Player


players = Blueprint('players', __name__)


@players.route('/', methods=['GET'])
def list_players():
    rows = Player.query.order_by(Player.id).all()
    return jsonify([p.to_dict() for p in rows])


@players.route('/', methods=['POST'])
def create_player():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    player = Player()
    errors = player.apply_changes(data)
    if errors:
        return jsonify({'errors': errors}), 422
    db.session.add(player)
    db.session.commit()
    return jsonify(player.to_dict()), 201


@players.route('/<int:player_id>', methods=['GET'])
def get_player(player_id):
    player = db.get_or_404(Player, player_id)
    return jsonify(player.to_dict())


@players.route('/<int:player_id>', methods=['PUT', 'PATCH'])
def update_player(player_id):
    player = db.get_or_404(Player, player_id)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    errors = player.apply_changes(data)
    if errors:
        db.session.rollback()
        return jsonify({'errors': errors}), 422
    db.session.add(player)
    db.session.commit()
    return jsonify(player.to_dict())


@players.route('/<int:player_id>', methods=['DELETE'])
def delete_player(player_id):
    player = db.get_or_404(Player, player_id)
    db.session.delete(player)
    db.session.commit()
    return '', 204
