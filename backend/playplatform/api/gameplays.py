from flask import Blueprint, jsonify, request
from playplatform import db
from playplatform.models import Gameplay


gameplays = Blueprint('gameplays', __name__)


@gameplays.route('/', methods=['GET'])
def list_gameplays():
    query = Gameplay.query
    for field in ('game_id', 'player_id'):
        value = request.args.get(field)
        if value is None:
            continue
        try:
            query = query.filter(getattr(Gameplay, field) == int(value))
        except ValueError:
            return jsonify({'error': f'{field} must be an integer'}), 400
    return jsonify([gp.to_dict() for gp in query.order_by(Gameplay.id).all()])


@gameplays.route('/', methods=['POST'])
def create_gameplay():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    errors = Gameplay.validate(data)
    if errors:
        return jsonify({'errors': errors}), 422
    gameplay = Gameplay(
        game_id=int(data['game_id']),
        player_id=int(data['player_id']),
        player_score=int(data['player_score']),
    )
    db.session.add(gameplay)
    db.session.commit()
    return jsonify(gameplay.to_dict()), 201
