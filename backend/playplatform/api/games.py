from flask import Blueprint, jsonify, request, current_app
from playplatform import db
from playplatform.models import Game
from playplatform.services.scores import leaderboard


games = Blueprint('games', __name__)


@games.route('/', methods=['GET'])
def list_games():
    query = Game.query
    if request.args.get('featured') in ('1', 'true'):
        query = query.filter_by(featured=True)
    return jsonify([g.to_dict() for g in query.order_by(Game.id).all()])


@games.route('/', methods=['POST'])
def create_game():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    game = Game()
    errors = game.apply_changes(data)
    if errors:
        return jsonify({'errors': errors}), 422
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game_create] game={game.id} slug={game.slug}")
    return jsonify(game.to_dict()), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    game = db.get_or_404(Game, game_id)
    return jsonify(game.to_dict())


@games.route('/<int:game_id>', methods=['PUT', 'PATCH'])
def update_game(game_id):
    game = db.get_or_404(Game, game_id)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body is required'}), 400
    errors = game.apply_changes(data)
    if errors:
        db.session.rollback()
        return jsonify({'errors': errors}), 422
    db.session.add(game)
    db.session.commit()
    return jsonify(game.to_dict())


@games.route('/<int:game_id>', methods=['DELETE'])
def delete_game(game_id):
    game = db.get_or_404(Game, game_id)
    db.session.delete(game)
    db.session.commit()
    return '', 204


@games.route('/<string:slug>/leaderboard', methods=['GET'])
def get_leaderboard(slug):
    game = Game.query.filter_by(slug=slug).first_or_404()
    default_limit = int(current_app.config.get('LEADERBOARD_LIMIT', 10))
    try:
        limit = int(request.args.get('limit', default_limit))
    except (TypeError, ValueError):
        return jsonify({'error': 'limit must be an integer'}), 400
    if limit < 1:
        return jsonify({'error': 'limit must be positive'}), 400
    return jsonify({
        'game': game.to_dict(),
        'leaderboard': leaderboard(game, limit),
    })
