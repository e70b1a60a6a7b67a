from flask import Flask, jsonify, request, redirect, url_for

from typedex import logger
from typedex.engine import Engine
from typedex.errors import (
    InvalidArgument,
    MalformedLocalRecord,
    SourceUnavailable,
    UnknownTypeName,
    UnresolvedIdentifier,
)


def _many(name: str) -> list[str]:
    """?x=a&x=b and ?x=a,b both give [a, b]."""
    out = []
    for v in request.args.getlist(name):
        out.extend(p for p in v.split(",") if p.strip())
    return out


def create_app(engine: Engine = None) -> Flask:
    app = Flask(__name__)
    app.config["ENGINE"] = engine or Engine()

    def eng() -> Engine:
        return app.config["ENGINE"]

    # ---- errors -> JSON --------------------------------------------------- #

    def _error(e, status):
        logger.log_action(f"{status} {request.path}: {e}")
        return jsonify({"error": type(e).__name__, "detail": str(e)}), status

    @app.errorhandler(UnresolvedIdentifier)
    @app.errorhandler(UnknownTypeName)
    def not_found(e):
        return _error(e, 404)

    @app.errorhandler(InvalidArgument)
    def bad_request(e):
        return _error(e, 400)

    @app.errorhandler(MalformedLocalRecord)
    def malformed(e):
        return _error(e, 500)

    @app.errorhandler(SourceUnavailable)
    def unavailable(e):
        return _error(e, 503)

    # ---- routes ----------------------------------------------------------- #

    @app.route('/')
    def home():
        return jsonify({"service": "typedex", "routes": sorted(
            str(r) for r in app.url_map.iter_rules() if r.endpoint != "static")})

    @app.route('/toggle_logging')
    def toggle_logging():
        logger.set_verbose(not logger.is_verbose())
        return redirect(url_for('status'))

    @app.route('/status')
    def status():
        return jsonify({
            "verbose_logging": logger.is_verbose(),
            "cached_type_relations": len(eng().relations),
        })

    @app.route('/species/search')
    def search_species():
        return jsonify(eng().search_species(request.args.get("q", ""), request.args.get("limit")))

    @app.route('/species/<name_or_id>')
    def species_detail(name_or_id):
        return jsonify(eng().get_species(name_or_id))

    @app.route('/type_effectiveness')
    def type_effectiveness():
        return jsonify(eng().type_effectiveness(
            request.args.get("attacking", ""), _many("defending")))

    @app.route('/type_tool')
    def type_tool():
        # defense up to 2 defenders, offense up to 2 attacking types
        return jsonify(eng().type_buckets(_many("defending"), _many("attacking")))

    @app.route('/counter/<target>')
    def counter(target):
        return jsonify(eng().counter_species(
            target, request.args.get("top"), request.args.get("samples")))

    @app.route('/suggest_team')
    def suggest_team():
        return jsonify(eng().suggest_team(
            _many("team"), request.args.get("weaknesses"), request.args.get("suggestions")))

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
