"""
Guide routes: city guide, search and the lower-level building blocks.
"""

from quart import Blueprint, request, jsonify

guide = Blueprint('guide', __name__)

MAX_LIMIT = 50


def register(app):
    """Register the guide blueprint with the app"""
    app.register_blueprint(guide)


def _service():
    from wikiguide.src import app as app_module
    return app_module.get_guide_service()


def _limit(default: int) -> int:
    try:
        value = int(request.args.get("limit", default))
    except (TypeError, ValueError):
        return default
    return max(1, min(value, MAX_LIMIT))


def _city():
    return (request.args.get("city") or "").strip()


def _lang():
    return request.args.get("lang") or None


@guide.route("/api/guide", methods=["GET"])
async def get_guide():
    """Full city guide.
    Query params: city, lang
    Returns: { guide: {...} } or 404 when no source has the place
    """
    city = _city()
    if not city:
        return jsonify({"error": "city required"}), 400

    result = await _service().get_city_guide(city, _lang())
    if result is None:
        return jsonify({"error": f"no guide found for {city}"}), 404
    return jsonify({"guide": result.to_dict()})


@guide.route("/api/cities/search", methods=["GET"])
async def search_cities():
    """Typeahead search. Query params: q, lang, limit"""
    query = (request.args.get("q") or "").strip()
    if not query:
        return jsonify({"error": "q required"}), 400

    results = await _service().search_cities(query, _lang(), _limit(10))
    return jsonify({"results": [r.to_dict() for r in results]})


@guide.route("/api/article", methods=["GET"])
async def get_article():
    city = _city()
    if not city:
        return jsonify({"error": "city required"}), 400

    article = await _service().get_wikipedia_article(city, _lang())
    if article is None:
        return jsonify({"error": f"no article found for {city}"}), 404
    return jsonify({"article": article.to_dict()})


@guide.route("/api/sections", methods=["GET"])
async def get_sections():
    city = _city()
    if not city:
        return jsonify({"error": "city required"}), 400

    sections = await _service().get_article_sections(city, _lang())
    return jsonify({"sections": [s.to_dict() for s in sections]})


@guide.route("/api/images", methods=["GET"])
async def get_images():
    city = _city()
    if not city:
        return jsonify({"error": "city required"}), 400

    images = await _service().get_article_images(city, _lang(), _limit(10))
    return jsonify({"images": [i.to_dict() for i in images]})


@guide.route("/api/tips", methods=["GET"])
async def get_tips():
    city = _city()
    if not city:
        return jsonify({"error": "city required"}), 400

    tips = await _service().get_travel_tips(city, _lang())
    return jsonify({"tips": tips})


@guide.route("/api/health", methods=["GET"])
async def health():
    service = _service()
    return jsonify({
        "status": "ok",
        "cache_entries": len(service.cache),
        "providers": [
            {"name": m.name, "capabilities": list(m.capabilities)}
            for m in service.provider_metadata()
        ],
    })
