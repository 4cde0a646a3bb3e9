"""
Quart application exposing the guide engine to the UI.
"""

from quart import Quart, jsonify
from quart_cors import cors
from dotenv import load_dotenv

from wikiguide.config import get_config, setup_logging
from wikiguide.services.guide_service import GuideService
from wikiguide.services.session_manager import close_session
from .routes import register_blueprints

load_dotenv()

app = Quart(__name__)

cors(app, allow_origin=get_config().cors_allow_origin, allow_methods=["GET", "OPTIONS"])

# Built on first use so tests can swap in a stub before any request
guide_service: GuideService | None = None


def get_guide_service() -> GuideService:
    global guide_service
    if guide_service is None:
        guide_service = GuideService()
    return guide_service


@app.before_serving
async def startup():
    setup_logging()
    get_guide_service()
    app.logger.info("Guide service ready")


@app.after_serving
async def shutdown():
    await close_session()


@app.errorhandler(404)
async def not_found(_error):
    return jsonify({"error": "not found"}), 404


register_blueprints(app)
