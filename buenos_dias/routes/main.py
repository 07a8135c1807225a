from datetime import datetime, timezone
import threading

from flask import Blueprint, current_app, jsonify, request

from ..errors import ConfigurationError
from ..tasks.pipeline import build_pipeline

main_bp = Blueprint('main', __name__)


def get_store():
    return current_app.extensions['article_store']


def get_pipeline():
    """Build the curation pipeline; an app.extensions['pipeline_factory'] entry overrides the wiring."""
    factory = current_app.extensions.get('pipeline_factory', build_pipeline)
    return factory(current_app.config, get_store())


def _start_background(target, **kwargs):
    app = current_app._get_current_object()

    def runner():
        try:
            target(**kwargs)
        except ConfigurationError as e:
            app.logger.error(f"Background run aborted: {e}")
        except Exception as e:
            app.logger.error(f"Background run failed: {e}", exc_info=True)

    thread = threading.Thread(target=runner)
    thread.daemon = True  # Allow main program to exit even if thread is running
    thread.start()
    return thread


@main_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    mongo_status = "connected" if get_store().ping() else "disconnected"
    google_api_key_status = "present" if current_app.config.get('GOOGLE_API_KEY') else "missing"

    return jsonify({
        "status": "ok",
        "dependencies": {
            "mongodb": mongo_status,
            "google_ai_key": google_api_key_status
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), 200


@main_bp.route('/scrape', methods=['POST'])
def trigger_scrape():
    """
    API endpoint to trigger sitemap collection and article extraction.
    Optional JSON body: {"sources": ["newyorker"], "limit": 50}
    """
    data = request.get_json(silent=True) or {}
    try:
        pipeline = get_pipeline()
    except ConfigurationError as e:
        return jsonify({"error": "Failed to initiate scraping task", "details": str(e)}), 500

    _start_background(
        pipeline.scrape,
        sources=data.get('sources') or current_app.config.get('SCRAPE_SOURCES'),
        limit=data.get('limit', current_app.config.get('SCRAPE_LIMIT', 50)),
    )
    return jsonify({"message": "News scraping initiated successfully!", "status": "processing"}), 202


@main_bp.route('/process', methods=['POST'])
def trigger_processing():
    """
    API endpoint to trigger AI analysis, ranking and bundle generation.
    """
    try:
        pipeline = get_pipeline()
    except ConfigurationError as e:
        return jsonify({"error": "Failed to initiate processing task", "details": str(e)}), 500

    _start_background(pipeline.curate)
    return jsonify({"message": "AI content processing initiated successfully!", "status": "processing"}), 202


@main_bp.route('/bundles/latest', methods=['GET'])
def get_latest_bundle():
    bundle = get_store().read_latest_bundle()
    if bundle is None:
        return jsonify({"content": None}), 200
    return jsonify({"content": bundle.model_dump(mode="json")}), 200


@main_bp.route('/bundles/latest/publish', methods=['POST'])
def publish_latest_bundle():
    if not get_store().mark_latest_published():
        return jsonify({"success": False, "message": "No processed content to publish"}), 404
    return jsonify({"success": True, "message": "AI content published"}), 200
