# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Web Interface
JSON API behind the journal, dashboard, badge wall and dream graph screens.
Secured with DREAMWEAVER_SECRET env var — all API requests must authenticate.
"""

import logging
import os
import sys
from functools import wraps

from flask import Flask, jsonify, request
from pydantic import ValidationError

from journal import analysis
from journal.draft import DreamDraft, TAG_CATEGORIES, tag_options
from journal.journal import get_journal
from journal.schemas import (
    AnalysisError, AnalysisInProgressError,
    DreamweaverNotFoundError, DreamweaverValidationError,
)

logger = logging.getLogger("dreamweaver.interface.web")

app = Flask(__name__)

# Auth secret from env var
DREAMWEAVER_SECRET = os.environ.get("DREAMWEAVER_SECRET", "")


def require_auth(f):
    """Decorator: require valid secret on API endpoints."""
    @wraps(f)
    def decorated(*args, **kwargs):
        if not DREAMWEAVER_SECRET:
            return jsonify({"error": "DREAMWEAVER_SECRET not configured"}), 503

        provided = request.headers.get("X-Dreamweaver-Secret", "")
        if not provided:
            provided = request.args.get("secret", "")

        if provided != DREAMWEAVER_SECRET:
            return jsonify({"error": "unauthorized"}), 401

        return f(*args, **kwargs)
    return decorated


@app.after_request
def add_header(response):
    """Prevent caching for all dynamic content."""
    response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'
    response.headers['Pragma'] = 'no-cache'
    response.headers['Expires'] = '0'
    return response


def _dream_summary(dream) -> dict:
    return {
        "id": dream.id,
        "date": dream.date,
        "preview": dream.preview(),
        "fragment_count": dream.fragment_count,
    }


# --- Journal routes ---

@app.route('/api/dreams')
@require_auth
def api_list_dreams():
    """All dreams, newest first, as journal-list summaries."""
    dreams = get_journal().dreams
    return jsonify({"dreams": [_dream_summary(d) for d in dreams], "count": len(dreams)})


@app.route('/api/dreams/<dream_id>')
@require_auth
def api_get_dream(dream_id):
    try:
        dream = get_journal().get(dream_id)
    except DreamweaverNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(dream.model_dump(mode="json", by_alias=True))


@app.route('/api/dreams', methods=['POST'])
@require_auth
def api_record_dream():
    """Analyze a draft and record it. Blocks until the analysis returns."""
    data = request.get_json(silent=True) or {}
    try:
        draft = DreamDraft.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": f"invalid draft: {e.error_count()} field error(s)"}), 400

    journal = get_journal()
    try:
        dream = journal.submit(draft)
    except DreamweaverValidationError as e:
        return jsonify({"error": str(e)}), 400
    except AnalysisInProgressError as e:
        return jsonify({"error": str(e)}), 409
    except AnalysisError as e:
        return jsonify({"error": str(e)}), 502

    return jsonify(dream.model_dump(mode="json", by_alias=True)), 201


@app.route('/api/dreams/<dream_id>', methods=['DELETE'])
@require_auth
def api_delete_dream(dream_id):
    try:
        get_journal().delete(dream_id)
    except DreamweaverNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"success": True})


# --- View routes ---

@app.route('/api/dashboard')
@require_auth
def api_dashboard():
    return jsonify(get_journal().dashboard())


@app.route('/api/badges')
@require_auth
def api_badges():
    journal = get_journal()
    return jsonify({
        "badges": [b.model_dump() for b in journal.badges()],
        "unlocked_count": len(journal.unlocked_badges()),
    })


@app.route('/api/badges/<badge_id>')
@require_auth
def api_badge(badge_id):
    try:
        badge = get_journal().badge(badge_id)
    except DreamweaverNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(badge.model_dump())


@app.route('/api/graph')
@require_auth
def api_graph():
    """Nodes and links for the force-directed relationship view."""
    return jsonify(get_journal().graph().to_render_dict())


@app.route('/api/tags')
@require_auth
def api_tags():
    """Tag options per category; ?characters=a,b adds custom selections."""
    options = {}
    for category in TAG_CATEGORIES:
        selected = tuple(t.strip() for t in request.args.get(category, "").split(",") if t.strip())
        options[category] = tag_options(category, selected)
    return jsonify(options)


@app.route('/api/analysis/status')
@require_auth
def api_analysis_status():
    info = analysis.status()
    info["analyzing"] = get_journal().analyzing
    return jsonify(info)


def run_server(host='127.0.0.1', port=5000, debug=False):
    """Run the web server."""
    if not DREAMWEAVER_SECRET:
        logger.error("DREAMWEAVER_SECRET env var not set. Refusing to start.")
        logger.error("Set it: export DREAMWEAVER_SECRET=$(python3 -c \"import secrets; print(secrets.token_urlsafe(32))\")")
        sys.exit(1)

    logger.info("Dreamweaver web interface starting on http://%s:%s", host, port)
    logger.info("Auth: all API endpoints require X-Dreamweaver-Secret header")
    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == '__main__':
    run_server(debug=True)
