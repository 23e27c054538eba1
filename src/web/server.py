"""
Web interface for SheetRoll.

Flask app exposing the dice engine and the activity log as a JSON API.
- /api/roll/<kind>: check, attack, pool and initiative rolls
- /api/formula/*: formula validation and parsing
- /api/log: activity log
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from src.core.config import Config, get_config
from src.core.event_bus import EventBus
from src.modules.activity_log import ActivityLog
from src.modules.rng import RNGModule, RandomSource
from src.web.blueprints import rolls_bp

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None,
               source: Optional[RandomSource] = None) -> Flask:
    """
    Create the Flask app.

    Args:
        config: Configuration (the global config if omitted)
        source: Random source for the RNG module (seeded from DICE_SEED if omitted)

    Returns:
        Flask app with rng_module, activity_log and event_bus attached
    """
    config = config or get_config()

    app = Flask(__name__)
    app.config['DEBUG'] = config.debug
    app.config['SHEETROLL'] = config

    # One bus, one RNG module and one log per app
    app.event_bus = EventBus()
    app.rng_module = RNGModule(source=source, config=config)
    app.rng_module.initialize(app.event_bus)
    app.activity_log = ActivityLog(
        max_entries=config.max_roll_history,
        path=config.activity_log_path
    )
    app.activity_log.attach(app.event_bus)

    app.register_blueprint(rolls_bp)

    @app.route('/api/health')
    def health():
        return jsonify({
            'success': True,
            'status': 'ok',
            'log_entries': len(app.activity_log)
        })

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    logger.info("SheetRoll API ready")
    return app


def run_server(config: Optional[Config] = None, host: Optional[str] = None,
               port: Optional[int] = None, debug: Optional[bool] = None) -> None:
    """Run the development server; arguments override the config."""
    config = config or get_config()
    app = create_app(config)

    host = host or config.host
    port = port or config.port
    debug = config.debug if debug is None else debug

    logger.info(f"Serving SheetRoll API on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)
