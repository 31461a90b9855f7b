import logging

from dotenv import load_dotenv
from flask import Blueprint, Flask, Response, current_app, jsonify, request, stream_with_context
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from analysis import analyze_label
from config import Settings
from errors import register_error_handlers
from relay import UpstreamRelay, check_origin

# ----------------------
# Configuration
# ----------------------
load_dotenv()

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cannapliant-proxy")

# ----------------------
# Rate Limiter
# ----------------------
limiter = Limiter(key_func=get_remote_address)


def current_rate_limit():
    return current_app.config["RATE_LIMIT"]

# ----------------------
# Endpoints
# ----------------------
api = Blueprint("api", __name__, url_prefix="/api")


@api.before_request
def guard_origin():
    # Pre-flights carry no body and never reach upstream; flask-cors answers them.
    if request.method == "OPTIONS":
        return None
    check_origin(request.headers.get("Origin"), current_app.config["ALLOWED_ORIGINS"])
    return None


@api.route("/messages", methods=["POST"])
@limiter.limit(current_rate_limit)
def relay_messages():
    relay = current_app.extensions["upstream_relay"]
    upstream = relay.open(request.get_data(cache=False), request.content_type)

    resp = Response(
        stream_with_context(relay.iter_body(upstream)),
        status=upstream.status_code,
    )
    resp.call_on_close(upstream.close)
    content_type = upstream.headers.get("Content-Type")
    if content_type:
        resp.headers["Content-Type"] = content_type
    else:
        del resp.headers["Content-Type"]
    return resp


@api.route("/analyze", methods=["POST"])
@limiter.limit(current_rate_limit)
def analyze():
    settings = current_app.config["SETTINGS"]
    body, status = analyze_label(
        current_app.extensions["upstream_relay"],
        request.get_json(silent=True),
        settings.analyze_model,
        settings.analyze_max_tokens,
    )
    return jsonify(body), status


def health_check():
    return jsonify({"status": "proxy-running"}), 200

# ----------------------
# App Setup
# ----------------------
def create_app(settings=None, session=None, config=None):
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config.update(
        SETTINGS=settings,
        ALLOWED_ORIGINS=frozenset(settings.allowed_origins),
        RATE_LIMIT=settings.rate_limit,
        MAX_CONTENT_LENGTH=settings.max_body_mb * 1024 * 1024,
        RATELIMIT_STORAGE_URI="memory://",
    )
    if config:
        app.config.update(config)

    if settings.allowed_origins:
        CORS(app, resources={r"/api/*": {"origins": list(settings.allowed_origins)}},
             methods=["POST", "OPTIONS"], allow_headers=["Content-Type"])
    else:
        CORS(app, resources={r"/api/*": {"origins": "*"}}, send_wildcard=True,
             methods=["POST", "OPTIONS"], allow_headers=["Content-Type"])

    limiter.init_app(app)
    register_error_handlers(app)

    app.extensions["upstream_relay"] = UpstreamRelay(
        settings.upstream_url,
        settings.api_key,
        settings.anthropic_version,
        timeout=settings.timeout,
        session=session,
    )

    app.add_url_rule("/", "health_check", health_check, methods=["GET"])
    app.add_url_rule("/health", "health", health_check, methods=["GET"])
    app.register_blueprint(api)

    if not settings.has_credential:
        logger.error("ANTHROPIC_API_KEY is not set; /api routes will return 500")
    logger.info(
        "Relay configured for %s (%d allowed origin(s)%s)",
        settings.upstream_url,
        len(settings.allowed_origins),
        "" if settings.allowed_origins else ", open CORS",
    )
    return app


settings = Settings.from_env()
app = create_app(settings)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port)
