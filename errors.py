from flask import jsonify


class RelayError(Exception):
    """Failure raised before any upstream bytes reach the caller."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_response(self):
        return jsonify({"error": self.message}), self.status_code


class ForbiddenOrigin(RelayError):
    status_code = 403
    message = "Origin not allowed"


class MissingCredential(RelayError):
    status_code = 500
    message = "ANTHROPIC_API_KEY is not set on the server."


class UpstreamUnreachable(RelayError):
    status_code = 502
    message = "Failed to reach Anthropic API."


class InvalidAnalysisRequest(RelayError):
    status_code = 400
    message = "Missing image data"


class UnreadableVerdict(RelayError):
    status_code = 502
    message = "Model response did not contain a readable JSON verdict."


def register_error_handlers(app):
    @app.errorhandler(RelayError)
    def handle_relay_error(err):
        return err.to_response()

    @app.errorhandler(413)
    def handle_too_large(err):
        return jsonify({"error": "Request body too large"}), 413

    @app.errorhandler(429)
    def handle_rate_limited(err):
        return jsonify({"error": f"Rate limit exceeded ({err.description})"}), 429
