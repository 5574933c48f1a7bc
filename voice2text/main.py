"""
HTTP entrypoints for the voice-to-text service.

Routes:

* ``POST /audio2text`` – recognise the voice attachment of a message and
  return the text.  Intended for bots that call the service explicitly.
* ``POST /webhook`` – automatic recognition for every incoming message.
  Messages without audio are ignored and an empty transcript is replaced
  with a "speak louder" prompt.  Only registered when ``AUTO_RECOGNIZE`` is
  ``true``.
* ``GET /healthz`` – liveness probe.

Both recognition routes take a JSON body of the form::

    {"platform": "telegram",
     "elements": [{"type": "audio", "attrs": {"src": "data:audio/ogg;base64,..."}}]}

Environment variables are documented in :mod:`voice2text.config`.
"""

import json
import logging
import os
from typing import Optional

from flask import Flask, jsonify, request

from . import messages
from .config import Settings, load_settings
from .errors import Voice2TextError
from .models import Message
from .tasks import NO_AUDIO_FOUND, Transcriber

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(message)s")


def _read_message() -> Message:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return Message.from_dict(data)


def create_app(settings: Optional[Settings] = None, transcriber: Optional[Transcriber] = None) -> Flask:
    """Build the Flask app.

    The auto-recognition webhook is only registered when
    ``settings.auto_recognize`` is set, so a deployment used purely as a
    service does not answer every chat message.
    """
    settings = settings or load_settings()
    transcriber = transcriber or Transcriber(settings)
    app = Flask(__name__)

    def recognise(message: Message):
        logger.info(json.dumps({"event": "recognise", "platform": message.platform}))
        try:
            return transcriber.audio2text(message), None
        except Voice2TextError as exc:
            logger.exception("Recognition failed")
            return None, (jsonify({"error": str(exc)}), 500)
        except Exception as exc:
            logger.exception("Error in recognition")
            return None, (jsonify({"error": f"Server error: {exc}"}), 500)

    @app.route("/audio2text", methods=["POST"])
    def audio2text_route():
        try:
            message = _read_message()
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        text, error = recognise(message)
        if error:
            return error
        if text == NO_AUDIO_FOUND:
            logger.info(json.dumps({"event": "no_audio", "platform": message.platform}))
            return jsonify({"text": "", "audio": False}), 200
        logger.info(json.dumps({"event": "recognised", "chars": len(text)}))
        return jsonify({"text": text, "audio": True}), 200

    if settings.auto_recognize:

        @app.route("/webhook", methods=["POST"])
        def webhook_route():
            try:
                message = _read_message()
            except ValueError as exc:
                return jsonify({"error": str(exc)}), 400
            if message.first_audio() is None:
                return jsonify({"status": "ignored"}), 200
            text, error = recognise(message)
            if error:
                return error
            if text == "":
                text = messages.text(messages.LOUDER, settings.locale)
            return jsonify({"status": "ok", "text": text}), 200

        logger.info(json.dumps({"event": "auto_recognize_enabled"}))

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify({"status": "ok"}), 200

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, threaded=True)
