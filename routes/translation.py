import logging

from flask import Blueprint, current_app, jsonify, request

from services.errors import ResponseParseError, TranslationError

logger = logging.getLogger(__name__)

bp = Blueprint('translation', __name__, url_prefix='/api')


@bp.route('/analyze', methods=['POST'])
def analyze():
    """
    Translate a photographed menu/sign or a snippet of text.

    Request body:
    {
        "image": "<base64 JPEG>",   // optional, wins over text
        "text": "ผัดไทย",            // optional
        "mode": "menu",             // optional: "menu" | "sign" | "general" (others -> "menu")
        "sourceLang": "th",         // optional: "th" | "zh" (tags such as "zh-TW" accepted)
        "targetLang": "zh"          // optional
    }

    Response:
    {
        "items": [
            {
                "id": 1,
                "thai": "ผัดไทย",
                "zh": "泰式炒河粉",
                "roman": "phat thai",
                "price": "60",
                "desc": "...",
                "isSpicy": false,
                "containsShellfish": false,
                "tags": [],
                "category": "gemini-2.0-flash-exp"
            }
        ]
    }

    Errors:
        400 {"error", "kind": "BadInput"}
        500 {"error", "kind", "details"?, "raw"?}
    """
    service = current_app.extensions['translation_service']

    try:
        data = request.get_json(silent=True)
        result = service.analyze(data)
        return jsonify(result.to_dict()), 200

    except ResponseParseError as e:
        logger.error(f"{e.kind}: {e.message}; raw excerpt: {e.raw_excerpt!r}")
        return jsonify(e.to_dict()), e.status_code

    except TranslationError as e:
        if e.status_code >= 500:
            logger.error(f"{e.kind}: {e.message} ({e.details})")
        else:
            logger.info(f"Rejected analyze request: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    except Exception as e:
        logger.error(f"AI processing failed: {str(e)}", exc_info=True)
        return jsonify({
            'error': 'AI Processing Failed',
            'kind': 'ProcessingError',
            'details': str(e)
        }), 500
